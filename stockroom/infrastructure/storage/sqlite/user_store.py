"""SQLite implementation of user storage."""

import json
from datetime import UTC, datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.user import User, UserPreferences, UserRole
from stockroom.core.exceptions import ConflictError
from stockroom.core.interfaces.user_store import IUserStore
from stockroom.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


def _conflict_from(error: aiosqlite.IntegrityError) -> ConflictError | None:
    message = str(error)
    if "users.username" in message:
        return ConflictError("Username already taken", details={"field": "username"})
    if "users.email" in message:
        return ConflictError("Email already taken", details={"field": "email"})
    return None


class SQLiteUserStore(SQLiteStore, IUserStore):
    """SQLite implementation of user account storage."""

    async def create_user(self, user: User) -> User:
        """
        Create a new user.

        Raises:
            ConflictError: username or email already exists
        """
        now = datetime.now(UTC)
        user.created_at = now
        user.updated_at = now
        try:
            async with self._writing() as conn:
                cursor = await conn.execute(
                    """
                    INSERT INTO users (
                        username, email, password_hash, first_name, last_name,
                        role, preferences, last_login, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.username,
                        user.email,
                        user.password_hash,
                        user.first_name,
                        user.last_name,
                        user.role.value,
                        user.preferences.model_dump_json(),
                        to_db_timestamp(user.last_login),
                        to_db_timestamp(user.created_at),
                        to_db_timestamp(user.updated_at),
                    ),
                )
                user.id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            conflict = _conflict_from(e)
            if conflict is None:
                raise
            raise conflict from e

        logger.info("user_created", user_id=user.id, username=user.username)
        return user

    async def get_user(self, user_id: int) -> User | None:
        """Get user by ID."""
        return await self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    async def get_users(self, user_ids: list[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        placeholders = ", ".join("?" for _ in user_ids)
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM users WHERE id IN ({placeholders})",
                list(user_ids),
            )
            rows = await cursor.fetchall()
            return {row["id"]: self._row_to_user(row) for row in rows}

    async def get_by_username(self, username: str) -> User | None:
        return await self._fetch_one("SELECT * FROM users WHERE username = ?", (username,))

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email. The column collates case-insensitively."""
        return await self._fetch_one("SELECT * FROM users WHERE email = ?", (email,))

    async def get_by_identifier(self, identifier: str) -> User | None:
        """Get user by username or email."""
        return await self._fetch_one(
            "SELECT * FROM users WHERE username = ? OR email = ? LIMIT 1",
            (identifier, identifier),
        )

    async def update_user(self, user: User) -> User:
        """
        Update user.

        Raises:
            ConflictError: new username or email belongs to another user
        """
        user.updated_at = datetime.now(UTC)
        try:
            async with self._writing() as conn:
                await conn.execute(
                    """
                    UPDATE users SET
                        username = ?,
                        email = ?,
                        password_hash = ?,
                        first_name = ?,
                        last_name = ?,
                        role = ?,
                        preferences = ?,
                        last_login = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.username,
                        user.email,
                        user.password_hash,
                        user.first_name,
                        user.last_name,
                        user.role.value,
                        user.preferences.model_dump_json(),
                        to_db_timestamp(user.last_login),
                        to_db_timestamp(user.updated_at),
                        user.id,
                    ),
                )
        except aiosqlite.IntegrityError as e:
            conflict = _conflict_from(e)
            if conflict is None:
                raise
            raise conflict from e

        logger.debug("user_updated", user_id=user.id)
        return user

    async def _fetch_one(self, sql: str, params: tuple) -> User | None:
        async with self._reading() as conn:
            cursor = await conn.execute(sql, params)
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    @staticmethod
    def _row_to_user(row: aiosqlite.Row) -> User:
        """Convert a database row to a User entity."""
        try:
            preferences = UserPreferences(**json.loads(row["preferences"] or "{}"))
        except (json.JSONDecodeError, TypeError, ValueError):
            preferences = UserPreferences()

        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            role=UserRole(row["role"]),
            preferences=preferences,
            last_login=from_db_timestamp(row["last_login"]),
            created_at=from_db_timestamp(row["created_at"]) or datetime.now(UTC),
            updated_at=from_db_timestamp(row["updated_at"]) or datetime.now(UTC),
        )
