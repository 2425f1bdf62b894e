"""Shared plumbing for SQLite stores."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import aiosqlite

from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool


def to_db_timestamp(value: datetime | None) -> str | None:
    """Serialize a timestamp as UTC ISO-8601 with fixed precision."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    """Parse a stored timestamp back into an aware UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (ValueError, TypeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class SQLiteStore:
    """
    Base class for stores.

    A store constructed with ``conn`` runs every statement on that
    connection and never commits; the owning unit of work does. Without
    ``conn`` each call borrows a connection from the pool and commits its
    own writes.
    """

    def __init__(
        self,
        conn: aiosqlite.Connection | None = None,
        pool: ConnectionPool | None = None,
    ):
        self._conn = conn
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        if self._pool is None:
            return await get_pool()
        return self._pool

    @asynccontextmanager
    async def _reading(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        pool = await self._get_pool()
        async with pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def _writing(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._conn is not None:
            yield self._conn
            return
        pool = await self._get_pool()
        async with pool.transaction() as conn:
            yield conn
