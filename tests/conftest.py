"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

# Keep the import-time settings (app module, logging) away from the repo tree
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="stockroom-tests-"))
os.environ.setdefault("AUTH_PASSWORD_ITERATIONS", "1000")
os.environ.setdefault("AUTH_SECRET_KEY", "test-secret-key")

from stockroom.application.services import reset_services  # noqa: E402
from stockroom.config import reset_settings  # noqa: E402
from stockroom.core.entities import ActorContext, InventoryItem, User  # noqa: E402
from stockroom.core.security import create_access_token, hash_password  # noqa: E402
from stockroom.infrastructure.storage.sqlite import (  # noqa: E402
    ConnectionPool,
    SQLiteInventoryStore,
    SQLiteUserStore,
    close_pool,
    get_pool,
)
from stockroom.infrastructure.storage.sqlite.migrations import (  # noqa: E402
    initialize_database,
)

TEST_PASSWORD = "Secret12!"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point every test at its own data directory."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STORAGE_POOL_SIZE", "3")
    monkeypatch.setenv("ENVIRONMENT", "development")
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
async def db(isolated_settings) -> AsyncGenerator[ConnectionPool, None]:
    """Migrated database with the global pool open on it."""
    await initialize_database(create_backup_before=False)
    pool = await get_pool()
    yield pool
    await close_pool()


@pytest.fixture
async def user(db: ConnectionPool) -> User:
    """A registered user; transactions and alerts reference it."""
    return await SQLiteUserStore().create_user(
        User(
            username="alice",
            email="alice@example.com",
            password_hash=hash_password(TEST_PASSWORD),
            first_name="Alice",
        )
    )


@pytest.fixture
def actor(user: User) -> ActorContext:
    return ActorContext(user_id=user.id, username=user.username)


@pytest.fixture
def make_item(db: ConnectionPool, user: User) -> Callable:
    """Factory that persists an inventory item."""

    async def _make(**fields) -> InventoryItem:
        data = {"name": "Widget", "category": "hardware", "unit_price": 2.0}
        data.update(fields)
        return await SQLiteInventoryStore().create_item(
            InventoryItem(**data, created_by=user.id, updated_by=user.id)
        )

    return _make


@pytest.fixture
def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.id, user.username)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def client(db: ConnectionPool) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated client against a fresh app on the test database."""
    from stockroom.api.main import create_app

    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def auth_client(
    client: AsyncClient, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Client sending the test user's bearer token."""
    client.headers.update(auth_headers)
    yield client
