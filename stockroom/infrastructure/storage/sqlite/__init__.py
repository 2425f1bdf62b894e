"""SQLite storage implementations."""

from stockroom.infrastructure.storage.sqlite.alert_store import SQLiteAlertStore
from stockroom.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from stockroom.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockroom.infrastructure.storage.sqlite.transaction_store import SQLiteTransactionStore
from stockroom.infrastructure.storage.sqlite.unit_of_work import SQLiteUnitOfWork
from stockroom.infrastructure.storage.sqlite.user_store import SQLiteUserStore

# Singleton instances
_inventory_store: SQLiteInventoryStore | None = None
_transaction_store: SQLiteTransactionStore | None = None
_alert_store: SQLiteAlertStore | None = None
_user_store: SQLiteUserStore | None = None


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore()
    return _inventory_store


async def get_transaction_store() -> SQLiteTransactionStore:
    """Get singleton transaction store instance."""
    global _transaction_store
    if _transaction_store is None:
        _transaction_store = SQLiteTransactionStore()
    return _transaction_store


async def get_alert_store() -> SQLiteAlertStore:
    """Get singleton alert store instance."""
    global _alert_store
    if _alert_store is None:
        _alert_store = SQLiteAlertStore()
    return _alert_store


async def get_user_store() -> SQLiteUserStore:
    """Get singleton user store instance."""
    global _user_store
    if _user_store is None:
        _user_store = SQLiteUserStore()
    return _user_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteTransactionStore",
    "SQLiteAlertStore",
    "SQLiteUserStore",
    "SQLiteUnitOfWork",
    # Factory functions
    "get_inventory_store",
    "get_transaction_store",
    "get_alert_store",
    "get_user_store",
]
