"""Storage infrastructure implementations."""

from stockroom.infrastructure.storage.sqlite import (
    SQLiteAlertStore,
    SQLiteInventoryStore,
    SQLiteTransactionStore,
    SQLiteUnitOfWork,
    SQLiteUserStore,
    close_pool,
    get_pool,
)

__all__ = [
    # SQLite stores
    "SQLiteInventoryStore",
    "SQLiteTransactionStore",
    "SQLiteAlertStore",
    "SQLiteUserStore",
    "SQLiteUnitOfWork",
    # Connection pool
    "get_pool",
    "close_pool",
]
