"""SQLite unit of work: one BEGIN IMMEDIATE transaction shared by all stores."""

from contextlib import AsyncExitStack
from types import TracebackType

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.interfaces.unit_of_work import IUnitOfWork
from stockroom.infrastructure.storage.sqlite.alert_store import SQLiteAlertStore
from stockroom.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool
from stockroom.infrastructure.storage.sqlite.inventory_store import SQLiteInventoryStore
from stockroom.infrastructure.storage.sqlite.transaction_store import SQLiteTransactionStore
from stockroom.infrastructure.storage.sqlite.user_store import SQLiteUserStore

logger = get_logger(__name__)


class SQLiteUnitOfWork(IUnitOfWork):
    """
    Holds one pooled connection for the duration of the block.

    The write lock is taken on entry, so reads inside the block see a
    state no other connection can change before commit. Stores obtained
    from the unit of work must not be used after it exits.
    """

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool
        self._stack: AsyncExitStack | None = None
        self._conn: aiosqlite.Connection | None = None

    async def __aenter__(self) -> "SQLiteUnitOfWork":
        pool = self._pool or await get_pool()
        self._stack = AsyncExitStack()
        self._conn = await self._stack.enter_async_context(pool.acquire())
        try:
            await self._conn.execute("BEGIN IMMEDIATE")
        except BaseException:
            await self._stack.aclose()
            raise

        self.items = SQLiteInventoryStore(conn=self._conn)
        self.transactions = SQLiteTransactionStore(conn=self._conn)
        self.alerts = SQLiteAlertStore(conn=self._conn)
        self.users = SQLiteUserStore(conn=self._conn)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self._conn is not None and self._stack is not None
        try:
            if exc_type is None:
                await self._conn.commit()
            else:
                await self._conn.rollback()
                logger.debug("unit_of_work_rolled_back", error=str(exc))
        finally:
            await self._stack.aclose()
            self._conn = None
            self._stack = None
