"""SQLite implementation of the append-only transaction log."""

from datetime import UTC, datetime

import aiosqlite

from stockroom.config import get_logger
from stockroom.core.entities.transaction import Transaction, TransactionType
from stockroom.core.interfaces.transaction_store import ITransactionStore
from stockroom.infrastructure.storage.sqlite.base import (
    SQLiteStore,
    from_db_timestamp,
    to_db_timestamp,
)

logger = get_logger(__name__)


def _build_filters(
    item_id: int | None,
    transaction_type: TransactionType | None,
    start: datetime | None,
    end: datetime | None,
) -> tuple[str, list]:
    clauses: list[str] = []
    params: list = []

    if item_id is not None:
        clauses.append("item_id = ?")
        params.append(item_id)
    if transaction_type is not None:
        clauses.append("type = ?")
        params.append(TransactionType(transaction_type).value)
    if start is not None:
        clauses.append("date >= ?")
        params.append(to_db_timestamp(start))
    if end is not None:
        clauses.append("date <= ?")
        params.append(to_db_timestamp(end))

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class SQLiteTransactionStore(SQLiteStore, ITransactionStore):
    """SQLite implementation of transaction storage. Insert and read only."""

    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Record a transaction."""
        async with self._writing() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO transactions (
                    item_id, type, quantity, date, notes, created_by, total_value
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    transaction.item_id,
                    transaction.type.value,
                    transaction.quantity,
                    to_db_timestamp(transaction.date),
                    transaction.notes,
                    transaction.created_by,
                    transaction.total_value,
                ),
            )
            transaction.id = cursor.lastrowid
        logger.info(
            "transaction_recorded",
            transaction_id=transaction.id,
            item_id=transaction.item_id,
            type=transaction.type.value,
            qty=transaction.quantity,
        )
        return transaction

    async def get_transaction(self, transaction_id: int) -> Transaction | None:
        """Get transaction by ID."""
        async with self._reading() as conn:
            cursor = await conn.execute(
                "SELECT * FROM transactions WHERE id = ?", (transaction_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_transaction(row)

    async def list_transactions(
        self,
        item_id: int | None = None,
        transaction_type: TransactionType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions, newest first."""
        where, params = _build_filters(item_id, transaction_type, start, end)
        sql = f"SELECT * FROM transactions {where} ORDER BY date DESC, id DESC"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with self._reading() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_transaction(row) for row in rows]

    async def count_transactions(
        self,
        item_id: int | None = None,
        transaction_type: TransactionType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        where, params = _build_filters(item_id, transaction_type, start, end)
        async with self._reading() as conn:
            cursor = await conn.execute(f"SELECT COUNT(*) FROM transactions {where}", params)
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def quantity_totals(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[int, dict[TransactionType, int]]:
        """Sum quantities per item and type."""
        where, params = _build_filters(None, None, start, end)
        async with self._reading() as conn:
            cursor = await conn.execute(
                f"""
                SELECT item_id, type, SUM(quantity) AS total
                FROM transactions {where}
                GROUP BY item_id, type
                """,
                params,
            )
            rows = await cursor.fetchall()

        totals: dict[int, dict[TransactionType, int]] = {}
        for row in rows:
            totals.setdefault(row["item_id"], {})[TransactionType(row["type"])] = row["total"]
        return totals

    @staticmethod
    def _row_to_transaction(row: aiosqlite.Row) -> Transaction:
        """Convert a database row to a Transaction entity."""
        return Transaction(
            id=row["id"],
            item_id=row["item_id"],
            type=TransactionType(row["type"]),
            quantity=row["quantity"],
            date=from_db_timestamp(row["date"]) or datetime.now(UTC),
            notes=row["notes"],
            created_by=row["created_by"],
            total_value=float(row["total_value"] or 0.0),
        )
