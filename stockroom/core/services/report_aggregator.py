"""
Report aggregation service.

Read-only views joining transactions with items and users.
"""

from datetime import UTC, date, datetime, time

from stockroom.config import get_logger
from stockroom.core.entities.report import InventoryReportRow, TransactionReportRow
from stockroom.core.entities.transaction import TransactionType
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.transaction_store import ITransactionStore
from stockroom.core.interfaces.user_store import IUserStore

logger = get_logger(__name__)


def range_start(value: date | datetime | None) -> datetime | None:
    """Lower bound of an inclusive date range. Bare dates start at midnight UTC."""
    if value is None or isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.min, tzinfo=UTC)


def range_end(value: date | datetime | None) -> datetime | None:
    """Upper bound of an inclusive date range. Bare dates cover the whole day."""
    if value is None or isinstance(value, datetime):
        return _as_utc(value)
    return datetime.combine(value, time.max, tzinfo=UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def turnover(stock_out: int, quantity: int) -> float | None:
    """Stock consumed relative to current quantity. None when nothing is on hand."""
    if quantity <= 0:
        return None
    return stock_out / quantity


class ReportAggregator:
    """Builds inventory and transaction reports from the stores."""

    def __init__(
        self,
        inventory_store: IInventoryStore,
        transaction_store: ITransactionStore,
        user_store: IUserStore,
    ) -> None:
        self._items = inventory_store
        self._transactions = transaction_store
        self._users = user_store

    async def inventory_report(
        self,
        category: str | None = None,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
    ) -> list[InventoryReportRow]:
        """Per-item stock in/out totals, turnover and value."""
        items = await self._items.list_items(category=category, limit=None)
        totals = await self._transactions.quantity_totals(
            start=range_start(start), end=range_end(end)
        )

        rows = []
        for item in items:
            item_totals = totals.get(item.id, {})  # type: ignore[arg-type]
            stock_in = item_totals.get(TransactionType.STOCK_IN, 0)
            stock_out = item_totals.get(TransactionType.STOCK_OUT, 0)
            rows.append(
                InventoryReportRow(
                    id=item.id,  # type: ignore[arg-type]
                    name=item.name,
                    category=item.category,
                    quantity=item.quantity,
                    reorder_point=item.reorder_point,
                    unit_price=item.unit_price,
                    status=item.status,
                    stock_in=stock_in,
                    stock_out=stock_out,
                    turnover=turnover(stock_out, item.quantity),
                    value=item.total_value,
                    updated_at=item.updated_at,
                )
            )

        logger.info("inventory_report_built", rows=len(rows), category=category)
        return rows

    async def transaction_report(
        self,
        start: date | datetime | None = None,
        end: date | datetime | None = None,
        transaction_type: TransactionType | None = None,
    ) -> list[TransactionReportRow]:
        """Transactions joined with item and creator, newest first."""
        transactions = await self._transactions.list_transactions(
            transaction_type=transaction_type,
            start=range_start(start),
            end=range_end(end),
            limit=None,
        )
        items = await self._items.get_items(sorted({t.item_id for t in transactions}))
        users = await self._users.get_users(sorted({t.created_by for t in transactions}))

        rows = []
        for txn in transactions:
            item = items.get(txn.item_id)
            user = users.get(txn.created_by)
            rows.append(
                TransactionReportRow(
                    id=txn.id,  # type: ignore[arg-type]
                    date=txn.date,
                    item_id=txn.item_id,
                    item_name=item.name if item else None,
                    item_category=item.category if item else None,
                    unit_price=item.unit_price if item else None,
                    type=txn.type,
                    quantity=txn.quantity,
                    total_value=txn.total_value,
                    notes=txn.notes,
                    created_by=user.username if user else None,
                )
            )
        rows.sort(key=lambda r: (r.date, r.id), reverse=True)

        logger.info(
            "transaction_report_built",
            rows=len(rows),
            type=transaction_type.value if transaction_type else None,
        )
        return rows
