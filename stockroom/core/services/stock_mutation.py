"""
Stock mutation engine.

The one place where an item's quantity changes. Every change is applied
inside a single unit of work that:

1. writes the item with its new quantity and recomputed status,
2. appends exactly one immutable transaction record,
3. raises or resolves the item's stock alert.

Mutations of the same item, metadata edits included, are serialized by a
per-item lock so concurrent requests cannot lose updates.
"""

import asyncio
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from stockroom.config import get_logger
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.alert import Alert, AlertType
from stockroom.core.entities.inventory import InventoryItem
from stockroom.core.entities.transaction import Transaction, TransactionType
from stockroom.core.exceptions import (
    HasTransactionsError,
    InsufficientStockError,
    InvalidQuantityError,
    ItemNotFoundError,
)
from stockroom.core.interfaces.unit_of_work import IUnitOfWork

logger = get_logger(__name__)


class StockDirection(str, Enum):
    """Direction of a stock change."""

    IN = "in"
    OUT = "out"

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.STOCK_IN if self is StockDirection.IN else TransactionType.STOCK_OUT


@dataclass
class StockChangeResult:
    """Outcome of a single stock change."""

    item: InventoryItem
    transaction: Transaction
    alert: Alert | None = None  # alert created or resolved by this change


def validate_quantity(quantity: object) -> int:
    """Accept only positive ints (bools are rejected)."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return quantity


def next_quantity(current: int, direction: StockDirection, quantity: int) -> int:
    if direction is StockDirection.IN:
        return current + quantity
    return current - quantity


def alert_type_for(quantity: int) -> AlertType:
    return AlertType.OUT_OF_STOCK if quantity <= 0 else AlertType.LOW_STOCK


def alert_message(item: InventoryItem) -> str:
    if item.quantity <= 0:
        return f"{item.name} is out of stock"
    return (
        f"{item.name} is low on stock: {item.quantity} left "
        f"(reorder point {item.reorder_point})"
    )


class StockMutationEngine:
    """
    Applies stock changes, metadata edits and item deletions atomically.

    The unit-of-work factory is injected; each call opens one unit of work.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory
        self._locks: weakref.WeakValueDictionary[int, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def _lock_for(self, item_id: int) -> asyncio.Lock:
        lock = self._locks.get(item_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[item_id] = lock
        return lock

    async def apply_stock_change(
        self,
        item_id: int,
        direction: StockDirection,
        quantity: int,
        actor: ActorContext,
        notes: str | None = None,
    ) -> StockChangeResult:
        """
        Apply a stock-in or stock-out to an item.

        Raises:
            InvalidQuantityError: quantity is not a positive integer
            ItemNotFoundError: no item with item_id
            InsufficientStockError: stock-out larger than the on-hand quantity
        """
        quantity = validate_quantity(quantity)
        direction = StockDirection(direction)

        logger.info(
            "stock_change_started",
            item_id=item_id,
            direction=direction.value,
            quantity=quantity,
            actor_id=actor.user_id,
        )

        async with self._lock_for(item_id):
            async with self._uow_factory() as uow:
                item = await uow.items.get_item(item_id)
                if item is None:
                    raise ItemNotFoundError(item_id)

                if direction is StockDirection.OUT and item.quantity < quantity:
                    raise InsufficientStockError(
                        item_id=item_id,
                        requested=quantity,
                        available=item.quantity,
                    )

                now = datetime.now(UTC)

                # 1. Item
                item.quantity = next_quantity(item.quantity, direction, quantity)
                item.refresh_status()
                if direction is StockDirection.IN:
                    item.last_restocked = now
                item.updated_by = actor.user_id
                item.updated_at = now
                item = await uow.items.update_item(item)

                # 2. Transaction
                transaction = await uow.transactions.add_transaction(
                    Transaction(
                        item_id=item_id,
                        type=direction.transaction_type,
                        quantity=quantity,
                        notes=notes,
                        date=now,
                        created_by=actor.user_id,
                        total_value=quantity * item.unit_price,
                    )
                )

                # 3. Alert
                alert = await self._sync_alert(uow, item, actor, now)

        logger.info(
            "stock_change_complete",
            item_id=item_id,
            transaction_id=transaction.id,
            new_quantity=item.quantity,
            status=item.status.value,
            alert_id=alert.id if alert else None,
        )

        return StockChangeResult(item=item, transaction=transaction, alert=alert)

    async def _sync_alert(
        self,
        uow: IUnitOfWork,
        item: InventoryItem,
        actor: ActorContext,
        now: datetime,
    ) -> Alert | None:
        """Create or resolve the item's alert. At most one alert write."""
        assert item.id is not None
        active = await uow.alerts.get_active_alert(item.id)

        if item.quantity <= item.reorder_point:
            if active is not None:
                return None
            alert = await uow.alerts.create_alert(
                Alert(
                    item_id=item.id,
                    type=alert_type_for(item.quantity),
                    message=alert_message(item),
                    created_by=actor.user_id,
                    created_at=now,
                )
            )
            logger.info(
                "stock_alert_raised",
                item_id=item.id,
                alert_id=alert.id,
                type=alert.type.value,
            )
            return alert

        return await self._resolve_alert(uow, active, now)

    async def _resolve_alert(
        self,
        uow: IUnitOfWork,
        active: Alert | None,
        now: datetime,
    ) -> Alert | None:
        if active is None:
            return None
        active.resolve(now)
        alert = await uow.alerts.update_alert(active)
        logger.info("stock_alert_resolved", item_id=alert.item_id, alert_id=alert.id)
        return alert

    async def update_item_details(
        self,
        item_id: int,
        changes: dict[str, Any],
        actor: ActorContext,
    ) -> InventoryItem:
        """
        Edit an item's descriptive fields under the item's lock.

        Quantity is never written here, so a stock change serialized before
        or after the edit is kept. When a new reorder point lifts the item
        out of low stock, its active alert is resolved in the same unit of
        work. Alerts are only raised by stock changes.

        Raises:
            ItemNotFoundError: no item with item_id
            pydantic.ValidationError: the edited item fails entity validation
        """
        async with self._lock_for(item_id):
            async with self._uow_factory() as uow:
                item = await uow.items.get_item(item_id)
                if item is None:
                    raise ItemNotFoundError(item_id)

                now = datetime.now(UTC)
                edited = InventoryItem.model_validate(
                    {
                        **item.model_dump(),
                        **changes,
                        "updated_by": actor.user_id,
                        "updated_at": now,
                    }
                )
                item = await uow.items.update_item_metadata(edited)

                alert = None
                if item.quantity > item.reorder_point:
                    active = await uow.alerts.get_active_alert(item_id)
                    alert = await self._resolve_alert(uow, active, now)

        logger.info(
            "item_details_updated",
            item_id=item_id,
            fields=sorted(changes),
            status=item.status.value,
            alert_id=alert.id if alert else None,
        )
        return item

    async def delete_item(self, item_id: int) -> None:
        """
        Delete an item that has no transaction history, with its alerts.

        Raises:
            ItemNotFoundError: no item with item_id
            HasTransactionsError: the item has at least one transaction
        """
        async with self._lock_for(item_id):
            async with self._uow_factory() as uow:
                item = await uow.items.get_item(item_id)
                if item is None:
                    raise ItemNotFoundError(item_id)

                count = await uow.transactions.count_transactions(item_id=item_id)
                if count > 0:
                    raise HasTransactionsError(item_id, count)

                alerts_deleted = await uow.alerts.delete_for_item(item_id)
                await uow.items.delete_item(item_id)

        logger.info("inventory_item_deleted", item_id=item_id, alerts_deleted=alerts_deleted)
