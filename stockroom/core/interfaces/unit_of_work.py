"""Abstract unit of work: one storage transaction with bound stores."""

from abc import ABC, abstractmethod
from types import TracebackType

from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.transaction_store import ITransactionStore
from stockroom.core.interfaces.user_store import IUserStore


class IUnitOfWork(ABC):
    """
    Scoped transaction over all stores.

    Usage:
        async with uow_factory() as uow:
            item = await uow.items.get_item(item_id)
            ...

    Everything written through ``uow.*`` commits when the block exits
    normally and rolls back when it raises.
    """

    items: IInventoryStore
    transactions: ITransactionStore
    alerts: IAlertStore
    users: IUserStore

    @abstractmethod
    async def __aenter__(self) -> "IUnitOfWork":
        pass

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        pass
