"""Core interfaces (ports) for dependency injection."""

from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.interfaces.transaction_store import ITransactionStore
from stockroom.core.interfaces.unit_of_work import IUnitOfWork
from stockroom.core.interfaces.user_store import IUserStore

__all__ = [
    # Storage interfaces
    "IInventoryStore",
    "ITransactionStore",
    "IAlertStore",
    "IUserStore",
    "IUnitOfWork",
]
