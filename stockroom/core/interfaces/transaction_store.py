"""Abstract interface for transaction storage."""

from abc import ABC, abstractmethod
from datetime import datetime

from stockroom.core.entities.transaction import Transaction, TransactionType


class ITransactionStore(ABC):
    """
    Interface for append-only transaction persistence.

    Transactions are immutable: there is no update or delete.
    """

    @abstractmethod
    async def add_transaction(self, transaction: Transaction) -> Transaction:
        """Record a transaction."""
        pass

    @abstractmethod
    async def get_transaction(self, transaction_id: int) -> Transaction | None:
        """Get transaction by ID."""
        pass

    @abstractmethod
    async def list_transactions(
        self,
        item_id: int | None = None,
        transaction_type: TransactionType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Transaction]:
        """List transactions ordered by date DESC. Date bounds are inclusive."""
        pass

    @abstractmethod
    async def count_transactions(
        self,
        item_id: int | None = None,
        transaction_type: TransactionType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        """Count transactions matching the same filters as list_transactions."""
        pass

    @abstractmethod
    async def quantity_totals(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> dict[int, dict[TransactionType, int]]:
        """Sum transaction quantities per item and type within a date range."""
        pass
