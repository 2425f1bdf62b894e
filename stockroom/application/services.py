"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from stockroom.core.services import ReportAggregator, StockMutationEngine

if TYPE_CHECKING:
    from stockroom.core.interfaces import (
        IInventoryStore,
        ITransactionStore,
        IUnitOfWork,
        IUserStore,
    )


# Singleton service instances
_stock_mutation_engine: StockMutationEngine | None = None
_report_aggregator: ReportAggregator | None = None


def get_stock_mutation_engine(
    uow_factory: "Callable[[], IUnitOfWork] | None" = None,
) -> StockMutationEngine:
    """
    Get or create the StockMutationEngine.

    The engine owns the per-item locks, so all requests must share one
    instance. Passing ``uow_factory`` builds a fresh, unshared engine.

    Args:
        uow_factory: Optional unit-of-work factory override

    Returns:
        Configured StockMutationEngine
    """
    global _stock_mutation_engine

    if uow_factory is not None:
        return StockMutationEngine(uow_factory)

    if _stock_mutation_engine is None:
        # Lazy import infrastructure to avoid circular imports
        from stockroom.infrastructure.storage.sqlite import SQLiteUnitOfWork

        _stock_mutation_engine = StockMutationEngine(SQLiteUnitOfWork)

    return _stock_mutation_engine


async def get_report_aggregator(
    inventory_store: "IInventoryStore | None" = None,
    transaction_store: "ITransactionStore | None" = None,
    user_store: "IUserStore | None" = None,
) -> ReportAggregator:
    """
    Get or create ReportAggregator instance.

    Creates infrastructure dependencies if not provided.
    """
    global _report_aggregator

    overrides = (inventory_store, transaction_store, user_store)
    if _report_aggregator is not None and not any(overrides):
        return _report_aggregator

    from stockroom.infrastructure.storage.sqlite import (
        get_inventory_store,
        get_transaction_store,
        get_user_store,
    )

    aggregator = ReportAggregator(
        inventory_store=inventory_store or await get_inventory_store(),
        transaction_store=transaction_store or await get_transaction_store(),
        user_store=user_store or await get_user_store(),
    )

    if not any(overrides):
        _report_aggregator = aggregator

    return aggregator


def reset_services() -> None:
    """Reset all service singletons (for testing)."""
    global _stock_mutation_engine
    global _report_aggregator

    _stock_mutation_engine = None
    _report_aggregator = None


__all__ = [
    "get_stock_mutation_engine",
    "get_report_aggregator",
    "reset_services",
]
