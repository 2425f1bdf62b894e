"""
Core business logic services.

Layer-pure services that depend only on:
- stockroom/core/entities/*
- stockroom/core/interfaces/*
- stockroom/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from stockroom.core.services.report_aggregator import ReportAggregator
from stockroom.core.services.stock_mutation import (
    StockChangeResult,
    StockDirection,
    StockMutationEngine,
)

__all__ = [
    # Stock mutation
    "StockMutationEngine",
    "StockDirection",
    "StockChangeResult",
    # Reports
    "ReportAggregator",
]
