"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection
"""

from stockroom.application.services import (
    get_report_aggregator,
    get_stock_mutation_engine,
    reset_services,
)

__all__ = [
    "get_stock_mutation_engine",
    "get_report_aggregator",
    "reset_services",
]
