"""
Domain exceptions for the Stockroom application.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockroomError(Exception):
    """Base exception for all Stockroom errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(StockroomError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


# Lookup Exceptions
class NotFoundError(StockroomError):
    """Base exception for missing entities."""

    def __init__(self, entity: str, entity_id: Any, code: str | None = None):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class ItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    def __init__(self, item_id: int):
        super().__init__("inventory item", item_id, code="ITEM_NOT_FOUND")


class TransactionNotFoundError(NotFoundError):
    """Transaction not found."""

    def __init__(self, transaction_id: int):
        super().__init__("transaction", transaction_id, code="TRANSACTION_NOT_FOUND")


class AlertNotFoundError(NotFoundError):
    """Alert not found."""

    def __init__(self, alert_id: int):
        super().__init__("alert", alert_id, code="ALERT_NOT_FOUND")


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_ref: int | str):
        super().__init__("user", user_ref, code="USER_NOT_FOUND")


# Business Rule Exceptions
class InsufficientStockError(StockroomError):
    """Stock-out would drive the item quantity negative."""

    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for item {item_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_id": item_id,
                "requested": requested,
                "available": available,
            },
        )


class HasTransactionsError(StockroomError):
    """Item cannot be deleted because it has transaction history."""

    def __init__(self, item_id: int, transaction_count: int):
        super().__init__(
            f"Cannot delete item {item_id} with {transaction_count} associated transaction(s)",
            code="HAS_TRANSACTIONS",
            details={"item_id": item_id, "transaction_count": transaction_count},
        )


class ConflictError(StockroomError):
    """Entity conflicts with existing state (duplicates, active alerts)."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="CONFLICT", details=details)


# Auth Exceptions
class AuthError(StockroomError):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "Please authenticate.", reason: str | None = None):
        super().__init__(
            message,
            code="AUTH_ERROR",
            details={"reason": reason} if reason else {},
        )


class PermissionDeniedError(StockroomError):
    """Authenticated actor may not perform the operation."""

    def __init__(self, action: str):
        super().__init__(
            f"Permission denied: {action}",
            code="PERMISSION_DENIED",
            details={"action": action},
        )


# Validation Exceptions
class ValidationError(StockroomError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Stock change quantity is not a positive integer."""

    def __init__(self, quantity: Any):
        super().__init__(
            field="quantity",
            message="Quantity must be a positive integer",
            value=quantity,
        )
        self.code = "INVALID_QUANTITY"
