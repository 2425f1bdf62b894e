"""Core domain entities."""

from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.alert import Alert, AlertStatus, AlertType
from stockroom.core.entities.inventory import InventoryItem, ItemStatus, derive_status
from stockroom.core.entities.report import InventoryReportRow, TransactionReportRow
from stockroom.core.entities.transaction import Transaction, TransactionType
from stockroom.core.entities.user import (
    NotificationPreferences,
    User,
    UserPreferences,
    UserRole,
)

__all__ = [
    # Inventory entities
    "InventoryItem",
    "ItemStatus",
    "derive_status",
    # Transaction entities
    "Transaction",
    "TransactionType",
    # Alert entities
    "Alert",
    "AlertStatus",
    "AlertType",
    # User entities
    "User",
    "UserRole",
    "UserPreferences",
    "NotificationPreferences",
    "ActorContext",
    # Report rows
    "InventoryReportRow",
    "TransactionReportRow",
]
