"""Stock alert entity."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class AlertType(str, Enum):
    """Kind of stock alert."""

    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class AlertStatus(str, Enum):
    """Alert lifecycle state."""

    ACTIVE = "active"
    RESOLVED = "resolved"


class Alert(BaseModel):
    """
    Low-stock or out-of-stock warning for an item.

    At most one alert per item is ``active`` at any time.
    """

    id: int | None = None
    item_id: int
    type: AlertType
    message: str
    status: AlertStatus = AlertStatus.ACTIVE
    created_by: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    resolved_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status == AlertStatus.ACTIVE

    def resolve(self, when: datetime | None = None) -> None:
        """Mark the alert resolved. Resolving twice keeps the first timestamp."""
        if not self.is_active:
            return
        self.status = AlertStatus.RESOLVED
        self.resolved_at = when or datetime.now(UTC)
