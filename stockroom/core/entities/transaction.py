"""Stock transaction entity."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field


class TransactionType(str, Enum):
    """Direction of a stock transaction."""

    STOCK_IN = "stock-in"
    STOCK_OUT = "stock-out"


class Transaction(BaseModel):
    """Immutable record of a single stock change."""

    id: int | None = None
    item_id: int
    type: TransactionType
    quantity: int = Field(..., gt=0)  # always positive
    date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    notes: str | None = None
    created_by: int
    total_value: float = 0.0  # quantity * unit_price at the time of the change
