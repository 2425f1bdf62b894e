"""Read-only report rows produced by the report aggregator."""

from datetime import datetime

from pydantic import BaseModel

from stockroom.core.entities.inventory import ItemStatus
from stockroom.core.entities.transaction import TransactionType


class InventoryReportRow(BaseModel):
    """Per-item stock movement summary."""

    id: int
    name: str
    category: str
    quantity: int
    reorder_point: int
    unit_price: float
    status: ItemStatus
    stock_in: int = 0
    stock_out: int = 0
    turnover: float | None = None  # None when quantity is 0
    value: float = 0.0
    updated_at: datetime


class TransactionReportRow(BaseModel):
    """A transaction joined with its item and creator."""

    id: int
    date: datetime
    item_id: int
    item_name: str | None = None
    item_category: str | None = None
    unit_price: float | None = None
    type: TransactionType
    quantity: int
    total_value: float
    notes: str | None = None
    created_by: str | None = None  # creator username
