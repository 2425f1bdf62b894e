"""Inventory item entity and stock status derivation."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class ItemStatus(str, Enum):
    """Stock status of an inventory item, derived from quantity."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


def derive_status(quantity: int, reorder_point: int) -> ItemStatus:
    """Status as a pure function of quantity vs reorder point."""
    if quantity <= 0:
        return ItemStatus.OUT_OF_STOCK
    if quantity <= reorder_point:
        return ItemStatus.LOW_STOCK
    return ItemStatus.IN_STOCK


class InventoryItem(BaseModel):
    """
    A stocked product.

    ``status`` is never trusted from input; it is recomputed from
    ``quantity`` and ``reorder_point`` whenever the model is built.
    """

    id: int | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    category: str = Field(..., min_length=1)
    quantity: int = Field(default=0, ge=0)
    reorder_point: int = Field(default=0, ge=0)
    unit_price: float = Field(default=0.0, ge=0)
    status: ItemStatus = ItemStatus.OUT_OF_STOCK
    tags: list[str] = Field(default_factory=list)
    location: str | None = None
    supplier: str | None = None
    last_restocked: datetime | None = None
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        """Tags behave as a set: stripped, de-duplicated, sorted."""
        return sorted({tag.strip() for tag in v if tag and tag.strip()})

    @model_validator(mode="after")
    def compute_status(self) -> "InventoryItem":
        self.status = derive_status(self.quantity, self.reorder_point)
        return self

    def refresh_status(self) -> ItemStatus:
        """Recompute status after quantity or reorder point changed."""
        self.status = derive_status(self.quantity, self.reorder_point)
        return self.status

    @property
    def total_value(self) -> float:
        """On-hand value = quantity * unit_price."""
        return self.quantity * self.unit_price
