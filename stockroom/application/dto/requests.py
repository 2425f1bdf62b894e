"""
Request DTOs for API endpoints.

Pydantic models for validating incoming requests.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from stockroom.core.entities.alert import AlertType
from stockroom.core.entities.transaction import TransactionType

# Item fields a client may edit directly. Quantity moves only through
# stock-in/stock-out and status is always derived.
UPDATABLE_ITEM_FIELDS = frozenset(
    {
        "name",
        "description",
        "category",
        "unit_price",
        "reorder_point",
        "location",
        "supplier",
        "tags",
    }
)


# --- Inventory ---


class CreateItemRequest(BaseModel):
    """Request to create an inventory item."""

    name: str = Field(..., min_length=1, description="Item name")
    description: str | None = Field(default=None, description="Free-text description")
    category: str = Field(..., min_length=1, description="Item category")
    quantity: int = Field(default=0, ge=0, description="Opening quantity")
    reorder_point: int = Field(default=0, ge=0, description="Low-stock threshold")
    unit_price: float = Field(default=0.0, ge=0, description="Price per unit")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    location: str | None = Field(default=None, description="Storage location")
    supplier: str | None = Field(default=None, description="Supplier name")


class UpdateItemRequest(BaseModel):
    """Partial update of an item's metadata. Only provided fields change."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1)
    unit_price: float | None = Field(default=None, ge=0)
    reorder_point: int | None = Field(default=None, ge=0)
    location: str | None = None
    supplier: str | None = None
    tags: list[str] | None = None


class StockChangeRequest(BaseModel):
    """Stock-in or stock-out of an existing item."""

    # Checked by the stock engine so that bools, floats and strings are
    # reported as an invalid quantity rather than coerced.
    quantity: Any = Field(..., description="Positive integer quantity")
    notes: str | None = Field(default=None, description="Free-text note")


# --- Transactions ---


class CreateTransactionRequest(BaseModel):
    """Record a stock change by transaction type."""

    item_id: int = Field(..., description="Inventory item ID")
    type: TransactionType = Field(..., description="stock-in or stock-out")
    quantity: Any = Field(..., description="Positive integer quantity")
    notes: str | None = Field(default=None, description="Free-text note")


# --- Alerts ---


class CreateAlertRequest(BaseModel):
    """Manually raise an alert for an item."""

    item_id: int = Field(..., description="Inventory item ID")
    type: AlertType | None = Field(
        default=None,
        description="Alert type; derived from the item's quantity when omitted",
    )
    message: str | None = Field(default=None, description="Custom alert message")


# --- Users ---


class RegisterRequest(BaseModel):
    """Create a new account."""

    username: str = Field(..., description="3+ letters, digits or underscores")
    email: str = Field(..., description="Email address")
    password: str = Field(..., description="At least 8 chars with letter, digit, symbol")
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(BaseModel):
    """Log in with username or email."""

    identifier: str = Field(..., min_length=1, description="Username or email")
    password: str = Field(..., min_length=1)


# Profile fields a user may change on their own account
UPDATABLE_PROFILE_FIELDS = frozenset(
    {
        "username",
        "email",
        "first_name",
        "last_name",
        "preferences",
        "password",
        "current_password",
    }
)


class UpdateProfileRequest(BaseModel):
    """Partial profile update. Changing the password needs the current one."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    preferences: dict[str, Any] | None = Field(
        default=None,
        description="Merged into the stored preferences",
    )
    password: str | None = None
    current_password: str | None = None


class RefreshTokenRequest(BaseModel):
    """Exchange a valid token for a fresh one."""

    token: str = Field(..., min_length=1)
