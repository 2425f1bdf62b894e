"""
Response DTOs for API endpoints.

Pydantic models for serializing outgoing responses.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from stockroom.core.entities.alert import Alert, AlertStatus, AlertType
from stockroom.core.entities.inventory import InventoryItem, ItemStatus
from stockroom.core.entities.transaction import Transaction, TransactionType
from stockroom.core.entities.user import User, UserPreferences, UserRole
from stockroom.core.services.stock_mutation import StockChangeResult

# --- Inventory ---


class ItemResponse(BaseModel):
    """Inventory item in response."""

    id: int
    name: str
    description: str | None = None
    category: str
    quantity: int
    reorder_point: int
    unit_price: float
    status: ItemStatus
    tags: list[str] = Field(default_factory=list)
    location: str | None = None
    supplier: str | None = None
    total_value: float
    last_restocked: datetime | None = None
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, item: InventoryItem) -> "ItemResponse":
        return cls(
            id=item.id,  # type: ignore[arg-type]
            name=item.name,
            description=item.description,
            category=item.category,
            quantity=item.quantity,
            reorder_point=item.reorder_point,
            unit_price=item.unit_price,
            status=item.status,
            tags=item.tags,
            location=item.location,
            supplier=item.supplier,
            total_value=item.total_value,
            last_restocked=item.last_restocked,
            created_by=item.created_by,
            updated_by=item.updated_by,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class ItemListResponse(BaseModel):
    """One page of inventory items."""

    items: list[ItemResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# --- Transactions ---


class TransactionResponse(BaseModel):
    """Stock transaction in response."""

    id: int
    item_id: int
    type: TransactionType
    quantity: int
    date: datetime
    notes: str | None = None
    created_by: int
    total_value: float

    @classmethod
    def from_entity(cls, txn: Transaction) -> "TransactionResponse":
        return cls(
            id=txn.id,  # type: ignore[arg-type]
            item_id=txn.item_id,
            type=txn.type,
            quantity=txn.quantity,
            date=txn.date,
            notes=txn.notes,
            created_by=txn.created_by,
            total_value=txn.total_value,
        )


class TransactionListResponse(BaseModel):
    """One page of transactions."""

    transactions: list[TransactionResponse]
    total: int
    page: int
    limit: int
    total_pages: int


# --- Alerts ---


class AlertResponse(BaseModel):
    """Stock alert in response."""

    id: int
    item_id: int
    type: AlertType
    message: str
    status: AlertStatus
    created_by: int
    created_at: datetime
    resolved_at: datetime | None = None

    @classmethod
    def from_entity(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,  # type: ignore[arg-type]
            item_id=alert.item_id,
            type=alert.type,
            message=alert.message,
            status=alert.status,
            created_by=alert.created_by,
            created_at=alert.created_at,
            resolved_at=alert.resolved_at,
        )


class ActiveAlertResponse(AlertResponse):
    """Active alert with the item details a dashboard shows next to it."""

    item_name: str | None = None
    item_description: str | None = None
    reorder_point: int | None = None


# --- Stock changes ---


class StockChangeResponse(BaseModel):
    """Outcome of a stock-in or stock-out."""

    item: ItemResponse
    transaction: TransactionResponse
    alert: AlertResponse | None = None

    @classmethod
    def from_result(cls, result: StockChangeResult) -> "StockChangeResponse":
        return cls(
            item=ItemResponse.from_entity(result.item),
            transaction=TransactionResponse.from_entity(result.transaction),
            alert=AlertResponse.from_entity(result.alert) if result.alert else None,
        )


# --- Users ---


class UserResponse(BaseModel):
    """Public view of a user. Never includes the password hash."""

    id: int
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    role: UserRole
    preferences: UserPreferences
    last_login: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,  # type: ignore[arg-type]
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
            preferences=user.preferences,
            last_login=user.last_login,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(BaseModel):
    """User plus a bearer token."""

    user: UserResponse
    token: str


class TokenResponse(BaseModel):
    """A freshly issued bearer token."""

    token: str


# --- Health / errors ---


class ComponentHealthResponse(BaseModel):
    """Health of a single dependency."""

    status: str
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. ITEM_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
