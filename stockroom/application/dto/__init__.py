"""Data transfer objects for API contracts."""

from stockroom.application.dto.requests import (
    UPDATABLE_ITEM_FIELDS,
    CreateAlertRequest,
    CreateItemRequest,
    CreateTransactionRequest,
    LoginRequest,
    RefreshTokenRequest,
    RegisterRequest,
    StockChangeRequest,
    UpdateItemRequest,
    UpdateProfileRequest,
)
from stockroom.application.dto.responses import (
    ActiveAlertResponse,
    AlertResponse,
    AuthResponse,
    ComponentHealthResponse,
    ErrorResponse,
    HealthResponse,
    ItemListResponse,
    ItemResponse,
    StockChangeResponse,
    TokenResponse,
    TransactionListResponse,
    TransactionResponse,
    UserResponse,
)

__all__ = [
    # Requests
    "UPDATABLE_ITEM_FIELDS",
    "CreateItemRequest",
    "UpdateItemRequest",
    "StockChangeRequest",
    "CreateTransactionRequest",
    "CreateAlertRequest",
    "RegisterRequest",
    "LoginRequest",
    "RefreshTokenRequest",
    "UpdateProfileRequest",
    # Responses
    "ItemResponse",
    "ItemListResponse",
    "TransactionResponse",
    "TransactionListResponse",
    "AlertResponse",
    "ActiveAlertResponse",
    "StockChangeResponse",
    "UserResponse",
    "AuthResponse",
    "TokenResponse",
    "ComponentHealthResponse",
    "HealthResponse",
    "ErrorResponse",
]
