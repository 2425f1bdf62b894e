"""Application use cases."""

from stockroom.application.use_cases.issue_stock import IssueStockUseCase
from stockroom.application.use_cases.manage_alerts import (
    CreateAlertUseCase,
    ListActiveAlertsUseCase,
    ResolveAlertUseCase,
)
from stockroom.application.use_cases.manage_items import (
    CreateItemUseCase,
    DeleteItemUseCase,
    ListItemsUseCase,
    UpdateItemUseCase,
)
from stockroom.application.use_cases.manage_users import (
    AuthResult,
    GetProfileUseCase,
    LoginUserUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
    UpdateProfileUseCase,
)
from stockroom.application.use_cases.receive_stock import ReceiveStockUseCase
from stockroom.application.use_cases.record_transaction import RecordTransactionUseCase

__all__ = [
    # Stock changes
    "ReceiveStockUseCase",
    "IssueStockUseCase",
    "RecordTransactionUseCase",
    # Items
    "CreateItemUseCase",
    "UpdateItemUseCase",
    "DeleteItemUseCase",
    "ListItemsUseCase",
    # Alerts
    "CreateAlertUseCase",
    "ResolveAlertUseCase",
    "ListActiveAlertsUseCase",
    # Users
    "AuthResult",
    "RegisterUserUseCase",
    "LoginUserUseCase",
    "GetProfileUseCase",
    "UpdateProfileUseCase",
    "RefreshTokenUseCase",
]
