"""
Dependency injection container for FastAPI.

Provides service instances, stores and the authenticated actor to route
handlers.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from stockroom.application.services import get_report_aggregator
from stockroom.application.use_cases import (
    CreateAlertUseCase,
    CreateItemUseCase,
    DeleteItemUseCase,
    GetProfileUseCase,
    IssueStockUseCase,
    ListActiveAlertsUseCase,
    ListItemsUseCase,
    LoginUserUseCase,
    ReceiveStockUseCase,
    RecordTransactionUseCase,
    RefreshTokenUseCase,
    RegisterUserUseCase,
    ResolveAlertUseCase,
    UpdateItemUseCase,
    UpdateProfileUseCase,
)
from stockroom.core.entities.actor import ActorContext
from stockroom.core.exceptions import AuthError
from stockroom.core.security import actor_from_token
from stockroom.core.services import ReportAggregator
from stockroom.infrastructure.storage.sqlite import (
    SQLiteAlertStore,
    SQLiteInventoryStore,
    SQLiteTransactionStore,
    SQLiteUserStore,
    get_alert_store,
    get_inventory_store,
    get_transaction_store,
    get_user_store,
)

_bearer = HTTPBearer(auto_error=False)


# Authentication
async def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> ActorContext:
    """Resolve the bearer token into the acting user."""
    if credentials is None or not credentials.credentials:
        raise AuthError(reason="missing_token")
    return actor_from_token(credentials.credentials)


# Service dependencies
async def get_reports() -> ReportAggregator:
    """Get report aggregator."""
    return await get_report_aggregator()


# Use case dependencies
def get_receive_stock_use_case() -> ReceiveStockUseCase:
    return ReceiveStockUseCase()


def get_issue_stock_use_case() -> IssueStockUseCase:
    return IssueStockUseCase()


def get_record_transaction_use_case() -> RecordTransactionUseCase:
    return RecordTransactionUseCase()


def get_create_item_use_case() -> CreateItemUseCase:
    return CreateItemUseCase()


def get_update_item_use_case() -> UpdateItemUseCase:
    return UpdateItemUseCase()


def get_delete_item_use_case() -> DeleteItemUseCase:
    return DeleteItemUseCase()


def get_list_items_use_case() -> ListItemsUseCase:
    return ListItemsUseCase()


def get_create_alert_use_case() -> CreateAlertUseCase:
    return CreateAlertUseCase()


def get_resolve_alert_use_case() -> ResolveAlertUseCase:
    return ResolveAlertUseCase()


def get_list_active_alerts_use_case() -> ListActiveAlertsUseCase:
    return ListActiveAlertsUseCase()


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase()


def get_login_user_use_case() -> LoginUserUseCase:
    return LoginUserUseCase()


def get_profile_use_case() -> GetProfileUseCase:
    return GetProfileUseCase()


def get_update_profile_use_case() -> UpdateProfileUseCase:
    return UpdateProfileUseCase()


def get_refresh_token_use_case() -> RefreshTokenUseCase:
    return RefreshTokenUseCase()


# Store dependencies
async def get_item_store() -> SQLiteInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


async def get_txn_store() -> SQLiteTransactionStore:
    """Get transaction store."""
    return await get_transaction_store()


async def get_alerts_store() -> SQLiteAlertStore:
    """Get alert store."""
    return await get_alert_store()


async def get_users_store() -> SQLiteUserStore:
    """Get user store."""
    return await get_user_store()
