"""API route modules."""

from stockroom.api.routes.alerts import router as alerts_router
from stockroom.api.routes.health import router as health_router
from stockroom.api.routes.inventory import router as inventory_router
from stockroom.api.routes.reports import router as reports_router
from stockroom.api.routes.transactions import router as transactions_router
from stockroom.api.routes.users import router as users_router

__all__ = [
    "health_router",
    "users_router",
    "inventory_router",
    "transactions_router",
    "alerts_router",
    "reports_router",
]
