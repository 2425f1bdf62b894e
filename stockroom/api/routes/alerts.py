"""Stock alert endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_alerts_store,
    get_create_alert_use_case,
    get_current_actor,
    get_list_active_alerts_use_case,
    get_resolve_alert_use_case,
)
from stockroom.application.dto.requests import CreateAlertRequest
from stockroom.application.dto.responses import (
    ActiveAlertResponse,
    AlertResponse,
    ErrorResponse,
)
from stockroom.application.use_cases import (
    CreateAlertUseCase,
    ListActiveAlertsUseCase,
    ResolveAlertUseCase,
)
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.alert import AlertStatus
from stockroom.core.exceptions import AlertNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteAlertStore

router = APIRouter(
    prefix="/api/alerts",
    tags=["alerts"],
    dependencies=[Depends(get_current_actor)],
)


@router.post(
    "",
    response_model=AlertResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_alert(
    request: CreateAlertRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: CreateAlertUseCase = Depends(get_create_alert_use_case),
) -> AlertResponse:
    """Raise an alert by hand. Refused while the item has an active alert."""
    alert = await use_case.execute(request, actor)
    return use_case.to_response(alert)


@router.get("", response_model=list[AlertResponse])
async def list_alerts(
    status_filter: AlertStatus | None = Query(default=None, alias="status"),
    item_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: SQLiteAlertStore = Depends(get_alerts_store),
) -> list[AlertResponse]:
    """List alerts, newest first."""
    alerts = await store.list_alerts(
        status=status_filter, item_id=item_id, limit=limit, offset=offset
    )
    return [AlertResponse.from_entity(a) for a in alerts]


@router.get("/active", response_model=list[ActiveAlertResponse])
async def list_active_alerts(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    use_case: ListActiveAlertsUseCase = Depends(get_list_active_alerts_use_case),
) -> list[ActiveAlertResponse]:
    """Active alerts with the item's name, description and reorder point."""
    return await use_case.execute(limit=limit, offset=offset)


@router.get(
    "/{alert_id}",
    response_model=AlertResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_alert(
    alert_id: int,
    store: SQLiteAlertStore = Depends(get_alerts_store),
) -> AlertResponse:
    alert = await store.get_alert(alert_id)
    if alert is None:
        raise AlertNotFoundError(alert_id)
    return AlertResponse.from_entity(alert)


@router.api_route(
    "/{alert_id}/resolve",
    methods=["PUT", "POST"],
    response_model=AlertResponse,
    responses={404: {"model": ErrorResponse}},
)
async def resolve_alert(
    alert_id: int,
    actor: ActorContext = Depends(get_current_actor),
    use_case: ResolveAlertUseCase = Depends(get_resolve_alert_use_case),
) -> AlertResponse:
    """Resolve an alert. Resolving twice is a no-op."""
    alert = await use_case.execute(alert_id, actor)
    return use_case.to_response(alert)
