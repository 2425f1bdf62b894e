"""Alert use cases: manual creation, resolution and the active-alert board."""

from stockroom.application.dto.requests import CreateAlertRequest
from stockroom.application.dto.responses import ActiveAlertResponse, AlertResponse
from stockroom.config import get_logger
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.alert import Alert, AlertStatus
from stockroom.core.exceptions import AlertNotFoundError, ConflictError, ItemNotFoundError
from stockroom.core.interfaces.alert_store import IAlertStore
from stockroom.core.interfaces.inventory_store import IInventoryStore
from stockroom.core.services.stock_mutation import alert_message, alert_type_for

logger = get_logger(__name__)


class _AlertStoresMixin:
    _alert_store: IAlertStore | None
    _inventory_store: IInventoryStore | None

    async def _get_alert_store(self) -> IAlertStore:
        if self._alert_store is None:
            from stockroom.infrastructure.storage.sqlite import get_alert_store

            self._alert_store = await get_alert_store()
        return self._alert_store

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store


class CreateAlertUseCase(_AlertStoresMixin):
    """Raise an alert by hand. Refused while the item has an active one."""

    def __init__(
        self,
        alert_store: IAlertStore | None = None,
        inventory_store: IInventoryStore | None = None,
    ):
        self._alert_store = alert_store
        self._inventory_store = inventory_store

    async def execute(self, request: CreateAlertRequest, actor: ActorContext) -> Alert:
        items = await self._get_inventory_store()
        item = await items.get_item(request.item_id)
        if item is None:
            raise ItemNotFoundError(request.item_id)

        alerts = await self._get_alert_store()
        active = await alerts.get_active_alert(request.item_id)
        if active is not None:
            raise ConflictError(
                f"Item {request.item_id} already has an active alert",
                details={"item_id": request.item_id, "alert_id": active.id},
            )

        alert = await alerts.create_alert(
            Alert(
                item_id=request.item_id,
                type=request.type or alert_type_for(item.quantity),
                message=request.message or alert_message(item),
                created_by=actor.user_id,
            )
        )
        logger.info("create_alert_complete", alert_id=alert.id, item_id=alert.item_id)
        return alert

    def to_response(self, alert: Alert) -> AlertResponse:
        return AlertResponse.from_entity(alert)


class ResolveAlertUseCase(_AlertStoresMixin):
    """Resolve an alert. Resolving a resolved alert returns it unchanged."""

    def __init__(self, alert_store: IAlertStore | None = None):
        self._alert_store = alert_store
        self._inventory_store = None

    async def execute(self, alert_id: int, actor: ActorContext) -> Alert:
        alerts = await self._get_alert_store()
        alert = await alerts.get_alert(alert_id)
        if alert is None:
            raise AlertNotFoundError(alert_id)

        if not alert.is_active:
            return alert

        alert.resolve()
        alert = await alerts.update_alert(alert)
        logger.info("resolve_alert_complete", alert_id=alert_id, actor_id=actor.user_id)
        return alert

    def to_response(self, alert: Alert) -> AlertResponse:
        return AlertResponse.from_entity(alert)


class ListActiveAlertsUseCase(_AlertStoresMixin):
    """Active alerts joined with item name, description and reorder point."""

    def __init__(
        self,
        alert_store: IAlertStore | None = None,
        inventory_store: IInventoryStore | None = None,
    ):
        self._alert_store = alert_store
        self._inventory_store = inventory_store

    async def execute(self, limit: int = 100, offset: int = 0) -> list[ActiveAlertResponse]:
        alerts = await (await self._get_alert_store()).list_alerts(
            status=AlertStatus.ACTIVE, limit=limit, offset=offset
        )
        items = await (await self._get_inventory_store()).get_items(
            sorted({a.item_id for a in alerts})
        )

        responses = []
        for alert in alerts:
            item = items.get(alert.item_id)
            responses.append(
                ActiveAlertResponse(
                    **AlertResponse.from_entity(alert).model_dump(),
                    item_name=item.name if item else None,
                    item_description=item.description if item else None,
                    reorder_point=item.reorder_point if item else None,
                )
            )
        return responses
