"""Inventory item catalogue use cases: create, list, update, delete."""

import math
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from stockroom.application.dto.requests import (
    UPDATABLE_ITEM_FIELDS,
    CreateItemRequest,
    UpdateItemRequest,
)
from stockroom.application.dto.responses import ItemListResponse, ItemResponse
from stockroom.application.validation import validation_error_from
from stockroom.config import get_logger, get_settings
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.inventory import InventoryItem, ItemStatus
from stockroom.core.exceptions import ValidationError
from stockroom.core.interfaces.inventory_store import ITEM_SORT_FIELDS, IInventoryStore
from stockroom.core.services.stock_mutation import StockMutationEngine

logger = get_logger(__name__)


class _InventoryStoreMixin:
    _inventory_store: IInventoryStore | None

    async def _get_inventory_store(self) -> IInventoryStore:
        if self._inventory_store is None:
            from stockroom.infrastructure.storage.sqlite import get_inventory_store

            self._inventory_store = await get_inventory_store()
        return self._inventory_store


class _EngineMixin:
    _engine: StockMutationEngine | None

    def _get_engine(self) -> StockMutationEngine:
        if self._engine is None:
            from stockroom.application.services import get_stock_mutation_engine

            self._engine = get_stock_mutation_engine()
        return self._engine


class CreateItemUseCase(_InventoryStoreMixin):
    """Create an inventory item with derived status."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def execute(self, request: CreateItemRequest, actor: ActorContext) -> InventoryItem:
        store = await self._get_inventory_store()
        item = InventoryItem(
            **request.model_dump(),
            created_by=actor.user_id,
            updated_by=actor.user_id,
        )
        item = await store.create_item(item)
        logger.info(
            "create_item_complete",
            item_id=item.id,
            status=item.status.value,
            actor_id=actor.user_id,
        )
        return item

    def to_response(self, item: InventoryItem) -> ItemResponse:
        return ItemResponse.from_entity(item)


class UpdateItemUseCase(_EngineMixin):
    """
    Edit item metadata.

    Only the fields in ``UPDATABLE_ITEM_FIELDS`` may change. Anything else,
    including ``quantity`` and ``status``, is rejected. The edit itself runs
    in the stock mutation engine so it serializes with stock changes.
    """

    def __init__(self, engine: StockMutationEngine | None = None):
        self._engine = engine

    async def execute(
        self,
        item_id: int,
        payload: dict[str, Any],
        actor: ActorContext,
    ) -> InventoryItem:
        if not isinstance(payload, dict) or not payload:
            raise ValidationError("body", "Provide at least one field to update")

        forbidden = sorted(set(payload) - UPDATABLE_ITEM_FIELDS)
        if forbidden:
            raise ValidationError(
                field=forbidden[0],
                message=f"Field cannot be updated: {', '.join(forbidden)}",
            )

        try:
            request = UpdateItemRequest.model_validate(payload)
        except PydanticValidationError as e:
            raise validation_error_from(e) from e

        changes = request.model_dump(exclude_unset=True)
        for field in ("name", "category", "unit_price", "reorder_point", "tags"):
            if field in changes and changes[field] is None:
                raise ValidationError(field, "Field cannot be null")

        try:
            updated = await self._get_engine().update_item_details(item_id, changes, actor)
        except PydanticValidationError as e:
            raise validation_error_from(e) from e

        logger.info(
            "update_item_complete",
            item_id=item_id,
            fields=sorted(changes),
            status=updated.status.value,
        )
        return updated

    def to_response(self, item: InventoryItem) -> ItemResponse:
        return ItemResponse.from_entity(item)


class DeleteItemUseCase(_EngineMixin):
    """Delete an item that has never been stocked in or out."""

    def __init__(self, engine: StockMutationEngine | None = None):
        self._engine = engine

    async def execute(self, item_id: int, actor: ActorContext) -> None:
        await self._get_engine().delete_item(item_id)
        logger.info("delete_item_complete", item_id=item_id, actor_id=actor.user_id)


class ListItemsUseCase(_InventoryStoreMixin):
    """Search, filter, sort and paginate the catalogue."""

    def __init__(self, inventory_store: IInventoryStore | None = None):
        self._inventory_store = inventory_store

    async def execute(
        self,
        search: str | None = None,
        category: str | None = None,
        status: ItemStatus | None = None,
        sort_by: str = "name",
        sort_order: str = "asc",
        page: int = 1,
        limit: int | None = None,
    ) -> ItemListResponse:
        settings = get_settings().inventory

        if sort_by not in ITEM_SORT_FIELDS:
            raise ValidationError(
                "sort_by",
                f"Must be one of: {', '.join(sorted(ITEM_SORT_FIELDS))}",
                sort_by,
            )
        if sort_order.lower() not in ("asc", "desc"):
            raise ValidationError("sort_order", "Must be 'asc' or 'desc'", sort_order)
        if page < 1:
            raise ValidationError("page", "Must be at least 1", page)

        limit = limit or settings.default_page_size
        if limit < 1:
            raise ValidationError("limit", "Must be at least 1", limit)
        limit = min(limit, settings.max_page_size)

        store = await self._get_inventory_store()
        items = await store.list_items(
            search=search,
            category=category,
            status=status,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await store.count_items(search=search, category=category, status=status)

        return ItemListResponse(
            items=[ItemResponse.from_entity(item) for item in items],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
        )
