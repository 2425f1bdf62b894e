"""Inventory management endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status
from fastapi.responses import StreamingResponse

from stockroom.api.dependencies import (
    get_create_item_use_case,
    get_current_actor,
    get_delete_item_use_case,
    get_issue_stock_use_case,
    get_item_store,
    get_list_items_use_case,
    get_receive_stock_use_case,
    get_txn_store,
    get_update_item_use_case,
)
from stockroom.api.exports import csv_response, render_csv
from stockroom.application.dto.requests import CreateItemRequest, StockChangeRequest
from stockroom.application.dto.responses import (
    ErrorResponse,
    ItemListResponse,
    ItemResponse,
    StockChangeResponse,
    TransactionResponse,
)
from stockroom.application.use_cases import (
    CreateItemUseCase,
    DeleteItemUseCase,
    IssueStockUseCase,
    ListItemsUseCase,
    ReceiveStockUseCase,
    UpdateItemUseCase,
)
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.inventory import ItemStatus
from stockroom.core.exceptions import ItemNotFoundError
from stockroom.infrastructure.storage.sqlite import SQLiteInventoryStore, SQLiteTransactionStore

router = APIRouter(
    prefix="/api/inventory",
    tags=["inventory"],
    dependencies=[Depends(get_current_actor)],
)

EXPORT_FIELDS = [
    "id",
    "name",
    "category",
    "quantity",
    "reorder_point",
    "unit_price",
    "status",
    "total_value",
    "last_restocked",
]


@router.get("", response_model=ItemListResponse)
async def list_items(
    search: str | None = Query(default=None, description="Matches name or description"),
    category: str | None = None,
    status_filter: ItemStatus | None = Query(default=None, alias="status"),
    sort_by: str = "name",
    sort_order: str = "asc",
    page: int = 1,
    limit: int | None = None,
    use_case: ListItemsUseCase = Depends(get_list_items_use_case),
) -> ItemListResponse:
    """List items with search, filters, sorting and pagination."""
    return await use_case.execute(
        search=search,
        category=category,
        status=status_filter,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@router.post(
    "",
    response_model=ItemResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_item(
    request: CreateItemRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: CreateItemUseCase = Depends(get_create_item_use_case),
) -> ItemResponse:
    """Create an inventory item. Status is derived from quantity."""
    item = await use_case.execute(request, actor)
    return use_case.to_response(item)


@router.get("/status/out-of-stock", response_model=list[ItemResponse])
async def list_out_of_stock(
    store: SQLiteInventoryStore = Depends(get_item_store),
) -> list[ItemResponse]:
    """Items with nothing on hand."""
    items = await store.list_items(status=ItemStatus.OUT_OF_STOCK, limit=None)
    return [ItemResponse.from_entity(item) for item in items]


@router.get("/status/low-stock", response_model=list[ItemResponse])
async def list_low_stock(
    store: SQLiteInventoryStore = Depends(get_item_store),
) -> list[ItemResponse]:
    """Items at or below their reorder point but not empty."""
    items = await store.list_items(status=ItemStatus.LOW_STOCK, limit=None)
    return [ItemResponse.from_entity(item) for item in items]


@router.get("/export/report", response_model=None)
async def export_inventory(
    format: str = Query(default="csv", pattern="^(json|csv)$", description="json or csv"),
    store: SQLiteInventoryStore = Depends(get_item_store),
) -> list[ItemResponse] | StreamingResponse:
    """Export the whole inventory as CSV or JSON."""
    items = [ItemResponse.from_entity(item) for item in await store.list_items(limit=None)]

    if format == "csv":
        return csv_response(render_csv(items, EXPORT_FIELDS), "inventory-report.csv")
    return items


@router.get(
    "/{item_id}",
    response_model=ItemResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_item(
    item_id: int,
    store: SQLiteInventoryStore = Depends(get_item_store),
) -> ItemResponse:
    item = await store.get_item(item_id)
    if item is None:
        raise ItemNotFoundError(item_id)
    return ItemResponse.from_entity(item)


@router.api_route(
    "/{item_id}",
    methods=["PUT", "PATCH"],
    response_model=ItemResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_item(
    item_id: int,
    payload: dict[str, Any] = Body(...),
    actor: ActorContext = Depends(get_current_actor),
    use_case: UpdateItemUseCase = Depends(get_update_item_use_case),
) -> ItemResponse:
    """
    Update item metadata.

    Quantity and status cannot be set here; use stock-in/stock-out.
    """
    item = await use_case.execute(item_id, payload, actor)
    return use_case.to_response(item)


@router.delete(
    "/{item_id}",
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_item(
    item_id: int,
    actor: ActorContext = Depends(get_current_actor),
    use_case: DeleteItemUseCase = Depends(get_delete_item_use_case),
) -> dict[str, str]:
    """Delete an item and its alerts. Refused if it has transactions."""
    await use_case.execute(item_id, actor)
    return {"message": "Inventory item deleted"}


@router.post(
    "/{item_id}/stock-in",
    response_model=StockChangeResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def stock_in(
    item_id: int,
    request: StockChangeRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: ReceiveStockUseCase = Depends(get_receive_stock_use_case),
) -> StockChangeResponse:
    """Receive stock for an item."""
    result = await use_case.execute(item_id, request, actor)
    return use_case.to_response(result)


@router.post(
    "/{item_id}/stock-out",
    response_model=StockChangeResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def stock_out(
    item_id: int,
    request: StockChangeRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: IssueStockUseCase = Depends(get_issue_stock_use_case),
) -> StockChangeResponse:
    """Issue stock from an item. Fails if it would go negative."""
    result = await use_case.execute(item_id, request, actor)
    return use_case.to_response(result)


@router.get(
    "/{item_id}/transactions",
    response_model=list[TransactionResponse],
    responses={404: {"model": ErrorResponse}},
)
async def item_transactions(
    item_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    items: SQLiteInventoryStore = Depends(get_item_store),
    transactions: SQLiteTransactionStore = Depends(get_txn_store),
) -> list[TransactionResponse]:
    """Transaction history of an item, newest first."""
    if await items.get_item(item_id) is None:
        raise ItemNotFoundError(item_id)
    history = await transactions.list_transactions(item_id=item_id, limit=limit)
    return [TransactionResponse.from_entity(t) for t in history]
