"""Transaction log endpoints."""

import math

from fastapi import APIRouter, Depends, Query, status

from stockroom.api.dependencies import (
    get_current_actor,
    get_item_store,
    get_record_transaction_use_case,
    get_txn_store,
)
from stockroom.application.dto.requests import CreateTransactionRequest
from stockroom.application.dto.responses import (
    ErrorResponse,
    StockChangeResponse,
    TransactionListResponse,
    TransactionResponse,
)
from stockroom.application.use_cases import RecordTransactionUseCase
from stockroom.application.validation import parse_date_bound
from stockroom.config import get_settings
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.transaction import TransactionType
from stockroom.core.exceptions import ItemNotFoundError, TransactionNotFoundError
from stockroom.core.services.report_aggregator import range_end, range_start
from stockroom.infrastructure.storage.sqlite import SQLiteInventoryStore, SQLiteTransactionStore

router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
    dependencies=[Depends(get_current_actor)],
)


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    item_id: int | None = None,
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
    start_date: str | None = Query(default=None, description="Inclusive, ISO date or timestamp"),
    end_date: str | None = Query(default=None, description="Inclusive, a bare date covers the day"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    store: SQLiteTransactionStore = Depends(get_txn_store),
) -> TransactionListResponse:
    """List transactions, newest first."""
    settings = get_settings().inventory
    limit = min(limit or settings.default_page_size, settings.max_page_size)
    filters = {
        "item_id": item_id,
        "transaction_type": transaction_type,
        "start": range_start(parse_date_bound(start_date, "start_date")),
        "end": range_end(parse_date_bound(end_date, "end_date")),
    }

    transactions = await store.list_transactions(
        **filters, limit=limit, offset=(page - 1) * limit
    )
    total = await store.count_transactions(**filters)

    return TransactionListResponse(
        transactions=[TransactionResponse.from_entity(t) for t in transactions],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


@router.post(
    "",
    response_model=StockChangeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_transaction(
    request: CreateTransactionRequest,
    actor: ActorContext = Depends(get_current_actor),
    use_case: RecordTransactionUseCase = Depends(get_record_transaction_use_case),
) -> StockChangeResponse:
    """Record a stock-in or stock-out. The item is updated in the same step."""
    result = await use_case.execute(request, actor)
    return use_case.to_response(result)


@router.get(
    "/item/{item_id}",
    response_model=list[TransactionResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_item_transactions(
    item_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    items: SQLiteInventoryStore = Depends(get_item_store),
    store: SQLiteTransactionStore = Depends(get_txn_store),
) -> list[TransactionResponse]:
    if await items.get_item(item_id) is None:
        raise ItemNotFoundError(item_id)
    transactions = await store.list_transactions(item_id=item_id, limit=limit)
    return [TransactionResponse.from_entity(t) for t in transactions]


@router.get(
    "/{transaction_id}",
    response_model=TransactionResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_transaction(
    transaction_id: int,
    store: SQLiteTransactionStore = Depends(get_txn_store),
) -> TransactionResponse:
    transaction = await store.get_transaction(transaction_id)
    if transaction is None:
        raise TransactionNotFoundError(transaction_id)
    return TransactionResponse.from_entity(transaction)
