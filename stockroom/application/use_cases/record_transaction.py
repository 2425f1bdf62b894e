"""Record Transaction Use Case: create a transaction by type."""

from stockroom.application.dto.requests import CreateTransactionRequest
from stockroom.application.dto.responses import StockChangeResponse
from stockroom.config import get_logger
from stockroom.core.entities.actor import ActorContext
from stockroom.core.entities.transaction import TransactionType
from stockroom.core.services.stock_mutation import (
    StockChangeResult,
    StockDirection,
    StockMutationEngine,
)

logger = get_logger(__name__)

_DIRECTIONS = {
    TransactionType.STOCK_IN: StockDirection.IN,
    TransactionType.STOCK_OUT: StockDirection.OUT,
}


class RecordTransactionUseCase:
    """
    Create a transaction from ``{item_id, type, quantity}``.

    The item quantity, status and alert change with it; there is no way to
    insert a bare transaction row.
    """

    def __init__(self, engine: StockMutationEngine | None = None):
        self._engine = engine

    def _get_engine(self) -> StockMutationEngine:
        if self._engine is None:
            from stockroom.application.services import get_stock_mutation_engine

            self._engine = get_stock_mutation_engine()
        return self._engine

    async def execute(
        self,
        request: CreateTransactionRequest,
        actor: ActorContext,
    ) -> StockChangeResult:
        logger.info(
            "record_transaction_started",
            item_id=request.item_id,
            type=request.type.value,
        )
        return await self._get_engine().apply_stock_change(
            item_id=request.item_id,
            direction=_DIRECTIONS[request.type],
            quantity=request.quantity,
            actor=actor,
            notes=request.notes,
        )

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        return StockChangeResponse.from_result(result)
