"""Receive Stock Use Case: stock-in through the mutation engine."""

from stockroom.application.dto.requests import StockChangeRequest
from stockroom.application.dto.responses import StockChangeResponse
from stockroom.config import get_logger
from stockroom.core.entities.actor import ActorContext
from stockroom.core.services.stock_mutation import (
    StockChangeResult,
    StockDirection,
    StockMutationEngine,
)

logger = get_logger(__name__)


class ReceiveStockUseCase:
    """Receive stock (stock-in) for an existing item."""

    def __init__(self, engine: StockMutationEngine | None = None):
        self._engine = engine

    def _get_engine(self) -> StockMutationEngine:
        if self._engine is None:
            from stockroom.application.services import get_stock_mutation_engine

            self._engine = get_stock_mutation_engine()
        return self._engine

    async def execute(
        self,
        item_id: int,
        request: StockChangeRequest,
        actor: ActorContext,
    ) -> StockChangeResult:
        """Execute receive stock use case."""
        logger.info("receive_stock_started", item_id=item_id, actor_id=actor.user_id)

        result = await self._get_engine().apply_stock_change(
            item_id=item_id,
            direction=StockDirection.IN,
            quantity=request.quantity,
            actor=actor,
            notes=request.notes,
        )

        logger.info(
            "receive_stock_complete",
            item_id=item_id,
            new_qty=result.item.quantity,
        )
        return result

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        """Convert result to API response."""
        return StockChangeResponse.from_result(result)
