"""Issue Stock Use Case: stock-out with balance check."""

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


class IssueStockUseCase:
    """Issue stock (stock-out). The engine rejects overselling."""

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
        """Execute issue stock use case."""
        logger.info("issue_stock_started", item_id=item_id, actor_id=actor.user_id)

        result = await self._get_engine().apply_stock_change(
            item_id=item_id,
            direction=StockDirection.OUT,
            quantity=request.quantity,
            actor=actor,
            notes=request.notes,
        )

        logger.info(
            "issue_stock_complete",
            item_id=item_id,
            remaining_qty=result.item.quantity,
        )
        return result

    def to_response(self, result: StockChangeResult) -> StockChangeResponse:
        """Convert result to API response."""
        return StockChangeResponse.from_result(result)
