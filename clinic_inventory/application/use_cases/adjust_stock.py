"""Adjust Stock Use Case: manual correction with an audit record."""

from clinic_inventory.application.dto.requests import AdjustStockRequest
from clinic_inventory.application.dto.responses import InventoryItemResponse
from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import InventoryItem, ItemType
from clinic_inventory.core.services import ConsistencyCoordinator

logger = get_logger(__name__)


class AdjustStockUseCase:
    """Apply a signed stock correction to one item."""

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(
        self,
        item_id: int,
        item_type: ItemType,
        request: AdjustStockRequest,
    ) -> InventoryItem:
        """Execute adjust stock use case."""
        logger.info(
            "adjust_stock_started",
            item_id=item_id,
            delta=request.delta,
            reason=request.reason,
        )
        coordinator = await self._get_coordinator()
        return await coordinator.adjust_stock(
            item_id,
            request.delta,
            request.reason,
            actor=request.actor,
            item_type=item_type,
        )

    def to_response(self, item: InventoryItem) -> InventoryItemResponse:
        """Convert result to API response."""
        return InventoryItemResponse.model_validate(item)
