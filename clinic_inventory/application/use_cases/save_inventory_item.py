"""Save Inventory Item Use Case: create or update a medicine or supply."""

from clinic_inventory.application.dto.requests import SaveInventoryItemRequest
from clinic_inventory.application.dto.responses import InventoryItemResponse
from clinic_inventory.config import get_logger, get_settings
from clinic_inventory.core.entities.inventory import InventoryItem, ItemType
from clinic_inventory.core.services import ConsistencyCoordinator

logger = get_logger(__name__)


class SaveInventoryItemUseCase:
    """
    Create or update an inventory item.

    Stock in the request is a target level. The coordinator turns the
    difference from the live stock into a logged transaction.
    """

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(
        self,
        request: SaveInventoryItemRequest,
        item_type: ItemType,
        item_id: int | None = None,
        actor: str | None = None,
    ) -> InventoryItem:
        """Execute save inventory item use case."""
        logger.info(
            "save_inventory_item_started",
            item_id=item_id,
            name=request.name,
            item_type=item_type.value,
        )

        coordinator = await self._get_coordinator()
        reorder_level = request.reorder_level
        if reorder_level is None:
            reorder_level = get_settings().inventory.default_reorder_level

        item = InventoryItem(
            id=item_id,
            name=request.name,
            item_type=item_type,
            display_name=request.display_name,
            description=request.description,
            category_id=request.category_id,
            supplier_id=request.supplier_id,
            unit=request.unit,
            reorder_level=reorder_level,
            price=request.price,
            expiry_date=request.expiry_date,
        )
        return await coordinator.save_item(item, requested_stock=request.stock, actor=actor)

    def to_response(self, item: InventoryItem) -> InventoryItemResponse:
        """Convert result to API response."""
        return InventoryItemResponse.model_validate(item)
