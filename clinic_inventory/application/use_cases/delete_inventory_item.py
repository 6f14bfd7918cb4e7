"""Delete Inventory Item Use Case."""

from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.services import ConsistencyCoordinator

logger = get_logger(__name__)


class DeleteInventoryItemUseCase:
    """
    Remove a medicine or supply.

    Past visits keep their dispensed lines; deleting a visit later skips
    restoration for lines naming this item.
    """

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(self, item_id: int, item_type: ItemType) -> None:
        """Execute delete inventory item use case."""
        logger.info("delete_inventory_item_started", item_id=item_id, item_type=item_type.value)
        coordinator = await self._get_coordinator()
        await coordinator.delete_item(item_id, item_type)
