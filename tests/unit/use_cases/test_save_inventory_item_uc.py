"""Tests for SaveInventoryItemUseCase."""

from unittest.mock import AsyncMock

import pytest

from clinic_inventory.application.dto.requests import SaveInventoryItemRequest
from clinic_inventory.application.use_cases.save_inventory_item import (
    SaveInventoryItemUseCase,
)
from clinic_inventory.core.entities.inventory import InventoryItem, ItemType


@pytest.fixture
def mock_coordinator():
    coordinator = AsyncMock()
    coordinator.save_item.side_effect = lambda item, requested_stock, actor: item
    return coordinator


@pytest.fixture
def use_case(mock_coordinator):
    return SaveInventoryItemUseCase(coordinator=mock_coordinator)


class TestSaveInventoryItemUseCase:
    async def test_create_passes_requested_stock(self, use_case, mock_coordinator):
        request = SaveInventoryItemRequest(name="Paracetamol", stock=25, reorder_level=5)
        await use_case.execute(request, ItemType.MEDICINE, actor="admin")

        item = mock_coordinator.save_item.call_args[0][0]
        kwargs = mock_coordinator.save_item.call_args[1]
        assert item.id is None
        assert item.item_type == ItemType.MEDICINE
        assert item.stock == 0
        assert item.reorder_level == 5
        assert kwargs == {"requested_stock": 25, "actor": "admin"}

    async def test_reorder_level_defaults_from_settings(self, use_case, mock_coordinator):
        request = SaveInventoryItemRequest(name="Gauze")
        item = await use_case.execute(request, ItemType.SUPPLY)
        assert item.reorder_level == 10

    async def test_update_keeps_route_id(self, use_case, mock_coordinator):
        request = SaveInventoryItemRequest(name="Gauze", stock=4)
        item = await use_case.execute(request, ItemType.SUPPLY, item_id=12)
        assert item.id == 12

    def test_response_flags_low_stock(self, use_case):
        item = InventoryItem(
            id=1, name="Gauze", item_type=ItemType.SUPPLY, stock=2, reorder_level=5
        )
        assert use_case.to_response(item).is_low_stock is True
