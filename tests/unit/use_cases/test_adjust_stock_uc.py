"""Tests for AdjustStockUseCase."""

from unittest.mock import AsyncMock

import pytest

from clinic_inventory.application.dto.requests import AdjustStockRequest
from clinic_inventory.application.use_cases.adjust_stock import AdjustStockUseCase
from clinic_inventory.core.entities.inventory import InventoryItem, ItemType
from clinic_inventory.core.exceptions import InsufficientStockError


@pytest.fixture
def mock_coordinator():
    return AsyncMock()


@pytest.fixture
def use_case(mock_coordinator):
    return AdjustStockUseCase(coordinator=mock_coordinator)


class TestAdjustStockUseCase:
    async def test_forwards_signed_delta(self, use_case, mock_coordinator):
        mock_coordinator.adjust_stock.return_value = InventoryItem(
            id=4, name="Gauze", item_type=ItemType.SUPPLY, stock=8
        )
        request = AdjustStockRequest(delta=-2, reason="damaged", actor="admin")

        item = await use_case.execute(4, ItemType.SUPPLY, request)

        assert item.stock == 8
        mock_coordinator.adjust_stock.assert_awaited_once_with(
            4, -2, "damaged", actor="admin", item_type=ItemType.SUPPLY
        )

    async def test_overdraw_propagates(self, use_case, mock_coordinator):
        mock_coordinator.adjust_stock.side_effect = InsufficientStockError("Gauze", 9, 1)
        with pytest.raises(InsufficientStockError):
            await use_case.execute(4, ItemType.SUPPLY, AdjustStockRequest(delta=-9, reason="x"))
