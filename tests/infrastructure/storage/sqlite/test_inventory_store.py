"""Tests for SQLite inventory store."""

import asyncio

import pytest

from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemKey,
    ItemType,
    TransactionType,
)
from clinic_inventory.core.exceptions import (
    DuplicateItemError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    ValidationError,
)


async def _stocked(store, name: str, stock: int, item_type=ItemType.MEDICINE) -> InventoryItem:
    item = await store.upsert(InventoryItem(name=name, item_type=item_type))
    if stock:
        await store.apply_delta(ItemKey.by_id(item.id), stock, "Initial stock entry", "test")
    return await store.get_by_id(item.id)


class TestUpsert:
    async def test_insert_starts_at_zero(self, inventory_store):
        """Stock in the entity is ignored on insert."""
        item = await inventory_store.upsert(
            InventoryItem(name="Paracetamol", item_type=ItemType.MEDICINE, stock=50)
        )
        assert item.id is not None
        assert item.stock == 0

        fetched = await inventory_store.get_by_id(item.id)
        assert fetched.stock == 0

    async def test_update_keeps_stock(self, inventory_store):
        item = await _stocked(inventory_store, "Paracetamol", 10)
        item.display_name = "Paracetamol 500mg"
        item.stock = 99

        updated = await inventory_store.upsert(item)
        assert updated.display_name == "Paracetamol 500mg"
        assert updated.stock == 10

    async def test_duplicate_name_within_type(self, inventory_store):
        await inventory_store.upsert(InventoryItem(name="Gauze", item_type=ItemType.SUPPLY))
        with pytest.raises(DuplicateItemError):
            await inventory_store.upsert(InventoryItem(name="Gauze", item_type=ItemType.SUPPLY))

    async def test_same_name_across_types(self, inventory_store):
        await inventory_store.upsert(InventoryItem(name="Saline", item_type=ItemType.SUPPLY))
        item = await inventory_store.upsert(
            InventoryItem(name="Saline", item_type=ItemType.MEDICINE)
        )
        assert item.id is not None

    async def test_update_missing_item(self, inventory_store):
        with pytest.raises(InventoryItemNotFoundError):
            await inventory_store.upsert(
                InventoryItem(id=404, name="Ghost", item_type=ItemType.MEDICINE)
            )


class TestLookup:
    async def test_get_by_name_is_type_scoped(self, inventory_store):
        await inventory_store.upsert(InventoryItem(name="Saline", item_type=ItemType.SUPPLY))
        assert await inventory_store.get_by_name("Saline", ItemType.MEDICINE) is None
        assert await inventory_store.get_by_name("Saline", ItemType.SUPPLY) is not None

    async def test_search_substring(self, inventory_store):
        await inventory_store.upsert(InventoryItem(name="Amoxicillin", item_type=ItemType.MEDICINE))
        await inventory_store.upsert(InventoryItem(name="Ibuprofen", item_type=ItemType.MEDICINE))

        results = await inventory_store.search("moxi", item_type=ItemType.MEDICINE)
        assert [i.name for i in results] == ["Amoxicillin"]

    async def test_low_stock_filter(self, inventory_store):
        await _stocked(inventory_store, "Low", 3)
        await _stocked(inventory_store, "Plenty", 50)

        low = await inventory_store.list_all(item_type=ItemType.MEDICINE, low_stock_only=True)
        assert [i.name for i in low] == ["Low"]

    async def test_delete(self, inventory_store):
        item = await inventory_store.upsert(InventoryItem(name="Gone", item_type=ItemType.SUPPLY))
        await inventory_store.delete(item.id)
        assert await inventory_store.get_by_id(item.id) is None

        with pytest.raises(InventoryItemNotFoundError):
            await inventory_store.delete(item.id)


class TestApplyDelta:
    async def test_decrement_logs_stock_out(self, inventory_store, transaction_log):
        item = await _stocked(inventory_store, "Paracetamol", 10)

        new_stock = await inventory_store.apply_delta(
            ItemKey.by_id(item.id), -4, "dispensed", "nurse"
        )
        assert new_stock == 6

        latest = (await transaction_log.list_records(item_id=item.id))[0]
        assert latest.transaction_type == TransactionType.STOCK_OUT
        assert latest.quantity == 4
        assert latest.previous_stock == 10
        assert latest.new_stock == 6
        assert latest.actor == "nurse"

    async def test_by_name_key(self, inventory_store):
        await _stocked(inventory_store, "Gauze", 5, ItemType.SUPPLY)
        new_stock = await inventory_store.apply_delta(
            ItemKey.by_name("Gauze", ItemType.SUPPLY), 2, "restock", "test"
        )
        assert new_stock == 7

    async def test_overdraw_rejected_without_writes(self, inventory_store, transaction_log):
        item = await _stocked(inventory_store, "Gauze", 4, ItemType.SUPPLY)
        before = await transaction_log.list_records(item_id=item.id)

        with pytest.raises(InsufficientStockError) as exc_info:
            await inventory_store.apply_delta(ItemKey.by_id(item.id), -6, "dispensed", "nurse")

        assert exc_info.value.details["available"] == 4
        assert (await inventory_store.get_by_id(item.id)).stock == 4
        assert await transaction_log.list_records(item_id=item.id) == before

    async def test_exact_drain_to_zero(self, inventory_store):
        item = await _stocked(inventory_store, "Gauze", 4, ItemType.SUPPLY)
        assert await inventory_store.apply_delta(ItemKey.by_id(item.id), -4, "d", "n") == 0

    async def test_unknown_item(self, inventory_store):
        with pytest.raises(InventoryItemNotFoundError):
            await inventory_store.apply_delta(
                ItemKey.by_name("Missing", ItemType.MEDICINE), 1, "r", "a"
            )

    async def test_zero_delta_rejected(self, inventory_store):
        item = await _stocked(inventory_store, "Paracetamol", 1)
        with pytest.raises(ValidationError):
            await inventory_store.apply_delta(ItemKey.by_id(item.id), 0, "r", "a")

    async def test_explicit_adjustment_type(self, inventory_store, transaction_log):
        item = await _stocked(inventory_store, "Paracetamol", 10)
        await inventory_store.apply_delta(
            ItemKey.by_id(item.id), -1, "broken vial", "admin",
            transaction_type=TransactionType.ADJUSTMENT,
        )
        latest = (await transaction_log.list_records(item_id=item.id))[0]
        assert latest.transaction_type == TransactionType.ADJUSTMENT


class TestConcurrentDeltas:
    async def test_concurrent_deltas_all_apply(self, inventory_store, transaction_log):
        """10 - 5 + 3 in parallel lands on 8 with one record per delta."""
        item = await _stocked(inventory_store, "Paracetamol", 10)
        key = ItemKey.by_id(item.id)

        await asyncio.gather(
            inventory_store.apply_delta(key, -5, "dispensed", "a"),
            inventory_store.apply_delta(key, 3, "restock", "b"),
        )

        assert (await inventory_store.get_by_id(item.id)).stock == 8
        records = await transaction_log.list_records(item_id=item.id)
        # opening stock_in plus the two concurrent deltas
        assert len(records) == 3
        for record in records:
            sign = 1 if record.transaction_type == TransactionType.STOCK_IN else -1
            assert record.new_stock == record.previous_stock + sign * record.quantity

    async def test_concurrent_overdraw_has_one_winner(self, inventory_store):
        item = await _stocked(inventory_store, "Gauze", 5, ItemType.SUPPLY)
        key = ItemKey.by_id(item.id)

        results = await asyncio.gather(
            inventory_store.apply_delta(key, -4, "dispensed", "a"),
            inventory_store.apply_delta(key, -4, "dispensed", "b"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, InsufficientStockError)]
        assert len(failures) == 1
        assert (await inventory_store.get_by_id(item.id)).stock == 1
