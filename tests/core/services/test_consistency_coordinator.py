"""Tests for the consistency coordinator against a real SQLite database."""

import asyncio

import pytest

from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemType,
    TransactionType,
)
from clinic_inventory.core.entities.registry import Category, Supplier
from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem
from clinic_inventory.core.exceptions import (
    InsufficientStockError,
    InventoryItemNotFoundError,
    ValidationError,
    VisitNotFoundError,
)
from clinic_inventory.core.services import dispense_order


def _visit(**fields) -> ClinicVisit:
    return ClinicVisit(patient_id="P-001", diagnosis="Fever", issued_by="nurse.joy", **fields)


def _line(name: str, qty: int, item_type=ItemType.MEDICINE, item_id: int | None = None):
    return DispensedItem(
        inventory_item_id=item_id, item_name=name, item_type=item_type, quantity=qty
    )


async def _row_counts(pool) -> tuple[int, int, int]:
    async with pool.acquire() as conn:
        counts = []
        for table in ("clinic_visits", "dispensed_items", "inventory_transactions"):
            cursor = await conn.execute(f"SELECT COUNT(*) FROM {table}")
            counts.append((await cursor.fetchone())[0])
    return tuple(counts)  # type: ignore[return-value]


def test_dispense_order_medicines_first():
    lines = [
        _line("Gauze", 1, ItemType.SUPPLY),
        _line("Paracetamol", 2),
        _line("Tape", 1, ItemType.SUPPLY),
        _line("Ibuprofen", 1),
    ]
    assert [l.item_name for l in dispense_order(lines)] == [
        "Paracetamol", "Ibuprofen", "Gauze", "Tape",
    ]


class TestCreateAndDeleteVisit:
    async def test_visit_round_trip_restores_stock(
        self, coordinator, seed_item, inventory_store, transaction_log, visit_store
    ):
        """Dispense 4 of 10 then delete the visit: back to 10 with two matching records."""
        item = await seed_item("Paracetamol", 10)

        visit = await coordinator.create_visit(_visit(), [_line("Paracetamol", 4)])
        assert (await inventory_store.get_by_id(item.id)).stock == 6

        outcome = await coordinator.delete_visit(visit.id, actor="admin")
        assert outcome.skipped == []
        assert (await inventory_store.get_by_id(item.id)).stock == 10
        assert await visit_store.get_visit(visit.id) is None

        out_record, in_record = (await transaction_log.list_records(item_id=item.id))[1::-1]
        assert out_record.transaction_type == TransactionType.STOCK_OUT
        assert (out_record.previous_stock, out_record.new_stock) == (10, 6)
        assert out_record.reason == "dispensed"
        assert out_record.actor == "nurse.joy"
        assert in_record.transaction_type == TransactionType.STOCK_IN
        assert (in_record.previous_stock, in_record.new_stock) == (6, 10)
        assert in_record.reason == "log deletion reversal"
        assert in_record.actor == "admin"

    async def test_failure_on_later_line_leaves_no_trace(
        self, coordinator, seed_item, inventory_store, pool
    ):
        paracetamol = await seed_item("Paracetamol", 10)
        gauze = await seed_item("Gauze", 4, ItemType.SUPPLY)
        before = await _row_counts(pool)

        with pytest.raises(InsufficientStockError):
            await coordinator.create_visit(
                _visit(),
                [_line("Paracetamol", 2), _line("Gauze", 6, ItemType.SUPPLY)],
            )

        assert (await inventory_store.get_by_id(paracetamol.id)).stock == 10
        assert (await inventory_store.get_by_id(gauze.id)).stock == 4
        assert await _row_counts(pool) == before

    async def test_unknown_item_aborts_visit(self, coordinator, pool):
        before = await _row_counts(pool)
        with pytest.raises(InventoryItemNotFoundError):
            await coordinator.create_visit(_visit(), [_line("Nonexistent", 1)])
        assert await _row_counts(pool) == before

    async def test_lines_by_id_snapshot_current_name(self, coordinator, seed_item):
        item = await seed_item("Amoxicillin", 5)
        visit = await coordinator.create_visit(_visit(), [_line("", 2, item_id=item.id)])
        assert visit.items[0].item_name == "Amoxicillin"
        assert visit.items[0].inventory_item_id == item.id

    async def test_line_id_of_wrong_type_rejected(self, coordinator, seed_item):
        gauze = await seed_item("Gauze", 5, ItemType.SUPPLY)
        with pytest.raises(ValidationError):
            await coordinator.create_visit(_visit(), [_line("", 1, ItemType.MEDICINE, gauze.id)])

    async def test_delete_missing_visit(self, coordinator, pool):
        before = await _row_counts(pool)
        with pytest.raises(VisitNotFoundError):
            await coordinator.delete_visit(999)
        assert await _row_counts(pool) == before

    async def test_renamed_item_is_skipped_on_delete(
        self, coordinator, seed_item, inventory_store, visit_store
    ):
        paracetamol = await seed_item("Paracetamol", 10)
        gauze = await seed_item("Gauze", 5, ItemType.SUPPLY)
        visit = await coordinator.create_visit(
            _visit(), [_line("Paracetamol", 3), _line("Gauze", 2, ItemType.SUPPLY)]
        )

        renamed = await inventory_store.get_by_id(paracetamol.id)
        renamed.name = "Paracetamol 500mg"
        await inventory_store.upsert(renamed)

        outcome = await coordinator.delete_visit(visit.id)

        assert [l.item_name for l in outcome.skipped] == ["Paracetamol"]
        assert [l.item_name for l in outcome.restored] == ["Gauze"]
        assert (await inventory_store.get_by_id(paracetamol.id)).stock == 7
        assert (await inventory_store.get_by_id(gauze.id)).stock == 5
        assert await visit_store.get_visit(visit.id) is None

    async def test_concurrent_double_delete_has_one_winner(
        self, coordinator, seed_item, inventory_store
    ):
        item = await seed_item("Paracetamol", 10)
        visit = await coordinator.create_visit(_visit(), [_line("Paracetamol", 4)])

        results = await asyncio.gather(
            coordinator.delete_visit(visit.id),
            coordinator.delete_visit(visit.id),
            return_exceptions=True,
        )

        assert sum(isinstance(r, VisitNotFoundError) for r in results) == 1
        assert (await inventory_store.get_by_id(item.id)).stock == 10

    async def test_concurrent_visits_never_overdraw(self, coordinator, seed_item, inventory_store):
        item = await seed_item("Gauze", 5, ItemType.SUPPLY)

        results = await asyncio.gather(
            *[
                coordinator.create_visit(_visit(), [_line("Gauze", 2, ItemType.SUPPLY)])
                for _ in range(4)
            ],
            return_exceptions=True,
        )

        succeeded = [r for r in results if isinstance(r, ClinicVisit)]
        assert len(succeeded) == 2
        assert (await inventory_store.get_by_id(item.id)).stock == 1


class TestSaveItem:
    async def test_create_logs_opening_stock(self, coordinator, transaction_log):
        item = await coordinator.save_item(
            InventoryItem(name="Paracetamol", item_type=ItemType.MEDICINE),
            requested_stock=25,
            actor="admin",
        )
        assert item.stock == 25

        (record,) = await transaction_log.list_records(item_id=item.id)
        assert record.transaction_type == TransactionType.STOCK_IN
        assert record.reason == "Initial stock entry"

    async def test_create_without_stock_logs_nothing(self, coordinator, transaction_log):
        item = await coordinator.save_item(
            InventoryItem(name="Tape", item_type=ItemType.SUPPLY), requested_stock=0
        )
        assert item.stock == 0
        assert await transaction_log.list_records(item_id=item.id) == []

    async def test_update_stock_becomes_adjustment(self, coordinator, seed_item, transaction_log):
        item = await seed_item("Paracetamol", 10)
        item.description = "500mg tablets"

        updated = await coordinator.save_item(item, requested_stock=7, actor="admin")
        assert updated.stock == 7
        assert updated.description == "500mg tablets"

        latest = (await transaction_log.list_records(item_id=item.id))[0]
        assert latest.transaction_type == TransactionType.ADJUSTMENT
        assert latest.quantity == 3
        assert latest.reason == "Manual stock update"

    async def test_unknown_category_rejected(self, coordinator, inventory_store):
        with pytest.raises(ValidationError):
            await coordinator.save_item(
                InventoryItem(name="X", item_type=ItemType.MEDICINE, category_id=42),
                requested_stock=5,
            )
        assert await inventory_store.get_by_name("X", ItemType.MEDICINE) is None

    async def test_category_of_other_type_rejected(self, coordinator, category_store):
        category = await category_store.create(Category(name="Dressing", item_type=ItemType.SUPPLY))
        with pytest.raises(ValidationError):
            await coordinator.save_item(
                InventoryItem(name="X", item_type=ItemType.MEDICINE, category_id=category.id)
            )

    async def test_known_references_accepted(self, coordinator, category_store, supplier_store):
        category = await category_store.create(Category(name="Analgesic", item_type=ItemType.MEDICINE))
        supplier = await supplier_store.create(Supplier(name="MedSupply Co"))
        item = await coordinator.save_item(
            InventoryItem(
                name="Paracetamol",
                item_type=ItemType.MEDICINE,
                category_id=category.id,
                supplier_id=supplier.id,
            ),
            requested_stock=1,
        )
        assert item.category_id == category.id
        assert item.supplier_id == supplier.id


class TestAdjustStock:
    async def test_adjustment_record(self, coordinator, seed_item, transaction_log):
        item = await seed_item("Gauze", 5, ItemType.SUPPLY)
        adjusted = await coordinator.adjust_stock(
            item.id, -2, "damaged", actor="admin", item_type=ItemType.SUPPLY
        )
        assert adjusted.stock == 3
        latest = (await transaction_log.list_records(item_id=item.id))[0]
        assert latest.transaction_type == TransactionType.ADJUSTMENT
        assert latest.reason == "damaged"

    async def test_adjustment_cannot_go_negative(self, coordinator, seed_item):
        item = await seed_item("Gauze", 1, ItemType.SUPPLY)
        with pytest.raises(InsufficientStockError):
            await coordinator.adjust_stock(item.id, -2, "damaged")

    async def test_type_mismatch_is_not_found(self, coordinator, seed_item):
        item = await seed_item("Gauze", 1, ItemType.SUPPLY)
        with pytest.raises(InventoryItemNotFoundError):
            await coordinator.adjust_stock(item.id, 1, "found", item_type=ItemType.MEDICINE)


class TestUpdateAndDeleteItem:
    async def test_update_visit_metadata_only(self, coordinator, seed_item):
        await seed_item("Paracetamol", 10)
        visit = await coordinator.create_visit(_visit(), [_line("Paracetamol", 1)])

        updated = await coordinator.update_visit(visit.id, diagnosis="Viral fever", notes=None)
        assert updated.diagnosis == "Viral fever"
        assert updated.patient_id == "P-001"
        assert len(updated.items) == 1

    async def test_update_visit_clears_notes(self, coordinator, visit_store):
        visit = await coordinator.create_visit(_visit(notes="Follow up in a week"), [])

        await coordinator.update_visit(visit.id, notes=None)

        stored = await visit_store.get_visit(visit.id)
        assert stored.notes is None
        assert stored.diagnosis == "Fever"

    async def test_update_missing_visit(self, coordinator):
        with pytest.raises(VisitNotFoundError):
            await coordinator.update_visit(404, diagnosis="x")

    async def test_delete_item_checks_type(self, coordinator, seed_item, inventory_store):
        item = await seed_item("Gauze", 1, ItemType.SUPPLY)
        with pytest.raises(InventoryItemNotFoundError):
            await coordinator.delete_item(item.id, ItemType.MEDICINE)

        await coordinator.delete_item(item.id, ItemType.SUPPLY)
        assert await inventory_store.get_by_id(item.id) is None


class TestExplicitScope:
    async def test_abort_discards_writes_made_between_begin_and_abort(
        self, coordinator, seed_item, inventory_store
    ):
        item = await seed_item("Gauze", 5, ItemType.SUPPLY)

        await coordinator.begin()
        await coordinator.adjust_stock(item.id, 3, "recount")
        await coordinator.abort()

        assert (await inventory_store.get_by_id(item.id)).stock == 5

    async def test_commit_publishes_writes(self, coordinator, seed_item, inventory_store):
        item = await seed_item("Gauze", 5, ItemType.SUPPLY)

        await coordinator.begin()
        await coordinator.adjust_stock(item.id, 3, "recount")
        await coordinator.commit()

        assert (await inventory_store.get_by_id(item.id)).stock == 8
