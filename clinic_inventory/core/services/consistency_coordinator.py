"""
Consistency coordinator.

Runs every multi-step inventory operation inside one transaction scope:
recording a visit together with the stock it dispensed, retracting a visit
together with the stock it restores, and saving or adjusting items together
with their audit records. Either all writes of an operation become visible
or none do.

Pure service -- no infrastructure imports. Stores and the transaction
manager are injected via constructor.
"""

from dataclasses import dataclass, field

from clinic_inventory.config import get_logger, get_settings
from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemKey,
    ItemType,
    TransactionType,
)
from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem
from clinic_inventory.core.exceptions import (
    InventoryItemNotFoundError,
    ValidationError,
    VisitNotFoundError,
)
from clinic_inventory.core.interfaces.inventory_store import IInventoryStore
from clinic_inventory.core.interfaces.registry_store import ICategoryStore, ISupplierStore
from clinic_inventory.core.interfaces.transaction_scope import ITransactionManager
from clinic_inventory.core.interfaces.visit_store import IVisitStore

logger = get_logger(__name__)

_TYPE_ORDER = {ItemType.MEDICINE: 0, ItemType.SUPPLY: 1}


def dispense_order(lines: list[DispensedItem]) -> list[DispensedItem]:
    """Medicines first, then supplies, each group in entry order."""
    return sorted(lines, key=lambda line: _TYPE_ORDER[line.item_type])


@dataclass
class VisitDeletion:
    """Outcome of retracting a visit."""

    visit: ClinicVisit
    restored: list[DispensedItem] = field(default_factory=list)
    skipped: list[DispensedItem] = field(default_factory=list)


class ConsistencyCoordinator:
    """Orchestrates atomic inventory, ledger and audit writes."""

    def __init__(
        self,
        inventory_store: IInventoryStore,
        visit_store: IVisitStore,
        transaction_manager: ITransactionManager,
        category_store: ICategoryStore | None = None,
        supplier_store: ISupplierStore | None = None,
    ) -> None:
        self._inventory = inventory_store
        self._visits = visit_store
        self._tx = transaction_manager
        self._categories = category_store
        self._suppliers = supplier_store
        self._settings = get_settings().inventory

    # Scope control

    async def begin(self) -> None:
        await self._tx.begin()

    async def commit(self) -> None:
        await self._tx.commit()

    async def abort(self) -> None:
        await self._tx.abort()

    # Visits

    async def create_visit(
        self, visit: ClinicVisit, lines: list[DispensedItem]
    ) -> ClinicVisit:
        """
        Record a visit and dispense its items.

        Any failure, typically InsufficientStockError on one line, discards
        the visit row, every line and every stock change made so far.
        """
        actor = visit.issued_by or self._settings.default_actor
        ordered = dispense_order(lines)

        async with self._tx.scope():
            visit = await self._visits.create_visit(visit)

            recorded: list[DispensedItem] = []
            for line in ordered:
                key, line = await self._resolve_line(line)
                line.visit_id = visit.id
                line = await self._visits.add_dispensed_item(line)
                await self._inventory.apply_delta(
                    key, -line.quantity, self._settings.dispense_reason, actor
                )
                recorded.append(line)

            visit.items = recorded

        logger.info(
            "visit_created",
            visit_id=visit.id,
            lines=len(visit.items),
            actor=actor,
        )
        return visit

    async def delete_visit(self, visit_id: int, actor: str | None = None) -> VisitDeletion:
        """
        Retract a visit and put its dispensed stock back.

        Lines are matched to inventory by their recorded name and type. A
        line whose item no longer exists under that name is skipped and
        reported; it does not block the deletion.
        """
        actor = actor or self._settings.default_actor

        async with self._tx.scope():
            visit = await self._visits.get_visit(visit_id)
            if visit is None:
                raise VisitNotFoundError(visit_id)

            lines = dispense_order(await self._visits.get_dispensed_items(visit_id))
            outcome = VisitDeletion(visit=visit)

            for line in lines:
                key = ItemKey.by_name(line.item_name, line.item_type)
                try:
                    await self._inventory.apply_delta(
                        key, line.quantity, self._settings.reversal_reason, actor
                    )
                except InventoryItemNotFoundError:
                    logger.warning(
                        "restoration_skipped",
                        visit_id=visit_id,
                        item_name=line.item_name,
                        item_type=line.item_type.value,
                        quantity=line.quantity,
                    )
                    outcome.skipped.append(line)
                    continue
                outcome.restored.append(line)

            await self._visits.delete_dispensed_items(visit_id)
            await self._visits.delete_visit(visit_id)

        logger.info(
            "visit_deleted",
            visit_id=visit_id,
            restored=len(outcome.restored),
            skipped=len(outcome.skipped),
            actor=actor,
        )
        return outcome

    async def update_visit(self, visit_id: int, **fields) -> ClinicVisit:
        """
        Change visit metadata. Dispensed lines are immutable once recorded.

        Only the fields passed are written; an explicit None clears a field.
        """
        async with self._tx.scope():
            visit = await self._visits.get_visit(visit_id)
            if visit is None:
                raise VisitNotFoundError(visit_id)
            visit = visit.model_copy(update=fields)
            return await self._visits.update_visit(visit)

    # Items

    async def save_item(
        self,
        item: InventoryItem,
        requested_stock: int | None = None,
        actor: str | None = None,
    ) -> InventoryItem:
        """
        Create or update an item.

        New items start at zero and receive their opening stock as a
        stock_in delta. On update, a requested stock that differs from the
        live value is applied as an adjustment delta.
        """
        actor = actor or self._settings.default_actor

        async with self._tx.scope():
            await self._check_references(item)

            if item.id is None:
                saved = await self._inventory.upsert(item)
                if requested_stock:
                    saved.stock = await self._inventory.apply_delta(
                        ItemKey.by_id(saved.id),  # type: ignore[arg-type]
                        requested_stock,
                        self._settings.initial_stock_reason,
                        actor,
                    )
                return saved

            saved = await self._inventory.upsert(item)
            if requested_stock is not None and requested_stock != saved.stock:
                saved.stock = await self._inventory.apply_delta(
                    ItemKey.by_id(saved.id),  # type: ignore[arg-type]
                    requested_stock - saved.stock,
                    self._settings.manual_update_reason,
                    actor,
                    transaction_type=TransactionType.ADJUSTMENT,
                )
            return saved

    async def delete_item(self, item_id: int, item_type: ItemType) -> None:
        """Remove an item. Dispensed lines naming it stay as they were."""
        async with self._tx.scope():
            item = await self._inventory.get_by_id(item_id)
            if item is None or item.item_type != item_type:
                raise InventoryItemNotFoundError(item_id, item_type.value)
            await self._inventory.delete(item_id)

    async def adjust_stock(
        self,
        item_id: int,
        delta: int,
        reason: str,
        actor: str | None = None,
        item_type: ItemType | None = None,
    ) -> InventoryItem:
        """Apply a manual stock correction recorded as an adjustment."""
        actor = actor or self._settings.default_actor

        async with self._tx.scope():
            item = await self._inventory.get_by_id(item_id)
            if item is None or (item_type is not None and item.item_type != item_type):
                raise InventoryItemNotFoundError(item_id, item_type.value if item_type else None)

            item.stock = await self._inventory.apply_delta(
                ItemKey.by_id(item_id),
                delta,
                reason,
                actor,
                transaction_type=TransactionType.ADJUSTMENT,
            )
        return item

    async def _resolve_line(self, line: DispensedItem) -> tuple[ItemKey, DispensedItem]:
        """Pick the key a line dispenses from and snapshot the item's name."""
        if line.inventory_item_id is None:
            item = await self._inventory.get_by_name(line.item_name, line.item_type)
            if item is None:
                raise InventoryItemNotFoundError(line.item_name, line.item_type.value)
            line.inventory_item_id = item.id
            return ItemKey.by_name(line.item_name, line.item_type), line

        item = await self._inventory.get_by_id(line.inventory_item_id)
        if item is None:
            raise InventoryItemNotFoundError(line.inventory_item_id, line.item_type.value)
        if item.item_type != line.item_type:
            raise ValidationError(
                "item_type",
                f"item {item.id} is a {item.item_type.value}, not a {line.item_type.value}",
                line.item_type.value,
            )
        line.item_name = item.name
        return ItemKey.by_id(item.id), line  # type: ignore[arg-type]

    async def _check_references(self, item: InventoryItem) -> None:
        if item.category_id is not None and self._categories is not None:
            category = await self._categories.get(item.category_id)
            if category is None:
                raise ValidationError("category_id", "unknown category", item.category_id)
            if category.item_type != item.item_type:
                raise ValidationError(
                    "category_id",
                    f"category is for {category.item_type.value} items",
                    item.category_id,
                )
        if item.supplier_id is not None and self._suppliers is not None:
            if await self._suppliers.get(item.supplier_id) is None:
                raise ValidationError("supplier_id", "unknown supplier", item.supplier_id)
