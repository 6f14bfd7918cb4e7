"""Clinic visit ledger entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from clinic_inventory.core.entities.inventory import ItemType


class DispensedItem(BaseModel):
    """
    Snapshot of an item handed out during a visit.

    Stores the item name and type as they were at dispense time. The
    inventory_item_id is informational only; restoration matches on
    (item_name, item_type) so renamed or removed items are detectable.
    """

    id: int | None = None
    visit_id: int | None = None
    inventory_item_id: int | None = None
    item_name: str
    item_type: ItemType
    quantity: int = Field(..., gt=0)


class ClinicVisit(BaseModel):
    """A recorded clinical encounter."""

    id: int | None = None
    patient_id: str
    diagnosis: str
    notes: str | None = None
    issued_by: str
    visit_date: datetime = Field(default_factory=datetime.utcnow)
    items: list[DispensedItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def medicines(self) -> list[DispensedItem]:
        return [i for i in self.items if i.item_type == ItemType.MEDICINE]

    @property
    def supplies(self) -> list[DispensedItem]:
        return [i for i in self.items if i.item_type == ItemType.SUPPLY]
