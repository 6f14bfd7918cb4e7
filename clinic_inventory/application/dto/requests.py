"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from clinic_inventory.core.entities.inventory import ItemType


class _Request(BaseModel):
    """Strips surrounding whitespace so blank strings fail min_length."""

    model_config = ConfigDict(str_strip_whitespace=True)


# --- Inventory items ---


class SaveInventoryItemRequest(_Request):
    """Create or replace a medicine or supply.

    The item type comes from the route, not the body.
    """

    name: str = Field(..., min_length=1, description="Unique name within the item type")
    display_name: str | None = Field(default=None, description="Label shown in lists")
    description: str | None = Field(default=None, description="Free-text description")
    category_id: int | None = Field(default=None, gt=0, description="Category ID")
    supplier_id: int | None = Field(default=None, gt=0, description="Supplier ID")
    stock: int | None = Field(
        default=None,
        ge=0,
        description="Desired stock level; changes are recorded as stock transactions",
    )
    unit: str = Field(default="pcs", min_length=1, description="Unit of measure")
    reorder_level: int | None = Field(
        default=None,
        ge=0,
        description="Low-stock threshold (defaults from settings)",
    )
    price: float | None = Field(default=None, ge=0, description="Unit price")
    expiry_date: date | None = Field(default=None, description="Expiry date")


class AdjustStockRequest(_Request):
    """Manual stock correction."""

    delta: int = Field(..., description="Signed change to apply", examples=[5, -2])
    reason: str = Field(..., min_length=1, description="Why the stock is being corrected")
    actor: str | None = Field(default=None, description="Who is making the change")


# --- Reference data ---


class CreateCategoryRequest(_Request):
    """Request to create a category."""

    name: str = Field(..., min_length=1, description="Category name")
    item_type: ItemType = Field(..., description="Which items the category groups")


class UpdateCategoryRequest(_Request):
    """Request to rename a category."""

    name: str = Field(..., min_length=1, description="Category name")


class SaveSupplierRequest(_Request):
    """Request to create or update a supplier."""

    name: str = Field(..., min_length=1, description="Supplier name")
    contact: str | None = Field(default=None, description="Phone, email or address")


# --- Clinic visits ---


class DispensedLineRequest(_Request):
    """One dispensed line: an item reference and a positive quantity."""

    item_id: int | None = Field(default=None, gt=0, description="Inventory item ID")
    name: str | None = Field(
        default=None,
        min_length=1,
        description="Item name, used when item_id is not given",
    )
    quantity: int = Field(..., gt=0, description="Quantity dispensed")

    @model_validator(mode="after")
    def _has_reference(self) -> "DispensedLineRequest":
        if self.item_id is None and self.name is None:
            raise ValueError("each line needs an item_id or a name")
        return self


class CreateVisitRequest(_Request):
    """Request to record a clinic visit and the items dispensed during it."""

    patient_id: str = Field(..., min_length=1, description="Patient identifier")
    diagnosis: str = Field(..., min_length=1, description="Diagnosis")
    issued_by: str = Field(..., min_length=1, description="Staff member dispensing")
    notes: str | None = Field(default=None, description="Additional notes")
    visit_date: datetime | None = Field(
        default=None,
        description="Visit time in ISO format (defaults to now)",
    )
    medicines: list[DispensedLineRequest] = Field(
        default_factory=list, description="Medicines dispensed"
    )
    supplies: list[DispensedLineRequest] = Field(
        default_factory=list, description="Supplies dispensed"
    )


class UpdateVisitRequest(_Request):
    """Request to change visit metadata. Dispensed lines cannot be edited."""

    patient_id: str | None = Field(default=None, min_length=1, description="Patient identifier")
    diagnosis: str | None = Field(default=None, min_length=1, description="Diagnosis")
    notes: str | None = Field(default=None, description="Additional notes; null clears them")

    @model_validator(mode="after")
    def _required_fields_not_cleared(self) -> "UpdateVisitRequest":
        for name in ("patient_id", "diagnosis"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
