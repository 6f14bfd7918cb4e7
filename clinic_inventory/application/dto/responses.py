"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from clinic_inventory.core.entities.inventory import ItemType, TransactionType

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope wrapped around every API payload."""

    success: bool = Field(..., description="Whether the request succeeded")
    data: T | None = Field(default=None, description="Payload on success")
    error: str | None = Field(default=None, description="Error code on failure")
    message: str | None = Field(default=None, description="Human-readable message")

    @classmethod
    def ok(cls, data: Any = None, message: str | None = None) -> "ApiResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, message: str) -> "ApiResponse":
        return cls(success=False, error=error, message=message)


class InventoryItemResponse(BaseModel):
    """Medicine or supply with its live stock."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Item ID")
    name: str = Field(..., description="Item name")
    item_type: ItemType = Field(..., description="medicine or supply")
    display_name: str | None = Field(default=None, description="Display label")
    description: str | None = Field(default=None, description="Description")
    category_id: int | None = Field(default=None, description="Category ID")
    supplier_id: int | None = Field(default=None, description="Supplier ID")
    stock: int = Field(..., ge=0, description="Units on hand")
    unit: str = Field(..., description="Unit of measure")
    reorder_level: int = Field(..., description="Low-stock threshold")
    is_low_stock: bool = Field(..., description="Stock at or below reorder level")
    price: float | None = Field(default=None, description="Unit price")
    expiry_date: date | None = Field(default=None, description="Expiry date")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class CategoryResponse(BaseModel):
    """Category response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Category ID")
    name: str = Field(..., description="Category name")
    item_type: ItemType = Field(..., description="medicine or supply")


class SupplierResponse(BaseModel):
    """Supplier response DTO."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Supplier ID")
    name: str = Field(..., description="Supplier name")
    contact: str | None = Field(default=None, description="Contact details")


class DispensedItemResponse(BaseModel):
    """A dispensed line as recorded at visit time."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Line ID")
    inventory_item_id: int | None = Field(default=None, description="Item ID at dispense time")
    item_name: str = Field(..., description="Item name at dispense time")
    item_type: ItemType = Field(..., description="medicine or supply")
    quantity: int = Field(..., gt=0, description="Quantity dispensed")


class VisitResponse(BaseModel):
    """Clinic visit with its dispensed lines."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Visit ID")
    patient_id: str = Field(..., description="Patient identifier")
    diagnosis: str = Field(..., description="Diagnosis")
    notes: str | None = Field(default=None, description="Notes")
    issued_by: str = Field(..., description="Staff member who dispensed")
    visit_date: datetime = Field(..., description="Visit time")
    medicines: list[DispensedItemResponse] = Field(default=[], description="Medicines dispensed")
    supplies: list[DispensedItemResponse] = Field(default=[], description="Supplies dispensed")


class DeleteVisitResponse(BaseModel):
    """Result of retracting a visit."""

    visit_id: int = Field(..., description="Deleted visit ID")
    restored: list[DispensedItemResponse] = Field(
        default=[], description="Lines whose stock was put back"
    )
    skipped: list[DispensedItemResponse] = Field(
        default=[],
        description="Lines whose item no longer exists under the recorded name",
    )


class TransactionResponse(BaseModel):
    """Stock transaction log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Transaction ID")
    transaction_type: TransactionType = Field(..., description="stock_in, stock_out or adjustment")
    item_type: ItemType = Field(..., description="medicine or supply")
    item_id: int = Field(..., description="Item ID")
    item_name: str = Field(..., description="Item name at the time")
    quantity: int = Field(..., description="Units moved")
    previous_stock: int = Field(..., description="Stock before the change")
    new_stock: int = Field(..., description="Stock after the change")
    reason: str = Field(..., description="Reason")
    actor: str = Field(..., description="Who made the change")
    created_at: datetime = Field(..., description="When the change happened")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Seconds since startup")
    database: str | None = Field(default=None, description="Database status")
    database_latency_ms: float | None = Field(default=None, description="Probe latency")
