"""Inventory domain entities."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class ItemType(str, Enum):
    """Kinds of stocked medical items."""

    MEDICINE = "medicine"
    SUPPLY = "supply"


class TransactionType(str, Enum):
    """Kinds of stock mutation recorded in the transaction log."""

    STOCK_IN = "stock_in"
    STOCK_OUT = "stock_out"
    ADJUSTMENT = "adjustment"


class InventoryItem(BaseModel):
    """A medicine or supply with its live stock counter."""

    id: int | None = None
    name: str
    item_type: ItemType
    display_name: str | None = None
    description: str | None = None
    category_id: int | None = None
    supplier_id: int | None = None
    stock: int = Field(default=0, ge=0)
    unit: str = "pcs"
    reorder_level: int = Field(default=10, ge=0)
    price: float | None = None
    expiry_date: date | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def is_low_stock(self) -> bool:
        """Stock has reached the reorder level."""
        return self.stock <= self.reorder_level


class TransactionRecord(BaseModel):
    """Immutable audit entry for a single stock mutation."""

    id: int | None = None
    transaction_type: TransactionType
    item_type: ItemType
    item_id: int
    item_name: str
    quantity: int  # always positive
    previous_stock: int
    new_stock: int
    reason: str
    actor: str
    created_at: datetime = Field(default_factory=datetime.utcnow)


@dataclass(frozen=True)
class ItemKey:
    """Identifies an inventory item by id or by (name, item_type)."""

    item_id: int | None = None
    name: str | None = None
    item_type: ItemType | None = None

    def __post_init__(self) -> None:
        if self.item_id is None and (self.name is None or self.item_type is None):
            raise ValueError("ItemKey needs an id or both name and item_type")

    @classmethod
    def by_id(cls, item_id: int) -> "ItemKey":
        return cls(item_id=item_id)

    @classmethod
    def by_name(cls, name: str, item_type: ItemType) -> "ItemKey":
        return cls(name=name, item_type=item_type)

    def __str__(self) -> str:
        if self.item_id is not None:
            return str(self.item_id)
        return f"{self.item_type.value}:{self.name}"  # type: ignore[union-attr]
