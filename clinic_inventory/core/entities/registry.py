"""Reference data consulted by inventory items."""

from datetime import datetime

from pydantic import BaseModel, Field

from clinic_inventory.core.entities.inventory import ItemType


class Category(BaseModel):
    """Item category, scoped to medicines or supplies."""

    id: int | None = None
    item_type: ItemType
    name: str
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


class Supplier(BaseModel):
    """Item supplier."""

    id: int | None = None
    name: str
    contact: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
