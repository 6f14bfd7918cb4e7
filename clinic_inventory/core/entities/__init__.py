"""Core domain entities."""

from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemKey,
    ItemType,
    TransactionRecord,
    TransactionType,
)
from clinic_inventory.core.entities.registry import Category, Supplier
from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem

__all__ = [
    # Inventory
    "InventoryItem",
    "ItemKey",
    "ItemType",
    "TransactionRecord",
    "TransactionType",
    # Registries
    "Category",
    "Supplier",
    # Visits
    "ClinicVisit",
    "DispensedItem",
]
