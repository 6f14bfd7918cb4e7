"""Application use cases."""

from clinic_inventory.application.use_cases.adjust_stock import AdjustStockUseCase
from clinic_inventory.application.use_cases.create_visit import CreateVisitUseCase
from clinic_inventory.application.use_cases.delete_inventory_item import DeleteInventoryItemUseCase
from clinic_inventory.application.use_cases.delete_visit import DeleteVisitUseCase
from clinic_inventory.application.use_cases.save_inventory_item import SaveInventoryItemUseCase
from clinic_inventory.application.use_cases.update_visit import UpdateVisitUseCase

__all__ = [
    "AdjustStockUseCase",
    "CreateVisitUseCase",
    "DeleteInventoryItemUseCase",
    "DeleteVisitUseCase",
    "SaveInventoryItemUseCase",
    "UpdateVisitUseCase",
]
