"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers.
"""

from clinic_inventory.application.use_cases import (
    AdjustStockUseCase,
    CreateVisitUseCase,
    DeleteInventoryItemUseCase,
    DeleteVisitUseCase,
    SaveInventoryItemUseCase,
    UpdateVisitUseCase,
)
from clinic_inventory.core.interfaces import (
    ICategoryStore,
    IInventoryStore,
    ISupplierStore,
    ITransactionLog,
    IVisitStore,
)
from clinic_inventory.infrastructure.storage.sqlite import (
    get_category_store,
    get_inventory_store,
    get_supplier_store,
    get_transaction_log,
    get_visit_store,
)


# Use case dependencies
def get_create_visit_use_case() -> CreateVisitUseCase:
    """Get create visit use case."""
    return CreateVisitUseCase()


def get_delete_visit_use_case() -> DeleteVisitUseCase:
    """Get delete visit use case."""
    return DeleteVisitUseCase()


def get_update_visit_use_case() -> UpdateVisitUseCase:
    """Get update visit use case."""
    return UpdateVisitUseCase()


def get_save_item_use_case() -> SaveInventoryItemUseCase:
    """Get save inventory item use case."""
    return SaveInventoryItemUseCase()


def get_delete_item_use_case() -> DeleteInventoryItemUseCase:
    """Get delete inventory item use case."""
    return DeleteInventoryItemUseCase()


def get_adjust_stock_use_case() -> AdjustStockUseCase:
    """Get adjust stock use case."""
    return AdjustStockUseCase()


# Store dependencies
async def get_item_store() -> IInventoryStore:
    """Get inventory store."""
    return await get_inventory_store()


async def get_cat_store() -> ICategoryStore:
    """Get category store."""
    return await get_category_store()


async def get_sup_store() -> ISupplierStore:
    """Get supplier store."""
    return await get_supplier_store()


async def get_vis_store() -> IVisitStore:
    """Get visit store."""
    return await get_visit_store()


async def get_tx_log() -> ITransactionLog:
    """Get transaction log."""
    return await get_transaction_log()
