"""Core interfaces (ports) implemented by the infrastructure layer."""

from clinic_inventory.core.interfaces.inventory_store import IInventoryStore
from clinic_inventory.core.interfaces.registry_store import ICategoryStore, ISupplierStore
from clinic_inventory.core.interfaces.transaction_log import ITransactionLog
from clinic_inventory.core.interfaces.transaction_scope import ITransactionManager
from clinic_inventory.core.interfaces.visit_store import IVisitStore

__all__ = [
    "IInventoryStore",
    "ICategoryStore",
    "ISupplierStore",
    "ITransactionLog",
    "ITransactionManager",
    "IVisitStore",
]
