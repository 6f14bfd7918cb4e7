"""SQLite storage implementations."""

from clinic_inventory.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from clinic_inventory.infrastructure.storage.sqlite.inventory_store import (
    SQLiteInventoryStore,
)
from clinic_inventory.infrastructure.storage.sqlite.registry_store import (
    SQLiteCategoryStore,
    SQLiteSupplierStore,
)
from clinic_inventory.infrastructure.storage.sqlite.transaction_log import (
    SQLiteTransactionLog,
)
from clinic_inventory.infrastructure.storage.sqlite.transaction_manager import (
    SQLiteTransactionManager,
)
from clinic_inventory.infrastructure.storage.sqlite.visit_store import SQLiteVisitStore

# Aliases used by the application lifespan
get_connection_pool = get_pool
close_connection_pool = close_pool

# Singleton instances
_transaction_log: SQLiteTransactionLog | None = None
_inventory_store: SQLiteInventoryStore | None = None
_category_store: SQLiteCategoryStore | None = None
_supplier_store: SQLiteSupplierStore | None = None
_visit_store: SQLiteVisitStore | None = None
_transaction_manager: SQLiteTransactionManager | None = None


async def get_transaction_log() -> SQLiteTransactionLog:
    """Get singleton transaction log instance."""
    global _transaction_log
    if _transaction_log is None:
        _transaction_log = SQLiteTransactionLog()
    return _transaction_log


async def get_inventory_store() -> SQLiteInventoryStore:
    """Get singleton inventory store instance."""
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = SQLiteInventoryStore(transaction_log=await get_transaction_log())
    return _inventory_store


async def get_category_store() -> SQLiteCategoryStore:
    """Get singleton category store instance."""
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


async def get_supplier_store() -> SQLiteSupplierStore:
    """Get singleton supplier store instance."""
    global _supplier_store
    if _supplier_store is None:
        _supplier_store = SQLiteSupplierStore()
    return _supplier_store


async def get_visit_store() -> SQLiteVisitStore:
    """Get singleton visit store instance."""
    global _visit_store
    if _visit_store is None:
        _visit_store = SQLiteVisitStore()
    return _visit_store


async def get_transaction_manager() -> SQLiteTransactionManager:
    """Get singleton transaction manager instance."""
    global _transaction_manager
    if _transaction_manager is None:
        _transaction_manager = SQLiteTransactionManager()
    return _transaction_manager


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "get_connection_pool",
    "close_connection_pool",
    # Store classes
    "SQLiteInventoryStore",
    "SQLiteCategoryStore",
    "SQLiteSupplierStore",
    "SQLiteTransactionLog",
    "SQLiteTransactionManager",
    "SQLiteVisitStore",
    # Factory functions
    "get_inventory_store",
    "get_category_store",
    "get_supplier_store",
    "get_transaction_log",
    "get_transaction_manager",
    "get_visit_store",
]
