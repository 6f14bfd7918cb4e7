"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services. Use
cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from clinic_inventory.core.services import ConsistencyCoordinator

if TYPE_CHECKING:
    from clinic_inventory.core.interfaces import (
        ICategoryStore,
        IInventoryStore,
        ISupplierStore,
        ITransactionManager,
        IVisitStore,
    )


# Singleton service instance
_coordinator: ConsistencyCoordinator | None = None


async def get_consistency_coordinator(
    inventory_store: "IInventoryStore | None" = None,
    visit_store: "IVisitStore | None" = None,
    transaction_manager: "ITransactionManager | None" = None,
    category_store: "ICategoryStore | None" = None,
    supplier_store: "ISupplierStore | None" = None,
) -> ConsistencyCoordinator:
    """
    Get or create the ConsistencyCoordinator.

    Creates SQLite-backed dependencies for anything not provided. The
    singleton is only cached when every dependency came from the defaults.

    Returns:
        Configured ConsistencyCoordinator
    """
    global _coordinator

    overrides = (
        inventory_store,
        visit_store,
        transaction_manager,
        category_store,
        supplier_store,
    )
    use_defaults = all(dep is None for dep in overrides)

    if _coordinator is not None and use_defaults:
        return _coordinator

    # Lazy import infrastructure
    from clinic_inventory.infrastructure.storage import sqlite

    coordinator = ConsistencyCoordinator(
        inventory_store=inventory_store or await sqlite.get_inventory_store(),
        visit_store=visit_store or await sqlite.get_visit_store(),
        transaction_manager=transaction_manager or await sqlite.get_transaction_manager(),
        category_store=category_store or await sqlite.get_category_store(),
        supplier_store=supplier_store or await sqlite.get_supplier_store(),
    )

    if use_defaults:
        _coordinator = coordinator

    return coordinator


def reset_services() -> None:
    """Drop cached service instances (used by tests)."""
    global _coordinator
    _coordinator = None
