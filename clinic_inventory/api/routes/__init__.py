"""API route modules."""

from clinic_inventory.api.routes.health import router as health_router
from clinic_inventory.api.routes.inventory import medicines_router, supplies_router
from clinic_inventory.api.routes.registry import categories_router, suppliers_router
from clinic_inventory.api.routes.transactions import router as transactions_router
from clinic_inventory.api.routes.visits import router as visits_router

__all__ = [
    "health_router",
    "medicines_router",
    "supplies_router",
    "categories_router",
    "suppliers_router",
    "visits_router",
    "transactions_router",
]
