"""
Core business logic services.

Layer-pure services that depend only on:
- clinic_inventory/core/entities/*
- clinic_inventory/core/interfaces/*
- clinic_inventory/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from clinic_inventory.core.services.consistency_coordinator import (
    ConsistencyCoordinator,
    VisitDeletion,
    dispense_order,
)

__all__ = [
    "ConsistencyCoordinator",
    "VisitDeletion",
    "dispense_order",
]
