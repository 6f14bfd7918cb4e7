"""Abstract interface for the clinic visit ledger."""

from abc import ABC, abstractmethod

from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem


class IVisitStore(ABC):
    """Interface for visits and their dispensed lines."""

    @abstractmethod
    async def create_visit(self, visit: ClinicVisit) -> ClinicVisit:
        """Insert the visit row only; lines are added separately."""
        pass

    @abstractmethod
    async def add_dispensed_item(self, line: DispensedItem) -> DispensedItem:
        pass

    @abstractmethod
    async def get_visit(self, visit_id: int) -> ClinicVisit | None:
        """Get a visit with its lines (medicines first, then entry order)."""
        pass

    @abstractmethod
    async def get_dispensed_items(self, visit_id: int) -> list[DispensedItem]:
        pass

    @abstractmethod
    async def list_visits(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[ClinicVisit]:
        """List visits newest first, optionally filtered by patient or diagnosis."""
        pass

    @abstractmethod
    async def update_visit(self, visit: ClinicVisit) -> ClinicVisit:
        """Update visit metadata; lines are immutable."""
        pass

    @abstractmethod
    async def delete_dispensed_items(self, visit_id: int) -> int:
        pass

    @abstractmethod
    async def delete_visit(self, visit_id: int) -> bool:
        pass
