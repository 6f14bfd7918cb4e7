"""Abstract interfaces for category and supplier registries."""

from abc import ABC, abstractmethod

from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.entities.registry import Category, Supplier


class ICategoryStore(ABC):
    """Interface for category persistence."""

    @abstractmethod
    async def get(self, category_id: int) -> Category | None:
        pass

    @abstractmethod
    async def list_categories(
        self, item_type: ItemType | None = None, search: str | None = None
    ) -> list[Category]:
        pass

    @abstractmethod
    async def create(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def update(self, category: Category) -> Category:
        pass

    @abstractmethod
    async def delete(self, category_id: int) -> None:
        """Delete unless referenced by an inventory item."""
        pass


class ISupplierStore(ABC):
    """Interface for supplier persistence."""

    @abstractmethod
    async def get(self, supplier_id: int) -> Supplier | None:
        pass

    @abstractmethod
    async def list_suppliers(self, search: str | None = None) -> list[Supplier]:
        pass

    @abstractmethod
    async def create(self, supplier: Supplier) -> Supplier:
        pass

    @abstractmethod
    async def update(self, supplier: Supplier) -> Supplier:
        pass

    @abstractmethod
    async def delete(self, supplier_id: int) -> None:
        """Delete unless referenced by an inventory item."""
        pass
