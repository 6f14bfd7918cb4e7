"""Abstract interface for inventory storage."""

from abc import ABC, abstractmethod

from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemKey,
    ItemType,
    TransactionType,
)


class IInventoryStore(ABC):
    """Interface for inventory items and their stock counters."""

    @abstractmethod
    async def get_by_id(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        pass

    @abstractmethod
    async def get_by_name(self, name: str, item_type: ItemType) -> InventoryItem | None:
        """Get inventory item by exact name within a type."""
        pass

    @abstractmethod
    async def search(
        self, text: str, item_type: ItemType | None = None, limit: int = 100
    ) -> list[InventoryItem]:
        """Case-insensitive substring search on item names."""
        pass

    @abstractmethod
    async def list_all(
        self,
        item_type: ItemType | None = None,
        low_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List items ordered by name."""
        pass

    @abstractmethod
    async def upsert(self, item: InventoryItem) -> InventoryItem:
        """Insert when item.id is None, else update every column but stock."""
        pass

    @abstractmethod
    async def delete(self, item_id: int) -> None:
        """Delete an item; raises when absent."""
        pass

    @abstractmethod
    async def apply_delta(
        self,
        item_key: ItemKey,
        delta: int,
        reason: str,
        actor: str,
        transaction_type: TransactionType | None = None,
    ) -> int:
        """
        Atomically add delta to an item's stock and log the transaction.

        Returns the new stock. Raises InsufficientStockError when the result
        would be negative and InventoryItemNotFoundError when the key matches
        nothing; in both cases nothing is written.
        """
        pass
