"""Abstract interface for the stock transaction ledger."""

from abc import ABC, abstractmethod

from clinic_inventory.core.entities.inventory import ItemType, TransactionRecord


class ITransactionLog(ABC):
    """Append-only audit ledger. There is deliberately no update or delete."""

    @abstractmethod
    async def append(self, record: TransactionRecord) -> TransactionRecord:
        """Record a stock mutation in the caller's transaction scope."""
        pass

    @abstractmethod
    async def list_records(
        self,
        item_id: int | None = None,
        item_type: ItemType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TransactionRecord]:
        """List records, newest first."""
        pass
