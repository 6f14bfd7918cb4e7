"""SQLite implementation of the stock transaction ledger."""

from datetime import datetime

import aiosqlite

from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import (
    ItemType,
    TransactionRecord,
    TransactionType,
)
from clinic_inventory.core.interfaces.transaction_log import ITransactionLog
from clinic_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


class SQLiteTransactionLog(ITransactionLog):
    """Append-only ledger; the schema rejects UPDATE and DELETE with triggers."""

    async def append(self, record: TransactionRecord) -> TransactionRecord:
        """Record a stock mutation."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_transactions (
                    transaction_type, item_type, item_id, item_name, quantity,
                    previous_stock, new_stock, reason, actor, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.transaction_type.value,
                    record.item_type.value,
                    record.item_id,
                    record.item_name,
                    record.quantity,
                    record.previous_stock,
                    record.new_stock,
                    record.reason,
                    record.actor,
                    record.created_at.isoformat(),
                ),
            )
            record.id = cursor.lastrowid
            logger.info(
                "transaction_recorded",
                transaction_id=record.id,
                type=record.transaction_type.value,
                item_id=record.item_id,
                qty=record.quantity,
            )
            return record

    async def list_records(
        self,
        item_id: int | None = None,
        item_type: ItemType | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[TransactionRecord]:
        """List records, newest first."""
        clauses: list[str] = []
        params: list = []
        if item_id is not None:
            clauses.append("item_id = ?")
            params.append(item_id)
        if item_type is not None:
            clauses.append("item_type = ?")
            params.append(item_type.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM inventory_transactions
                {where}
                ORDER BY id DESC
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> TransactionRecord:
        """Convert a database row to a TransactionRecord entity."""
        return TransactionRecord(
            id=row["id"],
            transaction_type=TransactionType(row["transaction_type"]),
            item_type=ItemType(row["item_type"]),
            item_id=row["item_id"],
            item_name=row["item_name"],
            quantity=row["quantity"],
            previous_stock=row["previous_stock"],
            new_stock=row["new_stock"],
            reason=row["reason"],
            actor=row["actor"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
