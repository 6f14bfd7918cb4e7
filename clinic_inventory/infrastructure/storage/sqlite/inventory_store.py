"""SQLite implementation of inventory storage."""

from datetime import date, datetime

import aiosqlite

from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import (
    InventoryItem,
    ItemKey,
    ItemType,
    TransactionRecord,
    TransactionType,
)
from clinic_inventory.core.exceptions import (
    DuplicateItemError,
    InsufficientStockError,
    InventoryItemNotFoundError,
    ValidationError,
)
from clinic_inventory.core.interfaces.inventory_store import IInventoryStore
from clinic_inventory.core.interfaces.transaction_log import ITransactionLog
from clinic_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)
from clinic_inventory.infrastructure.storage.sqlite.transaction_log import (
    SQLiteTransactionLog,
)

logger = get_logger(__name__)


class SQLiteInventoryStore(IInventoryStore):
    """SQLite implementation of inventory items and their stock counters."""

    def __init__(self, transaction_log: ITransactionLog | None = None):
        self._transaction_log = transaction_log or SQLiteTransactionLog()

    async def get_by_id(self, item_id: int) -> InventoryItem | None:
        """Get inventory item by ID."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE id = ?", (item_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def get_by_name(self, name: str, item_type: ItemType) -> InventoryItem | None:
        """Get inventory item by exact name within a type."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_items WHERE name = ? AND item_type = ?",
                (name, item_type.value),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_item(row)

    async def search(
        self, text: str, item_type: ItemType | None = None, limit: int = 100
    ) -> list[InventoryItem]:
        """Case-insensitive substring search on name and display name."""
        pattern = f"%{text}%"
        sql = """
            SELECT * FROM inventory_items
            WHERE (name LIKE ? OR COALESCE(display_name, '') LIKE ?)
        """
        params: list = [pattern, pattern]
        if item_type is not None:
            sql += " AND item_type = ?"
            params.append(item_type.value)
        sql += " ORDER BY name LIMIT ?"
        params.append(limit)

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def list_all(
        self,
        item_type: ItemType | None = None,
        low_stock_only: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> list[InventoryItem]:
        """List items ordered by name."""
        clauses: list[str] = []
        params: list = []
        if item_type is not None:
            clauses.append("item_type = ?")
            params.append(item_type.value)
        if low_stock_only:
            clauses.append("stock <= reorder_level")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM inventory_items
                {where}
                ORDER BY name
                LIMIT ? OFFSET ?
                """,
                (*params, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_item(row) for row in rows]

    async def upsert(self, item: InventoryItem) -> InventoryItem:
        """
        Insert or update an item.

        The stock column is never written here: new rows start at zero and
        existing rows keep their stock. Stock only moves through apply_delta.
        """
        now = datetime.utcnow()
        item.updated_at = now
        try:
            async with get_transaction() as conn:
                if item.id is None:
                    item.created_at = now
                    cursor = await conn.execute(
                        """
                        INSERT INTO inventory_items (
                            name, item_type, display_name, description,
                            category_id, supplier_id, stock, unit, reorder_level,
                            price, expiry_date, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, 0, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            item.name,
                            item.item_type.value,
                            item.display_name,
                            item.description,
                            item.category_id,
                            item.supplier_id,
                            item.unit,
                            item.reorder_level,
                            item.price,
                            item.expiry_date.isoformat() if item.expiry_date else None,
                            item.created_at.isoformat(),
                            item.updated_at.isoformat(),
                        ),
                    )
                    item.id = cursor.lastrowid
                    item.stock = 0
                    logger.info(
                        "inventory_item_created",
                        item_id=item.id,
                        name=item.name,
                        item_type=item.item_type.value,
                    )
                    return item

                cursor = await conn.execute(
                    """
                    UPDATE inventory_items SET
                        name = ?, display_name = ?, description = ?,
                        category_id = ?, supplier_id = ?, unit = ?,
                        reorder_level = ?, price = ?, expiry_date = ?,
                        updated_at = ?
                    WHERE id = ? AND item_type = ?
                    """,
                    (
                        item.name,
                        item.display_name,
                        item.description,
                        item.category_id,
                        item.supplier_id,
                        item.unit,
                        item.reorder_level,
                        item.price,
                        item.expiry_date.isoformat() if item.expiry_date else None,
                        item.updated_at.isoformat(),
                        item.id,
                        item.item_type.value,
                    ),
                )
                if cursor.rowcount == 0:
                    raise InventoryItemNotFoundError(item.id, item.item_type.value)

                cursor = await conn.execute(
                    "SELECT * FROM inventory_items WHERE id = ?", (item.id,)
                )
                row = await cursor.fetchone()
                logger.info("inventory_item_updated", item_id=item.id)
                return self._row_to_item(row)
        except aiosqlite.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateItemError(item.name, item.item_type.value) from e
            raise

    async def delete(self, item_id: int) -> None:
        """Delete an item. Its transaction history stays in the ledger."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM inventory_items WHERE id = ?", (item_id,)
            )
            if cursor.rowcount == 0:
                raise InventoryItemNotFoundError(item_id)
            logger.info("inventory_item_deleted", item_id=item_id)

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

        The non-negative check and the write are one conditional UPDATE, so
        there is no window between reading and writing the counter.
        """
        if delta == 0:
            raise ValidationError("delta", "must be non-zero", delta)

        where, key_params = self._key_clause(item_key)
        now = datetime.utcnow()

        async with get_transaction() as conn:
            cursor = await conn.execute(
                f"""
                UPDATE inventory_items
                SET stock = stock + ?, updated_at = ?
                WHERE {where} AND stock + ? >= 0
                RETURNING id, name, item_type, stock
                """,
                (delta, now.isoformat(), *key_params, delta),
            )
            rows = await cursor.fetchall()

            if not rows:
                cursor = await conn.execute(
                    f"SELECT name, stock FROM inventory_items WHERE {where}",
                    key_params,
                )
                current = await cursor.fetchone()
                if current is None:
                    raise InventoryItemNotFoundError(
                        str(item_key),
                        item_key.item_type.value if item_key.item_type else None,
                    )
                raise InsufficientStockError(
                    item_name=current["name"],
                    requested=abs(delta),
                    available=current["stock"],
                )

            row = rows[0]
            new_stock = row["stock"]
            if transaction_type is None:
                transaction_type = (
                    TransactionType.STOCK_IN if delta > 0 else TransactionType.STOCK_OUT
                )

            await self._transaction_log.append(
                TransactionRecord(
                    transaction_type=transaction_type,
                    item_type=ItemType(row["item_type"]),
                    item_id=row["id"],
                    item_name=row["name"],
                    quantity=abs(delta),
                    previous_stock=new_stock - delta,
                    new_stock=new_stock,
                    reason=reason,
                    actor=actor,
                    created_at=now,
                )
            )

            logger.info(
                "stock_delta_applied",
                item_id=row["id"],
                delta=delta,
                new_stock=new_stock,
                reason=reason,
            )
            return new_stock

    @staticmethod
    def _key_clause(item_key: ItemKey) -> tuple[str, tuple]:
        if item_key.item_id is not None:
            return "id = ?", (item_key.item_id,)
        return "name = ? AND item_type = ?", (
            item_key.name,
            item_key.item_type.value,  # type: ignore[union-attr]
        )

    @staticmethod
    def _row_to_item(row: aiosqlite.Row) -> InventoryItem:
        """Convert a database row to an InventoryItem entity."""
        expiry_date = None
        if row["expiry_date"]:
            try:
                expiry_date = date.fromisoformat(row["expiry_date"])
            except (ValueError, TypeError):
                pass

        return InventoryItem(
            id=row["id"],
            name=row["name"],
            item_type=ItemType(row["item_type"]),
            display_name=row["display_name"],
            description=row["description"],
            category_id=row["category_id"],
            supplier_id=row["supplier_id"],
            stock=row["stock"],
            unit=row["unit"],
            reorder_level=row["reorder_level"],
            price=row["price"],
            expiry_date=expiry_date,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
