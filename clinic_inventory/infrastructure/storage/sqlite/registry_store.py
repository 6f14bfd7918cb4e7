"""SQLite implementation of the category and supplier registries."""

from datetime import datetime

import aiosqlite

from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.entities.registry import Category, Supplier
from clinic_inventory.core.exceptions import (
    CategoryNotFoundError,
    SupplierNotFoundError,
    UsageConflictError,
)
from clinic_inventory.core.interfaces.registry_store import ICategoryStore, ISupplierStore
from clinic_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)


async def _usage_count(conn: aiosqlite.Connection, column: str, ref_id: int) -> int:
    cursor = await conn.execute(
        f"SELECT COUNT(*) FROM inventory_items WHERE {column} = ?", (ref_id,)
    )
    row = await cursor.fetchone()
    return row[0]


class SQLiteCategoryStore(ICategoryStore):
    """SQLite implementation of category storage."""

    async def get(self, category_id: int) -> Category | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_category(row)

    async def list_categories(
        self, item_type: ItemType | None = None, search: str | None = None
    ) -> list[Category]:
        clauses: list[str] = []
        params: list = []
        if item_type is not None:
            clauses.append("item_type = ?")
            params.append(item_type.value)
        if search:
            clauses.append("name LIKE ?")
            params.append(f"%{search}%")
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM inventory_categories {where} ORDER BY item_type, name",
                params,
            )
            rows = await cursor.fetchall()
            return [self._row_to_category(row) for row in rows]

    async def create(self, category: Category) -> Category:
        now = datetime.utcnow()
        category.created_at = now
        category.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_categories (item_type, name, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    category.item_type.value,
                    category.name,
                    category.created_at.isoformat(),
                    category.updated_at.isoformat(),
                ),
            )
            category.id = cursor.lastrowid
            logger.info("category_created", category_id=category.id, name=category.name)
            return category

    async def update(self, category: Category) -> Category:
        """Rename a category. Its item type is fixed at creation."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_categories SET name = ?, updated_at = ?
                WHERE id = ?
                """,
                (category.name, datetime.utcnow().isoformat(), category.id),
            )
            if cursor.rowcount == 0:
                raise CategoryNotFoundError(category.id)  # type: ignore[arg-type]
            cursor = await conn.execute(
                "SELECT * FROM inventory_categories WHERE id = ?", (category.id,)
            )
            row = await cursor.fetchone()
            logger.info("category_updated", category_id=category.id)
            return self._row_to_category(row)

    async def delete(self, category_id: int) -> None:
        """Delete a category unless an inventory item still references it."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT id FROM inventory_categories WHERE id = ?", (category_id,)
            )
            if await cursor.fetchone() is None:
                raise CategoryNotFoundError(category_id)

            in_use = await _usage_count(conn, "category_id", category_id)
            if in_use:
                logger.warning(
                    "category_delete_blocked", category_id=category_id, usage=in_use
                )
                raise UsageConflictError("category", category_id, in_use)

            await conn.execute(
                "DELETE FROM inventory_categories WHERE id = ?", (category_id,)
            )
            logger.info("category_deleted", category_id=category_id)

    @staticmethod
    def _row_to_category(row: aiosqlite.Row) -> Category:
        return Category(
            id=row["id"],
            item_type=ItemType(row["item_type"]),
            name=row["name"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteSupplierStore(ISupplierStore):
    """SQLite implementation of supplier storage."""

    async def get(self, supplier_id: int) -> Supplier | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_suppliers WHERE id = ?", (supplier_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_supplier(row)

    async def list_suppliers(self, search: str | None = None) -> list[Supplier]:
        async with get_connection() as conn:
            if search:
                cursor = await conn.execute(
                    "SELECT * FROM inventory_suppliers WHERE name LIKE ? ORDER BY name",
                    (f"%{search}%",),
                )
            else:
                cursor = await conn.execute(
                    "SELECT * FROM inventory_suppliers ORDER BY name"
                )
            rows = await cursor.fetchall()
            return [self._row_to_supplier(row) for row in rows]

    async def create(self, supplier: Supplier) -> Supplier:
        now = datetime.utcnow()
        supplier.created_at = now
        supplier.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO inventory_suppliers (name, contact, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    supplier.name,
                    supplier.contact,
                    supplier.created_at.isoformat(),
                    supplier.updated_at.isoformat(),
                ),
            )
            supplier.id = cursor.lastrowid
            logger.info("supplier_created", supplier_id=supplier.id, name=supplier.name)
            return supplier

    async def update(self, supplier: Supplier) -> Supplier:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE inventory_suppliers SET name = ?, contact = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    supplier.name,
                    supplier.contact,
                    datetime.utcnow().isoformat(),
                    supplier.id,
                ),
            )
            if cursor.rowcount == 0:
                raise SupplierNotFoundError(supplier.id)  # type: ignore[arg-type]
            cursor = await conn.execute(
                "SELECT * FROM inventory_suppliers WHERE id = ?", (supplier.id,)
            )
            row = await cursor.fetchone()
            logger.info("supplier_updated", supplier_id=supplier.id)
            return self._row_to_supplier(row)

    async def delete(self, supplier_id: int) -> None:
        """Delete a supplier unless an inventory item still references it."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT id FROM inventory_suppliers WHERE id = ?", (supplier_id,)
            )
            if await cursor.fetchone() is None:
                raise SupplierNotFoundError(supplier_id)

            in_use = await _usage_count(conn, "supplier_id", supplier_id)
            if in_use:
                logger.warning(
                    "supplier_delete_blocked", supplier_id=supplier_id, usage=in_use
                )
                raise UsageConflictError("supplier", supplier_id, in_use)

            await conn.execute(
                "DELETE FROM inventory_suppliers WHERE id = ?", (supplier_id,)
            )
            logger.info("supplier_deleted", supplier_id=supplier_id)

    @staticmethod
    def _row_to_supplier(row: aiosqlite.Row) -> Supplier:
        return Supplier(
            id=row["id"],
            name=row["name"],
            contact=row["contact"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
