"""SQLite implementation of the clinic visit ledger."""

from datetime import datetime

import aiosqlite

from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem
from clinic_inventory.core.exceptions import VisitNotFoundError
from clinic_inventory.core.interfaces.visit_store import IVisitStore
from clinic_inventory.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

# 'medicine' sorts before 'supply', then insertion order
_LINE_ORDER = "ORDER BY item_type, id"


class SQLiteVisitStore(IVisitStore):
    """SQLite implementation of visits and their dispensed lines."""

    async def create_visit(self, visit: ClinicVisit) -> ClinicVisit:
        """Insert the visit row."""
        now = datetime.utcnow()
        visit.created_at = now
        visit.updated_at = now
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO clinic_visits (
                    patient_id, diagnosis, notes, issued_by,
                    visit_date, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    visit.patient_id,
                    visit.diagnosis,
                    visit.notes,
                    visit.issued_by,
                    visit.visit_date.isoformat(),
                    visit.created_at.isoformat(),
                    visit.updated_at.isoformat(),
                ),
            )
            visit.id = cursor.lastrowid
            logger.info("visit_row_inserted", visit_id=visit.id)
            return visit

    async def add_dispensed_item(self, line: DispensedItem) -> DispensedItem:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO dispensed_items (
                    visit_id, inventory_item_id, item_name, item_type, quantity
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    line.visit_id,
                    line.inventory_item_id,
                    line.item_name,
                    line.item_type.value,
                    line.quantity,
                ),
            )
            line.id = cursor.lastrowid
            return line

    async def get_visit(self, visit_id: int) -> ClinicVisit | None:
        """Get a visit with its dispensed lines."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM clinic_visits WHERE id = ?", (visit_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            visit = self._row_to_visit(row)
            visit.items = await self._fetch_lines(conn, visit_id)
            return visit

    async def get_dispensed_items(self, visit_id: int) -> list[DispensedItem]:
        async with get_connection() as conn:
            return await self._fetch_lines(conn, visit_id)

    async def list_visits(
        self, search: str | None = None, limit: int = 100, offset: int = 0
    ) -> list[ClinicVisit]:
        """List visits newest first, optionally filtered by patient or diagnosis."""
        sql = "SELECT * FROM clinic_visits"
        params: list = []
        if search:
            sql += " WHERE patient_id LIKE ? OR diagnosis LIKE ?"
            params += [f"%{search}%", f"%{search}%"]
        sql += " ORDER BY visit_date DESC, id DESC LIMIT ? OFFSET ?"
        params += [limit, offset]

        async with get_connection() as conn:
            cursor = await conn.execute(sql, params)
            rows = await cursor.fetchall()
            visits = [self._row_to_visit(row) for row in rows]
            for visit in visits:
                visit.items = await self._fetch_lines(conn, visit.id)  # type: ignore[arg-type]
            return visits

    async def update_visit(self, visit: ClinicVisit) -> ClinicVisit:
        """Update visit metadata; dispensed lines are not touched."""
        visit.updated_at = datetime.utcnow()
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE clinic_visits SET
                    patient_id = ?, diagnosis = ?, notes = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    visit.patient_id,
                    visit.diagnosis,
                    visit.notes,
                    visit.updated_at.isoformat(),
                    visit.id,
                ),
            )
            if cursor.rowcount == 0:
                raise VisitNotFoundError(visit.id)  # type: ignore[arg-type]
            logger.info("visit_updated", visit_id=visit.id)
            return visit

    async def delete_dispensed_items(self, visit_id: int) -> int:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM dispensed_items WHERE visit_id = ?", (visit_id,)
            )
            return cursor.rowcount

    async def delete_visit(self, visit_id: int) -> bool:
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM clinic_visits WHERE id = ?", (visit_id,)
            )
            return cursor.rowcount > 0

    async def _fetch_lines(
        self, conn: aiosqlite.Connection, visit_id: int
    ) -> list[DispensedItem]:
        cursor = await conn.execute(
            f"SELECT * FROM dispensed_items WHERE visit_id = ? {_LINE_ORDER}",
            (visit_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_line(row) for row in rows]

    @staticmethod
    def _row_to_visit(row: aiosqlite.Row) -> ClinicVisit:
        return ClinicVisit(
            id=row["id"],
            patient_id=row["patient_id"],
            diagnosis=row["diagnosis"],
            notes=row["notes"],
            issued_by=row["issued_by"],
            visit_date=datetime.fromisoformat(row["visit_date"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_line(row: aiosqlite.Row) -> DispensedItem:
        return DispensedItem(
            id=row["id"],
            visit_id=row["visit_id"],
            inventory_item_id=row["inventory_item_id"],
            item_name=row["item_name"],
            item_type=ItemType(row["item_type"]),
            quantity=row["quantity"],
        )
