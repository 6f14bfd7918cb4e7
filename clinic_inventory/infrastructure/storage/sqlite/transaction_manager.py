"""SQLite implementation of transaction scopes."""

from clinic_inventory.core.interfaces.transaction_scope import ITransactionManager
from clinic_inventory.infrastructure.storage.sqlite.connection import get_pool


class SQLiteTransactionManager(ITransactionManager):
    """Begin/commit/abort against the global pool for the current task."""

    async def begin(self) -> None:
        pool = await get_pool()
        await pool.begin()

    async def commit(self) -> None:
        pool = await get_pool()
        await pool.commit()

    async def abort(self) -> None:
        pool = await get_pool()
        await pool.abort()
