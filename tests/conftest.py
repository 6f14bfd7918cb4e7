"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from clinic_inventory.application.services import reset_services
from clinic_inventory.config import reset_settings
from clinic_inventory.core.entities.inventory import InventoryItem, ItemType
from clinic_inventory.core.services import ConsistencyCoordinator
from clinic_inventory.infrastructure.storage.sqlite import connection as conn_module
from clinic_inventory.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteCategoryStore,
    SQLiteInventoryStore,
    SQLiteSupplierStore,
    SQLiteTransactionLog,
    SQLiteTransactionManager,
    SQLiteVisitStore,
)
from clinic_inventory.infrastructure.storage.sqlite.migrations import run_migrations


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at a throwaway data dir and drop cached services."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    reset_services()
    yield
    reset_settings()
    reset_services()


@pytest.fixture
async def db_path(tmp_path: Path) -> Path:
    """Fully migrated temp database."""
    path = tmp_path / "clinic_test.db"
    results = await run_migrations(path, create_backup_before=False)
    assert all(r.success for r in results)
    return path


@pytest.fixture
async def pool(db_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Install a pool over the temp database as the global pool."""
    pool = ConnectionPool(db_path, pool_size=4, busy_timeout=5000, acquire_timeout=5.0)
    await pool.initialize()
    conn_module._pool = pool
    try:
        yield pool
    finally:
        await pool.close()
        conn_module._pool = None


@pytest.fixture
def transaction_log(pool) -> SQLiteTransactionLog:
    return SQLiteTransactionLog()


@pytest.fixture
def inventory_store(transaction_log) -> SQLiteInventoryStore:
    return SQLiteInventoryStore(transaction_log=transaction_log)


@pytest.fixture
def category_store(pool) -> SQLiteCategoryStore:
    return SQLiteCategoryStore()


@pytest.fixture
def supplier_store(pool) -> SQLiteSupplierStore:
    return SQLiteSupplierStore()


@pytest.fixture
def visit_store(pool) -> SQLiteVisitStore:
    return SQLiteVisitStore()


@pytest.fixture
def coordinator(
    inventory_store, visit_store, category_store, supplier_store
) -> ConsistencyCoordinator:
    return ConsistencyCoordinator(
        inventory_store=inventory_store,
        visit_store=visit_store,
        transaction_manager=SQLiteTransactionManager(),
        category_store=category_store,
        supplier_store=supplier_store,
    )


@pytest.fixture
def seed_item(coordinator):
    """Factory creating an item with opening stock through the coordinator."""

    async def _seed(
        name: str,
        stock: int,
        item_type: ItemType = ItemType.MEDICINE,
        **fields,
    ) -> InventoryItem:
        item = InventoryItem(name=name, item_type=item_type, **fields)
        return await coordinator.save_item(item, requested_stock=stock, actor="seed")

    return _seed


@pytest.fixture
async def live_client(pool) -> AsyncGenerator[AsyncClient, None]:
    """Client for the real app wired to the temp database."""
    from clinic_inventory.api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
