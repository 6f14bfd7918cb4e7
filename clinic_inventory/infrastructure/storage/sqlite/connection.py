"""
Async SQLite connection pool with aiosqlite.

Connections run in autocommit mode; transactions are opened explicitly with
BEGIN IMMEDIATE so each scope holds SQLite's write lock from its first
statement. The open scope is bound to the running task through a ContextVar:
any store call made from that task while the scope is open reuses the same
connection, which is how multi-store operations commit or abort as one unit.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from clinic_inventory.config import get_logger, get_settings
from clinic_inventory.core.exceptions import DatabaseError

logger = get_logger(__name__)


@dataclass
class _Scope:
    """Transaction scope owned by one task."""

    pool: "ConnectionPool"
    conn: aiosqlite.Connection
    depth: int = 1


_current_scope: ContextVar[_Scope | None] = ContextVar("_current_scope", default=None)


class ConnectionPool:
    """
    Async SQLite connection pool.

    Manages a pool of connections with configurable size.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 30.0,
    ):
        self.db_path = db_path
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._pool: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue(maxsize=pool_size)
        self._connections: list[aiosqlite.Connection] = []
        self._initialized = False
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Initialize the connection pool."""
        async with self._lock:
            if self._initialized:
                return

            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            for _ in range(self.pool_size):
                conn = await self._create_connection()
                self._connections.append(conn)
                await self._pool.put(conn)

            self._initialized = True
            logger.info(
                "connection_pool_initialized",
                db_path=str(self.db_path),
                pool_size=self.pool_size,
            )

    async def _create_connection(self) -> aiosqlite.Connection:
        """Create a new database connection with optimized settings."""
        conn = await aiosqlite.connect(self.db_path, isolation_level=None)

        # WAL keeps readers off the writer's lock
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA synchronous=NORMAL")
        await conn.execute(f"PRAGMA busy_timeout={self.busy_timeout}")
        await conn.execute("PRAGMA foreign_keys=ON")

        conn.row_factory = aiosqlite.Row

        return conn

    async def checkout(self) -> aiosqlite.Connection:
        """Take a connection out of the pool, waiting at most acquire_timeout."""
        if not self._initialized:
            await self.initialize()
        try:
            return await asyncio.wait_for(self._pool.get(), timeout=self.acquire_timeout)
        except asyncio.TimeoutError as e:
            raise DatabaseError(
                "acquire_connection",
                f"no connection available after {self.acquire_timeout}s",
            ) from e

    async def checkin(self, conn: aiosqlite.Connection) -> None:
        """Return a connection to the pool."""
        await self._pool.put(conn)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection from the pool.

        Inside an open transaction scope this yields the scope's connection,
        so reads see the scope's own uncommitted writes.

        Usage:
            async with pool.acquire() as conn:
                await conn.execute(...)
        """
        scope = _current_scope.get()
        if scope is not None and scope.pool is self:
            yield scope.conn
            return

        conn = await self.checkout()
        try:
            yield conn
        finally:
            await self.checkin(conn)

    # Transaction scope

    def _require_scope(self) -> _Scope:
        scope = _current_scope.get()
        if scope is None or scope.pool is not self:
            raise DatabaseError("transaction", "no transaction scope is open")
        return scope

    async def begin(self) -> None:
        """Open a scope for the current task, or join the one already open."""
        scope = _current_scope.get()
        if scope is not None and scope.pool is self:
            scope.depth += 1
            return

        conn = await self.checkout()
        try:
            await conn.execute("BEGIN IMMEDIATE")
        except BaseException:
            await asyncio.shield(self._discard_begin(conn))
            raise
        _current_scope.set(_Scope(pool=self, conn=conn))

    async def _discard_begin(self, conn: aiosqlite.Connection) -> None:
        """Return a connection whose BEGIN was interrupted, without its lock."""
        try:
            # A cancelled BEGIN still runs on the worker thread; wait it out
            await conn.execute("SELECT 1")
            if conn.in_transaction:
                await conn.execute("ROLLBACK")
                logger.debug("interrupted_begin_rolled_back")
        finally:
            await self.checkin(conn)

    async def commit(self) -> None:
        """Commit the current scope; nested joins only unwind one level."""
        scope = self._require_scope()
        if scope.depth > 1:
            scope.depth -= 1
            return

        try:
            await scope.conn.execute("COMMIT")
        except BaseException:
            await self._close_scope(scope, rollback=True)
            raise
        await self._close_scope(scope, rollback=False)

    async def abort(self) -> None:
        """Roll back the current scope; nested joins leave it to the outermost."""
        scope = self._require_scope()
        if scope.depth > 1:
            scope.depth -= 1
            return
        await self._close_scope(scope, rollback=True)

    async def _close_scope(self, scope: _Scope, rollback: bool) -> None:
        _current_scope.set(None)
        try:
            if rollback and scope.conn.in_transaction:
                await scope.conn.execute("ROLLBACK")
                logger.debug("transaction_rolled_back")
        finally:
            await self.checkin(scope.conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Acquire a connection with transaction context.

        Commits on success, rolls back on any exception or cancellation.
        """
        await self.begin()
        try:
            yield self._require_scope().conn
        except BaseException:
            await self.abort()
            raise
        await self.commit()

    async def close(self) -> None:
        """Close all connections in the pool."""
        async with self._lock:
            for conn in self._connections:
                await conn.close()
            self._connections.clear()
            self._initialized = False
            logger.info("connection_pool_closed")


# Global connection pool
_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the global connection pool."""
    global _pool
    if _pool is None:
        settings = get_settings()
        _pool = ConnectionPool(
            db_path=settings.storage.db_path,
            pool_size=settings.storage.pool_size,
            busy_timeout=settings.storage.busy_timeout,
            acquire_timeout=settings.storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection from the global pool.

    Convenience wrapper for common usage.
    """
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """
    Get a connection with transaction context.

    Joins the caller's open scope when there is one.
    """
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
