"""Abstract interface for atomic multi-step storage mutation."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class ITransactionManager(ABC):
    """
    Opens transaction scopes.

    Store calls made inside an open scope, from the same task, join it.
    The scope commits when the block exits normally and aborts on any
    exception, including cancellation.
    """

    @abstractmethod
    async def begin(self) -> None:
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def abort(self) -> None:
        pass

    @asynccontextmanager
    async def scope(self) -> AsyncIterator[None]:
        await self.begin()
        try:
            yield
        except BaseException:
            await self.abort()
            raise
        await self.commit()
