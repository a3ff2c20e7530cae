"""
ResticAPI - Repository session
Single owner of the repository location and password. Every restic invocation
runs while holding the session lock, so two operations never touch the
repository from this process at the same time.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from resticapi.models.schemas import RepositoryConfig
from resticapi.utils.logger import get_logger

logger = get_logger("Session")

T = TypeVar("T")


class RepositorySession:
    def __init__(self, config: RepositoryConfig):
        self._config = config
        self._lock = asyncio.Lock()

    @property
    def location(self) -> str:
        return self._config.location

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[RepositoryConfig]:
        if self._lock.locked():
            logger.debug("[Session] Waiting for repository lock %s", self._config.location)
        async with self._lock:
            yield self._config

    async def with_session(self, fn: Callable[[RepositoryConfig], Awaitable[T]]) -> T:
        """Runs ``fn`` with the repository config while holding the lock."""
        async with self.acquire() as config:
            return await fn(config)
