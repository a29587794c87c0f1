"""
Run lock keyed by crawler name.

Prevents a slow run from overlapping with the next scheduled or manual
run of the same crawler. Different crawlers never block each other.
Scope is the current process only.

Responsibility: Mutual exclusion between runs of the same crawler
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Set
import logging

logger = logging.getLogger(__name__)


class CrawlAlreadyRunningError(RuntimeError):
    """Raised when a crawler is triggered while a run of it is active"""

    def __init__(self, name: str):
        super().__init__(f"Crawler '{name}' is already running")
        self.name = name


class RunLock:
    """
    Non-blocking lock registry.

    A second acquisition for the same key fails immediately instead of
    queueing, so overlapping triggers are rejected rather than stacked.

    Example:
        lock = RunLock()
        async with lock.hold("bills"):
            await crawl()
    """

    def __init__(self):
        self._active: Set[str] = set()

    def is_held(self, name: str) -> bool:
        return name in self._active

    @asynccontextmanager
    async def hold(self, name: str) -> AsyncIterator[None]:
        if name in self._active:
            logger.warning("Rejected overlapping run of crawler '%s'", name)
            raise CrawlAlreadyRunningError(name)

        self._active.add(name)
        try:
            yield
        finally:
            self._active.discard(name)


# Process-wide registry shared by the CLI, API and scheduled flows
run_lock = RunLock()
