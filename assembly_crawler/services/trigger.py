"""
Crawl trigger service.

The one entry point the CLI, the HTTP API and the scheduled flows use
to start crawls, so all of them share the same run lock.

Responsibility: Start crawls synchronously or in the background
"""

from enum import Enum
from typing import Callable, Dict, Optional, Set
import asyncio
import logging

from ..config import CrawlerConfig, settings
from ..db.session import Database
from ..models.crawl import CrawlStats
from ..orchestration.base_crawler import BaseCrawler
from ..orchestration.bill_crawler import BillCrawler
from ..orchestration.petition_crawler import PetitionCrawler
from ..utils.run_lock import CrawlAlreadyRunningError, RunLock, run_lock

logger = logging.getLogger(__name__)


class CrawlerKind(str, Enum):
    """Crawlers that can be triggered"""
    BILLS = "bills"
    PETITIONS = "petitions"


# Called as factory(database, config, lock=...)
CrawlerFactory = Callable[..., BaseCrawler]

DEFAULT_CRAWLERS: Dict[CrawlerKind, CrawlerFactory] = {
    CrawlerKind.BILLS: BillCrawler,
    CrawlerKind.PETITIONS: PetitionCrawler,
}


class CrawlTrigger:
    """
    Starts crawl runs against one database.

    Example:
        trigger = CrawlTrigger(database)

        # Wait for the result (CLI, scheduled flows)
        stats = await trigger.run(CrawlerKind.BILLS)

        # Fire and forget (HTTP)
        trigger.run_in_background(CrawlerKind.PETITIONS)
    """

    def __init__(
        self,
        database: Database,
        config: Optional[CrawlerConfig] = None,
        *,
        crawlers: Optional[Dict[CrawlerKind, CrawlerFactory]] = None,
        lock: Optional[RunLock] = None,
    ):
        self.database = database
        self.config = config or settings.crawler
        self.crawlers = crawlers or DEFAULT_CRAWLERS
        self.lock = lock or run_lock

        # Accepted background runs that have not taken the lock yet
        self._pending: Set[CrawlerKind] = set()
        self._tasks: Set[asyncio.Task] = set()

    def build_crawler(self, kind: CrawlerKind) -> BaseCrawler:
        return self.crawlers[kind](self.database, self.config, lock=self.lock)

    def is_running(self, kind: CrawlerKind) -> bool:
        return kind in self._pending or self.lock.is_held(kind.value)

    def claim(self, kind: CrawlerKind) -> None:
        """
        Reserve a background run slot.

        Raises:
            CrawlAlreadyRunningError: If a run of this crawler is active or pending
        """
        if self.is_running(kind):
            raise CrawlAlreadyRunningError(kind.value)
        self._pending.add(kind)

    async def run(self, kind: CrawlerKind) -> CrawlStats:
        """
        Run a crawler to completion.

        Raises:
            CrawlAlreadyRunningError: If a run of this crawler is already active
        """
        logger.info(f"Triggering {kind.value} crawl")
        return await self.build_crawler(kind).run()

    async def run_claimed(self, kind: CrawlerKind) -> Optional[CrawlStats]:
        """
        Body of a background run: never raises, failures are logged.

        Releases the slot reserved by claim().
        """
        try:
            stats = await self.run(kind)
        except Exception as e:
            logger.error(f"Background {kind.value} crawl failed: {e}", exc_info=True)
            return None
        finally:
            self._pending.discard(kind)

        logger.info(f"Background {kind.value} crawl finished: {stats.summary()}")
        return stats

    def run_in_background(self, kind: CrawlerKind) -> asyncio.Task:
        """
        Start a run on the current event loop and return immediately.

        Raises:
            CrawlAlreadyRunningError: If a run of this crawler is active or pending
        """
        self.claim(kind)
        task = asyncio.create_task(self.run_claimed(kind))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
