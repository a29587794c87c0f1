"""
Base crawl orchestrator.

Drives one crawl run through its states:

    IDLE -> COLLECTING_LINKS -> PROCESSING_ITEMS -> DONE
                 |                    |
                 +--------------------+--> FAILED

Only a browser launch failure or a collection failure fails the run;
every per-item exception is logged, counted and skipped over.

Responsibility: Run lifecycle, per-item isolation and run logging
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar
import asyncio
import logging

from ..browser.page_fetcher import BrowserSession, NavigationError, with_browser_session
from ..config import CrawlerConfig, settings
from ..db.repositories import FetchLogRepository
from ..db.session import Database
from ..models.adapter_models import AdapterError
from ..models.crawl import CrawlState, CrawlStats, PersistenceStatus
from ..utils.date_utils import utc_now
from ..utils.run_lock import RunLock, run_lock

# Work item (detail URL, listing record, ...)
ItemT = TypeVar("ItemT")
# Extracted record
RecordT = TypeVar("RecordT")

BrowserFactory = Callable[[CrawlerConfig], AbstractAsyncContextManager[BrowserSession]]
Sleep = Callable[[float], Awaitable[None]]

# Run logs keep only the first errors in full
MAX_LOGGED_ERRORS = 10


class BaseCrawler(ABC, Generic[ItemT, RecordT]):
    """
    Abstract crawl run.

    Subclasses MUST:
    1. Set name (also the run-lock key and run-log source)
    2. Implement collect() to list the run's work items
    3. Implement extract_item() to turn one item into a record (or None)
    4. Implement persist() to upsert one record

    The browser session and the clock-based delays are injectable so
    runs can be exercised without a real browser.
    """

    name: str = "base"

    def __init__(
        self,
        database: Database,
        config: Optional[CrawlerConfig] = None,
        *,
        browser_factory: Optional[BrowserFactory] = None,
        sleep: Sleep = asyncio.sleep,
        lock: Optional[RunLock] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.database = database
        self.config = config or settings.crawler
        self.browser_factory = browser_factory or with_browser_session
        self.sleep = sleep
        self.lock = lock or run_lock
        self.clock = clock

        self.fetch_logs = FetchLogRepository(database)
        self.logger = logging.getLogger(f"crawler.{self.name}")

    @property
    def item_delay_ms(self) -> int:
        """Politeness delay between items"""
        return 0

    @abstractmethod
    async def collect(self, browser: BrowserSession) -> List[ItemT]:
        """Gather the run's work items"""

    @abstractmethod
    async def extract_item(self, browser: BrowserSession, item: ItemT) -> Optional[RecordT]:
        """Turn one work item into a record; None means nothing extractable"""

    @abstractmethod
    async def persist(self, record: RecordT) -> Any:
        """Upsert one record, returning an outcome with a .status"""

    def describe(self, item: ItemT) -> Dict[str, Any]:
        """Log/error context for a work item"""
        return {"item": str(item)}

    async def run(self) -> CrawlStats:
        """
        Execute one crawl run.

        Raises:
            CrawlAlreadyRunningError: If this crawler is already running
            Exception: Browser launch or collection failure (after the run is logged)
        """
        async with self.lock.hold(self.name):
            return await self._run()

    async def _run(self) -> CrawlStats:
        stats = CrawlStats(crawler=self.name, start_time=self.clock())
        self.logger.info(f"Starting {self.name} crawler")

        try:
            async with self.browser_factory(self.config) as browser:
                self._transition(stats, CrawlState.COLLECTING_LINKS)
                items = await self.collect(browser)
                stats.total_items = len(items)
                self.logger.info(f"Collected {len(items)} items")

                self._transition(stats, CrawlState.PROCESSING_ITEMS)
                for index, item in enumerate(items):
                    await self._process_isolated(browser, item, stats)

                    if self.item_delay_ms and index < len(items) - 1:
                        await self.sleep(self.item_delay_ms / 1000)

        except Exception as e:
            stats.end_time = self.clock()
            self._transition(stats, CrawlState.FAILED)
            stats.record_error(self._build_error(e, {"phase": "run"}))
            self.logger.error(f"{self.name} crawler failed: {e}", exc_info=True)
            await self._record_run(stats)
            raise

        stats.end_time = self.clock()
        self._transition(stats, CrawlState.DONE)
        await self._record_run(stats)

        self.logger.info(
            f"{self.name} crawl complete: {stats.saved} saved "
            f"({stats.created} created, {stats.updated} updated, "
            f"{stats.unchanged} unchanged), {stats.skipped} skipped, "
            f"{stats.errors} errors"
        )
        return stats

    async def _process_isolated(self, browser: BrowserSession, item: ItemT, stats: CrawlStats) -> None:
        try:
            record = await self.extract_item(browser, item)
            if record is None:
                stats.skipped += 1
                self.logger.warning(f"Nothing extracted from {self.describe(item)}")
                return

            stats.fetched += 1
            outcome = await self.persist(record)
            stats.record_outcome(PersistenceStatus(outcome.status))

        except Exception as e:
            context = self.describe(item)
            self.logger.error(f"Failed to process {context}: {e}", exc_info=True)
            stats.record_error(self._build_error(e, context))

    def _transition(self, stats: CrawlStats, state: CrawlState) -> None:
        self.logger.debug(f"{stats.state.value} -> {state.value}")
        stats.state = state

    def _build_error(self, error: Exception, context: Dict[str, Any]) -> AdapterError:
        return AdapterError(
            timestamp=self.clock(),
            error_type=type(error).__name__,
            message=str(error),
            context=context,
            retryable=isinstance(error, NavigationError),
        )

    async def _record_run(self, stats: CrawlStats) -> None:
        """Write the run log; a failure here never masks the run result"""
        try:
            await self.fetch_logs.create_log(
                source=self.name,
                status=stats.adapter_status().value,
                records_attempted=stats.total_items,
                records_succeeded=stats.saved,
                records_failed=stats.errors,
                duration_seconds=stats.duration_seconds,
                fetch_params=stats.summary(),
                error_count=stats.errors,
                error_summary=[
                    error.model_dump(mode="json")
                    for error in stats.error_details[:MAX_LOGGED_ERRORS]
                ],
            )
        except Exception as log_error:
            self.logger.error(f"Failed to log crawl run: {log_error}")
