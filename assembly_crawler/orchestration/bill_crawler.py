"""
Legislative notice crawler.

Collects detail links from the ongoing-notices listing, then opens each
notice page and upserts the extracted Bill.

Responsibility: Bill crawl run (listing pages -> detail pages -> bills table)
"""

from typing import Any, Dict, List, Optional

from .base_crawler import BaseCrawler
from .link_collector import LinkCollector
from ..browser.page_fetcher import BrowserSession, WaitCondition
from ..db.repositories import BillPersistenceOutcome
from ..extractors.bill_extractor import BillExtractor
from ..models.bill import Bill
from ..services.reconciler import BillReconciler

DETAIL_READY_SELECTOR = ".view_cont"


class BillCrawler(BaseCrawler[str, Bill]):
    """
    Example:
        stats = await BillCrawler(database).run()
        print(stats.summary())
    """

    name = "bills"

    def __init__(self, database, config=None, **kwargs):
        super().__init__(database, config, **kwargs)
        self.extractor = BillExtractor(clock=self.clock)
        self.reconciler = BillReconciler(database)

    @property
    def item_delay_ms(self) -> int:
        return self.config.item_delay_ms

    async def collect(self, browser: BrowserSession) -> List[str]:
        collector = LinkCollector(
            browser,
            sleep=self.sleep,
            timeout_ms=self.config.listing_timeout_ms,
        )
        return await collector.collect(
            self.config.bills_listing_url,
            self.config.bills_max_pages,
            self.config.page_delay_ms,
            link_pattern=self.config.bills_link_pattern,
        )

    async def extract_item(self, browser: BrowserSession, url: str) -> Optional[Bill]:
        handle = await browser.open(
            url,
            WaitCondition.DOM_CONTENT_LOADED,
            self.config.detail_timeout_ms,
            wait_for_selector=DETAIL_READY_SELECTOR,
            selector_timeout_ms=self.config.detail_selector_timeout_ms,
        )
        return self.extractor.extract(handle.soup(), url)

    async def persist(self, record: Bill) -> BillPersistenceOutcome:
        return await self.reconciler.upsert(record)

    def describe(self, url: str) -> Dict[str, Any]:
        return {"url": url}
