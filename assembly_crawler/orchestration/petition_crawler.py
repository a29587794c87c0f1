"""
National consent petition crawler.

The ongoing-petitions listing carries everything stored per petition,
so the run opens that single page and reconciles each card. Cards are
the work items, so a card that fails to extract counts as a run error.

Responsibility: Petition crawl run (listing page -> petitions table + history)
"""

from typing import Any, Dict, List, Optional

from .base_crawler import BaseCrawler
from ..browser.page_fetcher import BrowserSession, WaitCondition
from ..db.repositories import PetitionPersistenceOutcome
from ..extractors.petition_extractor import PetitionCard, PetitionExtractor
from ..models.petition import Petition
from ..services.reconciler import PetitionReconciler


class PetitionCrawler(BaseCrawler[PetitionCard, Petition]):
    """
    Example:
        stats = await PetitionCrawler(database).run()
    """

    name = "petitions"

    def __init__(self, database, config=None, **kwargs):
        super().__init__(database, config, **kwargs)
        self.extractor = PetitionExtractor(
            base_url=self.config.petitions_base_url,
            agree_goal=self.config.petition_agree_goal,
            window_days=self.config.petition_window_days,
            clock=self.clock,
        )
        self.reconciler = PetitionReconciler(database)

    async def collect(self, browser: BrowserSession) -> List[PetitionCard]:
        handle = await browser.open(
            self.config.petitions_listing_url,
            WaitCondition.NETWORK_IDLE,
            self.config.listing_timeout_ms,
            settle_ms=self.config.petitions_settle_ms,
        )
        cards = self.extractor.find_cards(handle.soup())
        self.logger.info(f"Found {len(cards)} petition cards")
        return cards

    async def extract_item(self, browser: BrowserSession, item: PetitionCard) -> Optional[Petition]:
        return self.extractor.extract(item)

    async def persist(self, record: Petition) -> PetitionPersistenceOutcome:
        return await self.reconciler.upsert(record)

    def describe(self, item: PetitionCard) -> Dict[str, Any]:
        return {"card": item.index, "href": item.href}
