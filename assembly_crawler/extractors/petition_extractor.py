"""
Ongoing petitions listing extractor.

Every petition card on the listing page carries title, category, agree
count and link, which is all the crawler stores; detail pages are not
visited, so content, goal and period are stubs.

Responsibility: Turn the petitions listing DOM into Petition records
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional
from urllib.parse import urljoin
import logging
import re

from bs4 import BeautifulSoup, Tag

from ..models.petition import Petition, DEFAULT_AGREE_GOAL, CONTENT_PLACEHOLDER
from ..utils.date_utils import epoch_millis, utc_now
from ..utils.dom_utils import element_text

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"[^0-9]")
_BRACKETS = re.compile(r"[\[\]]")


def parse_agree_count(text: str) -> int:
    """"12,345명" -> 12345; no digits -> 0"""
    digits = _NON_DIGITS.sub("", text)
    return int(digits) if digits else 0


@dataclass(slots=True)
class PetitionCard:
    """One listing card and its position on the page"""

    index: int
    element: Tag

    @property
    def href(self) -> str:
        link = self.element.find("a")
        return (link.get("href") or "").strip() if link is not None else ""


class PetitionExtractor:
    """
    Extracts all petitions from the ongoing-petitions listing.

    Example:
        petitions = PetitionExtractor(base_url).extract_all(handle.soup(), handle.url)
    """

    def __init__(
        self,
        base_url: str = "https://petitions.assembly.go.kr",
        agree_goal: int = DEFAULT_AGREE_GOAL,
        window_days: int = 30,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.base_url = base_url
        self.agree_goal = agree_goal
        self.window_days = window_days
        self.clock = clock

    def find_cards(self, soup: BeautifulSoup) -> List[PetitionCard]:
        """Listing cards in page order"""
        return [
            PetitionCard(index=index, element=element)
            for index, element in enumerate(soup.select("ul.board_list_type li"))
        ]

    def extract_all(self, soup: BeautifulSoup, source_url: str) -> List[Petition]:
        """
        Every extractable petition on the page.

        Crawl runs extract card by card instead, so a failing card is
        counted as a run error rather than only logged.
        """
        cards = self.find_cards(soup)
        logger.debug(f"Found {len(cards)} petition cards on {source_url}")

        petitions: List[Petition] = []
        for card in cards:
            try:
                petition = self.extract(card)
            except Exception as e:
                logger.error(f"Error extracting petition card on {source_url}: {e}", exc_info=True)
                continue
            if petition is not None:
                petitions.append(petition)

        return petitions

    def extract(self, card: PetitionCard) -> Optional[Petition]:
        """
        Single petition card; None when it has no title.

        A card without a link gets "<epoch ms>-<card index>" as its id,
        which stays distinct across the cards of one listing.
        """
        item = card.element
        title = element_text(item.select_one(".subject"))
        if not title:
            return None

        category = _BRACKETS.sub("", element_text(item.select_one(".type"))).strip()
        agree_count = parse_agree_count(element_text(item.select_one(".blued")))

        href = card.href
        now = self.clock()
        petition_id = href.rstrip("/").rsplit("/", 1)[-1] or f"{epoch_millis(now)}-{card.index}"

        return Petition(
            petition_id=petition_id,
            category=category,
            title=title,
            content=CONTENT_PLACEHOLDER,
            hashtags=[],
            agree_count=agree_count,
            agree_goal=self.agree_goal,
            start_date=now,
            end_date=now + timedelta(days=self.window_days),
            source_url=urljoin(self.base_url, href),
        )
