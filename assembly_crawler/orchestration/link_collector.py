"""
Paginated listing link collector.

Walks listing pages 1..max_pages and gathers detail-page links until a
page comes back empty.

Responsibility: Produce the ordered list of detail URLs for a crawl run
"""

from typing import Awaitable, Callable, List
from urllib.parse import urljoin
import asyncio
import logging

from bs4 import BeautifulSoup

from ..browser.page_fetcher import BrowserSession, WaitCondition

logger = logging.getLogger(__name__)


def extract_detail_links(soup: BeautifulSoup, base_url: str, link_pattern: str) -> List[str]:
    """
    First anchor of every table row, made absolute, kept when it
    contains link_pattern.
    """
    links: List[str] = []

    for row in soup.select("tbody tr"):
        anchor = row.find("a")
        if anchor is None:
            continue

        href = (anchor.get("href") or "").strip()
        if not href:
            continue

        absolute = urljoin(base_url, href)
        if link_pattern in absolute:
            links.append(absolute)

    return links


class LinkCollector:
    """
    Example:
        collector = LinkCollector(browser)
        urls = await collector.collect(
            "https://example.org/list.do?pageIndex={page}",
            max_pages=10,
            inter_page_delay_ms=1000,
        )
    """

    def __init__(
        self,
        session: BrowserSession,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        timeout_ms: int = 60000,
    ):
        self.session = session
        self.sleep = sleep
        self.timeout_ms = timeout_ms

    async def collect(
        self,
        listing_url_template: str,
        max_pages: int,
        inter_page_delay_ms: int,
        *,
        link_pattern: str = "view.do",
    ) -> List[str]:
        """
        Collect detail links across listing pages.

        Args:
            listing_url_template: Listing URL with a {page} placeholder (1-based)
            max_pages: Upper bound on listing pages visited
            inter_page_delay_ms: Politeness delay after each productive page
            link_pattern: Substring a detail link must contain

        Returns:
            Links in page order, duplicates included

        Raises:
            NavigationError: If a listing page cannot be loaded
        """
        collected: List[str] = []

        for page_number in range(1, max_pages + 1):
            url = listing_url_template.replace("{page}", str(page_number))
            logger.info(f"Collecting links from listing page {page_number}")

            handle = await self.session.open(url, WaitCondition.NETWORK_IDLE, self.timeout_ms)
            links = extract_detail_links(handle.soup(), handle.url, link_pattern)

            if not links:
                logger.info(f"No links on listing page {page_number}, stopping")
                break

            collected.extend(links)
            logger.info(
                f"Listing page {page_number}: {len(links)} links "
                f"(total: {len(collected)})"
            )

            if page_number < max_pages:
                await self.sleep(inter_page_delay_ms / 1000)

        logger.info(f"Collected {len(collected)} detail links")
        return collected
