"""
Headless browser page fetcher.

The notice and petition sites render their lists with JavaScript, so
pages are loaded through Playwright Chromium and handed to the
extractors as rendered HTML.

Responsibility: Load a URL in the shared browser context and return its rendered DOM
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional
import logging

from bs4 import BeautifulSoup
from playwright.async_api import (
    BrowserContext,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from ..config import CrawlerConfig, settings
from ..utils.dom_utils import parse_html

logger = logging.getLogger(__name__)


class WaitCondition(str, Enum):
    """When a navigation counts as finished"""
    NETWORK_IDLE = "networkidle"
    DOM_CONTENT_LOADED = "domcontentloaded"


class NavigationError(Exception):
    """Raised when a page cannot be loaded (timeout or network failure)"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to load {url}: {reason}")
        self.url = url
        self.reason = reason


@dataclass(slots=True)
class PageHandle:
    """Rendered page snapshot"""

    url: str
    html: str

    def soup(self) -> BeautifulSoup:
        """Parse the rendered HTML for extraction"""
        return parse_html(self.html)


class BrowserSession:
    """
    One browser context shared by every page of a crawl run.

    Each open() gets a fresh page that is closed before returning,
    whether navigation succeeded or not.
    """

    def __init__(self, context: BrowserContext):
        self.context = context

    async def open(
        self,
        url: str,
        wait_condition: WaitCondition = WaitCondition.NETWORK_IDLE,
        timeout_ms: int = 60000,
        *,
        wait_for_selector: Optional[str] = None,
        selector_timeout_ms: int = 5000,
        settle_ms: int = 0,
    ) -> PageHandle:
        """
        Navigate to url and capture the rendered HTML.

        Args:
            url: Page to load
            wait_condition: Navigation completion condition
            timeout_ms: Navigation timeout
            wait_for_selector: Optional readiness selector, waited for best-effort
            selector_timeout_ms: Timeout for the readiness selector
            settle_ms: Extra fixed wait after navigation for late rendering

        Raises:
            NavigationError: On navigation timeout or network failure
        """
        page = await self.context.new_page()

        try:
            logger.debug(f"GET {url} (wait_until={wait_condition.value})")

            try:
                await page.goto(url, wait_until=wait_condition.value, timeout=timeout_ms)
            except PlaywrightTimeoutError as e:
                raise NavigationError(url, f"timeout after {timeout_ms}ms") from e
            except PlaywrightError as e:
                raise NavigationError(url, str(e)) from e

            if wait_for_selector:
                try:
                    await page.wait_for_selector(wait_for_selector, timeout=selector_timeout_ms)
                except PlaywrightTimeoutError:
                    logger.debug(f"Selector {wait_for_selector!r} not found on {url}, continuing")

            if settle_ms:
                await page.wait_for_timeout(settle_ms)

            html = await page.content()
            return PageHandle(url=page.url, html=html)

        finally:
            await page.close()


@asynccontextmanager
async def with_browser_session(
    config: Optional[CrawlerConfig] = None
) -> AsyncIterator[BrowserSession]:
    """
    Launch Chromium for the duration of a crawl run.

    Example:
        async with with_browser_session() as browser:
            handle = await browser.open(url)
    """
    config = config or settings.crawler

    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=config.headless)
        logger.info(f"Chromium launched (headless={config.headless})")

        try:
            context = await browser.new_context(user_agent=config.user_agent)
            yield BrowserSession(context)
        finally:
            await browser.close()
            logger.info("Chromium closed")
