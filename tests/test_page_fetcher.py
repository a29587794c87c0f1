import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from assembly_crawler.browser import page_fetcher
from assembly_crawler.browser.page_fetcher import (
    BrowserSession,
    NavigationError,
    WaitCondition,
    with_browser_session,
)
from assembly_crawler.config import CrawlerConfig


class FakePage:
    def __init__(self, html="<html><body><h3>법률안</h3></body></html>", goto_error=None, selector_error=None):
        self.html = html
        self.goto_error = goto_error
        self.selector_error = selector_error
        self.url = ""
        self.goto_calls = []
        self.waited_ms = []
        self.closed = False

    async def goto(self, url, wait_until, timeout):
        self.goto_calls.append((url, wait_until, timeout))
        if self.goto_error is not None:
            raise self.goto_error
        self.url = url

    async def wait_for_selector(self, selector, timeout):
        if self.selector_error is not None:
            raise self.selector_error

    async def wait_for_timeout(self, ms):
        self.waited_ms.append(ms)

    async def content(self):
        return self.html

    async def close(self):
        self.closed = True


class FakeContext:
    def __init__(self, page: FakePage):
        self.page = page

    async def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, context_error=None):
        self.context_error = context_error
        self.context_kwargs = []
        self.close_calls = 0

    async def new_context(self, **kwargs):
        self.context_kwargs.append(kwargs)
        if self.context_error is not None:
            raise self.context_error
        return FakeContext(FakePage())

    async def close(self):
        self.close_calls += 1


class FakeChromium:
    def __init__(self, browser: FakeBrowser):
        self.browser = browser
        self.launch_kwargs = []

    async def launch(self, **kwargs):
        self.launch_kwargs.append(kwargs)
        return self.browser


class FakePlaywright:
    def __init__(self, browser: FakeBrowser):
        self.chromium = FakeChromium(browser)
        self.exited = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.exited = True


@pytest.fixture
def fake_playwright(monkeypatch):
    def install(browser: FakeBrowser) -> FakePlaywright:
        playwright = FakePlaywright(browser)
        monkeypatch.setattr(page_fetcher, "async_playwright", lambda: playwright)
        return playwright

    return install


async def test_open_returns_rendered_html() -> None:
    page = FakePage()

    handle = await BrowserSession(FakeContext(page)).open(
        "https://pal.test/view.do",
        WaitCondition.DOM_CONTENT_LOADED,
        30000,
        settle_ms=3000,
    )

    assert handle.url == "https://pal.test/view.do"
    assert handle.soup().h3.get_text() == "법률안"
    assert page.goto_calls == [("https://pal.test/view.do", "domcontentloaded", 30000)]
    assert page.waited_ms == [3000]
    assert page.closed


async def test_timeout_becomes_navigation_error() -> None:
    page = FakePage(goto_error=PlaywrightTimeoutError("Timeout 60000ms exceeded"))

    with pytest.raises(NavigationError) as excinfo:
        await BrowserSession(FakeContext(page)).open("https://pal.test/list.do")

    assert excinfo.value.url == "https://pal.test/list.do"
    assert "timeout" in excinfo.value.reason
    assert page.closed


async def test_network_failure_becomes_navigation_error() -> None:
    page = FakePage(goto_error=PlaywrightError("net::ERR_CONNECTION_REFUSED"))

    with pytest.raises(NavigationError, match="ERR_CONNECTION_REFUSED"):
        await BrowserSession(FakeContext(page)).open("https://pal.test/list.do")

    assert page.closed


async def test_missing_ready_selector_is_not_fatal() -> None:
    page = FakePage(selector_error=PlaywrightTimeoutError("waiting for .view_cont"))

    handle = await BrowserSession(FakeContext(page)).open(
        "https://pal.test/view.do",
        wait_for_selector=".view_cont",
    )

    assert "법률안" in handle.html
    assert page.waited_ms == []


async def test_browser_session_closes_browser_after_run(fake_playwright) -> None:
    browser = FakeBrowser()
    playwright = fake_playwright(browser)
    config = CrawlerConfig(headless=True, user_agent="assembly-crawler-test")

    async with with_browser_session(config) as session:
        assert isinstance(session, BrowserSession)
        assert browser.close_calls == 0

    assert browser.close_calls == 1
    assert playwright.exited
    assert playwright.chromium.launch_kwargs == [{"headless": True}]
    assert browser.context_kwargs == [{"user_agent": "assembly-crawler-test"}]


async def test_browser_session_closes_browser_when_run_raises(fake_playwright) -> None:
    browser = FakeBrowser()
    fake_playwright(browser)

    with pytest.raises(RuntimeError, match="listing exploded"):
        async with with_browser_session(CrawlerConfig()):
            raise RuntimeError("listing exploded")

    assert browser.close_calls == 1


async def test_browser_session_closes_browser_when_context_fails(fake_playwright) -> None:
    browser = FakeBrowser(context_error=PlaywrightError("context refused"))
    fake_playwright(browser)

    with pytest.raises(PlaywrightError, match="context refused"):
        async with with_browser_session(CrawlerConfig()):
            pass

    assert browser.close_calls == 1
