"""
Browser package for the Assembly crawler.

Wraps Playwright Chromium behind a small page-fetching interface.
"""

from .page_fetcher import (
    BrowserSession,
    NavigationError,
    PageHandle,
    WaitCondition,
    with_browser_session,
)

__all__ = [
    "BrowserSession",
    "NavigationError",
    "PageHandle",
    "WaitCondition",
    "with_browser_session",
]
