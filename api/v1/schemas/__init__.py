"""API v1 response schemas"""

from .crawl import (
    CrawlAcceptedResponse,
    CrawlRunListResponse,
    CrawlRunResponse,
    CrawlStatusResponse,
)

__all__ = [
    "CrawlAcceptedResponse",
    "CrawlRunListResponse",
    "CrawlRunResponse",
    "CrawlStatusResponse",
]
