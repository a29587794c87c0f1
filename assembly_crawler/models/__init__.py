"""
Models package for the Assembly crawler.

This package contains all Pydantic models for:
- Crawl outcomes and metrics
- Domain entities (bills, petitions)
- Crawl run state and statistics
"""

from .adapter_models import (
    AdapterStatus,
    AdapterError,
    AdapterMetrics,
)
from .bill import Bill, BillStatus, ProposerType
from .petition import Petition, PetitionHistoryPoint
from .crawl import CrawlState, CrawlStats, PersistenceStatus

__all__ = [
    "AdapterStatus",
    "AdapterError",
    "AdapterMetrics",
    "Bill",
    "BillStatus",
    "ProposerType",
    "Petition",
    "PetitionHistoryPoint",
    "CrawlState",
    "CrawlStats",
    "PersistenceStatus",
]
