"""
Crawl run models.

Tracks the state machine and aggregate counters of a single crawl run.

Responsibility: Run state and statistics returned to the trigger layer
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .adapter_models import AdapterError, AdapterMetrics, AdapterStatus


class CrawlState(str, Enum):
    """Lifecycle of one crawl run"""
    IDLE = "idle"
    COLLECTING_LINKS = "collecting_links"
    PROCESSING_ITEMS = "processing_items"
    DONE = "done"
    FAILED = "failed"


class PersistenceStatus(str, Enum):
    """Outcome classification for a single upsert."""
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class CrawlStats(BaseModel):
    """
    Aggregate counters for a crawl run.

    fetched counts items that produced a record, saved counts records
    persisted (created + updated + unchanged), skipped counts pages with
    no extractable record and errors counts isolated per-item failures.
    """
    crawler: str
    state: CrawlState = CrawlState.IDLE

    total_items: int = 0
    fetched: int = 0
    saved: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    skipped: int = 0
    errors: int = 0
    error_details: List[AdapterError] = Field(default_factory=list)

    start_time: datetime
    end_time: Optional[datetime] = None

    @property
    def duration_seconds(self) -> float:
        if self.end_time is None:
            return 0.0
        return max((self.end_time - self.start_time).total_seconds(), 0.0)

    def record_outcome(self, status: PersistenceStatus) -> None:
        self.saved += 1
        if status == PersistenceStatus.CREATED:
            self.created += 1
        elif status == PersistenceStatus.UPDATED:
            self.updated += 1
        else:
            self.unchanged += 1

    def record_error(self, error: AdapterError) -> None:
        self.errors += 1
        self.error_details.append(error)

    def adapter_status(self) -> AdapterStatus:
        """
        Map run state onto the shared status vocabulary.

        Logic:
        - Failed run → FAILURE
        - Completed with isolated errors → PARTIAL_SUCCESS
        - Otherwise → SUCCESS
        """
        if self.state == CrawlState.FAILED:
            return AdapterStatus.FAILURE
        if self.errors:
            return AdapterStatus.PARTIAL_SUCCESS
        return AdapterStatus.SUCCESS

    def to_metrics(self) -> AdapterMetrics:
        return AdapterMetrics(
            records_attempted=self.total_items,
            records_succeeded=self.saved,
            records_failed=self.errors,
            duration_seconds=self.duration_seconds,
        )

    def summary(self) -> Dict[str, Any]:
        """Statistics reported by the trigger surfaces"""
        return {
            "crawler": self.crawler,
            "state": self.state.value,
            "status": self.adapter_status().value,
            "total_items": self.total_items,
            "fetched": self.fetched,
            "saved": self.saved,
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "skipped": self.skipped,
            "errors": self.errors,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": round(self.duration_seconds, 3),
        }
