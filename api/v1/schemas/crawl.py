"""
Pydantic schemas for crawl trigger API responses.

Responsibility: Crawl trigger and run log response schemas
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class CrawlAcceptedResponse(BaseModel):
    """Returned when a background crawl run was accepted."""

    crawler: str
    status: str = "accepted"
    accepted_at: datetime


class CrawlStatusResponse(BaseModel):
    """Whether each crawler currently has a run active in this process."""

    running: Dict[str, bool]


class CrawlRunResponse(BaseModel):
    """One recorded crawl run."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    source: str
    status: str
    records_attempted: int
    records_succeeded: int
    records_failed: int
    duration_seconds: float
    error_count: int
    fetch_params: Optional[Dict[str, Any]] = None
    error_summary: Optional[List[Dict[str, Any]]] = None
    created_at: datetime


class CrawlRunListResponse(BaseModel):
    """Most recent crawl runs, newest first."""

    runs: List[CrawlRunResponse]
    limit: int
