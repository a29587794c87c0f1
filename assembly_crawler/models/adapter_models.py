"""
Crawl outcome models.

Defines unified structures for crawl errors and metrics.
These models ensure consistent error handling and metrics tracking
across the bill and petition crawlers.

Responsibility: Data transfer objects for crawl outcomes
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any

from pydantic import BaseModel, Field


class AdapterStatus(str, Enum):
    """
    Status of a crawl operation.

    Used to quickly determine whether a run needs attention.
    """
    SUCCESS = "success"
    PARTIAL_SUCCESS = "partial_success"  # Some records failed, some succeeded
    FAILURE = "failure"


class AdapterError(BaseModel):
    """
    Structured error information from crawl operations.

    Captures the context needed to diagnose a failed item (URL or business key).
    """
    timestamp: datetime = Field(description="When the error occurred (UTC)")
    error_type: str = Field(description="Exception class name or error category")
    message: str = Field(description="Human-readable error message")
    context: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context (URL, business key, etc.)"
    )
    retryable: bool = Field(
        default=False,
        description="Whether this error is likely to clear up on a later run"
    )


class AdapterMetrics(BaseModel):
    """
    Operational metrics for a crawl run.

    Used for monitoring and the crawl-run log.
    """
    records_attempted: int = Field(
        ge=0,
        description="Total items the run tried to process"
    )
    records_succeeded: int = Field(
        ge=0,
        description="Items extracted and persisted"
    )
    records_failed: int = Field(
        ge=0,
        description="Items that failed during fetch, extraction or persistence"
    )
    duration_seconds: float = Field(
        ge=0.0,
        description="Total execution time in seconds"
    )
