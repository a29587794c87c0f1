"""
Utilities package for the Assembly crawler.

This package contains reusable helpers for:
- Date normalization
- DOM text extraction
- Content hashing
- Run locking
"""

from .date_utils import epoch_millis, parse_date, utc_now
from .dom_utils import text_lines, element_text, parse_html
from .hash_utils import (
    calculate_hash,
    compute_bill_hash,
    compute_petition_hash,
)
from .run_lock import RunLock, CrawlAlreadyRunningError, run_lock

__all__ = [
    "epoch_millis",
    "parse_date",
    "utc_now",
    "text_lines",
    "element_text",
    "parse_html",
    "calculate_hash",
    "compute_bill_hash",
    "compute_petition_hash",
    "RunLock",
    "CrawlAlreadyRunningError",
    "run_lock",
]
