"""
Date normalization for scraped text.

Converts the heterogeneous date strings found on notice and petition
pages (2024-03-05, 2024.03.05, 2024/03/05, 20240305, "2024. 3. 5.")
into datetimes. Unparseable input never aborts a crawl: it degrades
to now + fallback offset and a warning.

Responsibility: Parse single-date text with fallback-on-failure semantics
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

logger = logging.getLogger(__name__)

# Whitespace around separators, e.g. "2024. 3. 5." -> "2024-3-5"
_SEPARATOR_SPACING = re.compile(r"\s*-\s*")

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y%m%d",
)


def utc_now() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def epoch_millis(moment: datetime) -> int:
    """Milliseconds since the epoch for a naive UTC datetime."""
    return int(moment.replace(tzinfo=timezone.utc).timestamp() * 1000)


def normalize_date_text(text: str) -> str:
    """Unify separators so the standard parsers can handle the string."""
    cleaned = text.strip().replace(".", "-").replace("/", "-")
    cleaned = _SEPARATOR_SPACING.sub("-", cleaned)
    return cleaned.strip("-").strip()


def _try_parse(cleaned: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        parsed = None

    if parsed is not None:
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue

    return None


def parse_date(
    text: Optional[str],
    fallback_offset_days: int = 0,
    *,
    now: Optional[datetime] = None
) -> datetime:
    """
    Parse a single date, falling back to now + offset on failure.

    Ranges ("2024-01-01 ~ 2024-01-15") must be split by the caller.

    Args:
        text: Raw date text from the page (may be None or empty)
        fallback_offset_days: Days added to now when parsing fails
        now: Reference time for the fallback (defaults to utc_now())

    Returns:
        Parsed datetime, or the fallback datetime
    """
    if text and text.strip():
        parsed = _try_parse(normalize_date_text(text))
        if parsed is not None:
            return parsed
        reason = "unparseable"
    else:
        reason = "empty"

    logger.warning(
        "Date parsing failed (%s): %r, using now + %d days",
        reason,
        text,
        fallback_offset_days,
    )
    reference = now or utc_now()
    return reference + timedelta(days=fallback_offset_days)
