"""Utility helpers for generating deterministic content hashes.

Provides stable hashing for domain models to support change detection
(created / updated / unchanged) when records are upserted.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from ..models.bill import Bill
from ..models.petition import Petition

# Fields that should not influence bill content hashing because they
# represent volatile metadata captured during each fetch cycle.
_BILL_HASH_EXCLUDE_FIELDS: set[str] = {
    "last_fetched_at",
    "status",
}

# Only the fields a re-crawl can change; the rest are fixed at first sight.
_PETITION_HASH_FIELDS: set[str] = {
    "petition_id",
    "title",
    "category",
    "agree_count",
    "source_url",
}


def _normalized_json(payload: Any) -> str:
    """Serialize payload to a deterministic JSON string."""
    return json.dumps(
        payload,
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )


def calculate_hash(payload: Any) -> str:
    """Produce a SHA-256 hash for the given payload."""
    normalized = _normalized_json(payload)
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def compute_bill_hash(bill: Bill) -> str:
    """Compute a deterministic content hash for a bill record."""
    payload = bill.model_dump(mode="json", exclude=_BILL_HASH_EXCLUDE_FIELDS)
    return calculate_hash(payload)


def compute_petition_hash(petition: Petition) -> str:
    """Compute a content hash over the mutable petition fields."""
    payload = petition.model_dump(mode="json", include=_PETITION_HASH_FIELDS)
    return calculate_hash(payload)
