"""
Record extractors for the Assembly crawler.

Extractors are pure functions of a parsed DOM: they never touch the
browser or the database.
"""

from .base_extractor import Strategy, first_success
from .bill_extractor import BillExtractor, split_title, bill_number_from_url
from .petition_extractor import PetitionExtractor, PetitionCard, parse_agree_count

__all__ = [
    "Strategy",
    "first_success",
    "BillExtractor",
    "split_title",
    "bill_number_from_url",
    "PetitionExtractor",
    "PetitionCard",
    "parse_agree_count",
]
