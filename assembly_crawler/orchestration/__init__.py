"""
Orchestration package for coordinating crawl runs.

Crawlers tie the browser, extractors and reconcilers together and
report a CrawlStats per run.
"""

from .base_crawler import BaseCrawler
from .bill_crawler import BillCrawler
from .petition_crawler import PetitionCrawler
from .link_collector import LinkCollector, extract_detail_links

__all__ = [
    "BaseCrawler",
    "BillCrawler",
    "PetitionCrawler",
    "LinkCollector",
    "extract_detail_links",
]
