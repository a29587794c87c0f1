"""
Helpers for reading text out of parsed HTML.

Responsibility: Text extraction from BeautifulSoup trees
"""

from typing import List, Optional

from bs4 import BeautifulSoup, Tag


def text_lines(element: Optional[Tag]) -> List[str]:
    """Trimmed, non-empty text lines of element, one per text node."""
    if element is None:
        return []
    text = element.get_text(separator="\n", strip=True)
    return text.split("\n") if text else []


def element_text(element: Optional[Tag]) -> str:
    """Plain stripped text content (like textContent.trim())."""
    if element is None:
        return ""
    return element.get_text().strip()


def parse_html(html: str) -> BeautifulSoup:
    """Parse rendered page HTML into a DOM root."""
    return BeautifulSoup(html, "html.parser")
