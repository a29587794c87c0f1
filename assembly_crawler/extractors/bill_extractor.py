"""
Legislative notice detail page extractor.

The detail page has no stable ids: the title is one of several h3
headings, metadata lives as loose lines inside .view_cont, and the body
follows a "제안이유"/"주요내용" h4. Missing signals fall back to defaults
instead of failing the record.

Responsibility: Turn a notice detail DOM into a Bill
"""

from datetime import datetime
from typing import Callable, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse
import logging

from bs4 import BeautifulSoup, Tag

from .base_extractor import Strategy, first_success
from ..models.bill import (
    Bill,
    ProposerType,
    UNDETERMINED,
    PROPOSAL_REASON_MAX_LENGTH,
)
from ..utils.date_utils import epoch_millis, parse_date, utc_now
from ..utils.dom_utils import element_text, text_lines

logger = logging.getLogger(__name__)

TITLE_PLACEHOLDER = "제목 없음"
NOTICE_END_FALLBACK_DAYS = 14

_BILL_MARKER = "법률안"
_LISTING_HEADING = "진행 중 입법예고"
_PERIOD_MARKER = "입법예고기간"
_NOTICE_HEADER_LINE = "입법예고 법률안"
_PROPOSER_LIST_LABEL = "제안자목록"
_BODY_HEADINGS = ("제안이유", "주요내용")


def _h3_with_bill_marker(soup: BeautifulSoup) -> Optional[Tag]:
    for heading in soup.find_all("h3"):
        if _BILL_MARKER in element_text(heading):
            return heading
    return None


def _long_h3(soup: BeautifulSoup) -> Optional[Tag]:
    for heading in soup.find_all("h3"):
        text = element_text(heading)
        if len(text) > 10 and _LISTING_HEADING not in text:
            return heading
    return None


def _h3_before_content(soup: BeautifulSoup) -> Optional[Tag]:
    container = soup.select_one(".view_cont")
    if container is None:
        return None
    return container.find_previous_sibling("h3")


TITLE_STRATEGIES: List[Strategy[BeautifulSoup, Tag]] = [
    Strategy("h3 containing bill marker", _h3_with_bill_marker),
    Strategy("long h3 heading", _long_h3),
    Strategy("h3 preceding content container", _h3_before_content),
]


def split_title(title: str) -> Tuple[str, Optional[str]]:
    """
    Split a trailing proposer parenthetical off a notice title.

    "개인정보 보호법 일부개정법률안(홍길동의원 등 10인)"
        -> ("개인정보 보호법 일부개정법률안", "홍길동의원 등 10인")

    Nested groups stay with the proposer: "법(안(정부))" -> ("법", "안(정부)").
    """
    text = title.strip()
    if not text.endswith(")"):
        return text, None

    # Walk back from the closing paren to the "(" that balances it
    depth = 0
    for index in range(len(text) - 1, -1, -1):
        if text[index] == ")":
            depth += 1
        elif text[index] == "(":
            depth -= 1
            if depth == 0:
                return text[:index].strip(), text[index + 1:-1].strip()

    return text, None


def split_notice_period(line: str) -> Tuple[str, str]:
    """Return raw (start, end) text from an "입법예고기간 : a ~ b" line"""
    period = line.replace(_PERIOD_MARKER, "", 1).replace(":", "", 1).strip()
    parts = period.split("~")
    if len(parts) < 2:
        return "", ""
    return parts[0].strip(), parts[1].strip()


def bill_number_from_url(url: str, now: Optional[datetime] = None) -> str:
    """Notice id from the lgsltPaId query parameter, or an UNKNOWN-<ms> placeholder"""
    values = parse_qs(urlparse(url).query).get("lgsltPaId")
    if values and values[0]:
        return values[0]

    now = now or utc_now()
    placeholder = f"UNKNOWN-{epoch_millis(now)}"
    logger.warning(f"No lgsltPaId in {url}, using {placeholder}")
    return placeholder


class BillExtractor:
    """
    Extracts a Bill from a rendered notice detail page.

    Example:
        bill = BillExtractor().extract(handle.soup(), handle.url)
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def extract(self, soup: BeautifulSoup, source_url: str) -> Optional[Bill]:
        """
        Returns:
            Bill, or None when the page has neither a title heading nor
            a .view_cont container
        """
        now = self.clock()
        container = soup.select_one(".view_cont")
        title_heading = first_success(TITLE_STRATEGIES, soup)

        if title_heading is None and container is None:
            logger.warning(f"No notice title or content container at {source_url}")
            return None

        bill_name, proposer = split_title(element_text(title_heading))
        if not bill_name:
            bill_name = TITLE_PLACEHOLDER

        lines = text_lines(container)

        if proposer is None:
            proposer = self._proposer_from_lines(lines)

        committee = UNDETERMINED
        if len(lines) > 1 and lines[0] == _NOTICE_HEADER_LINE:
            committee = lines[1]

        start_text, end_text = "", ""
        period_line = next((line for line in lines if _PERIOD_MARKER in line), None)
        if period_line is not None:
            start_text, end_text = split_notice_period(period_line)

        content = self._body_text(soup)

        return Bill(
            bill_number=bill_number_from_url(source_url, now),
            bill_name=bill_name,
            proposer_type=ProposerType.from_proposer(proposer),
            proposer=proposer,
            committee=committee,
            proposal_reason=content[:PROPOSAL_REASON_MAX_LENGTH],
            main_content=content,
            notice_start=parse_date(start_text, 0, now=now),
            notice_end=parse_date(end_text, NOTICE_END_FALLBACK_DAYS, now=now),
            opinion_count=0,
            source_url=source_url,
            last_fetched_at=now,
        )

    def _proposer_from_lines(self, lines: List[str]) -> str:
        # Third line of the content block lists the proposers
        if len(lines) > 2:
            proposer = lines[2].replace(_PROPOSER_LIST_LABEL, "").strip()
            if proposer:
                return proposer
        return UNDETERMINED

    def _body_text(self, soup: BeautifulSoup) -> str:
        for heading in soup.find_all("h4"):
            text = element_text(heading)
            if any(marker in text for marker in _BODY_HEADINGS):
                return element_text(heading.find_next_sibling("div"))

        return element_text(soup.select_one(".txt_content"))
