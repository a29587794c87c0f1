"""
Petition domain models.

Represents a national consent petition (국민동의청원) and the
agree-count history points recorded across crawls.

Responsibility: Petition entity and its append-only history point
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field

from .bill import BillStatus


DEFAULT_AGREE_GOAL = 50000
CONTENT_PLACEHOLDER = "상세 내용 확인 필요"


class Petition(BaseModel):
    """
    Petition extracted from the ongoing petitions listing.

    Natural key: petition_id (trailing path segment of the detail link)
    """

    # MARK: - Natural Key
    petition_id: str = Field(max_length=100)

    # MARK: - Core Fields
    category: str = Field(default="")
    title: str
    content: str = Field(default=CONTENT_PLACEHOLDER)
    hashtags: List[str] = Field(default_factory=list)

    agree_count: int = Field(default=0, ge=0)
    agree_goal: int = Field(default=DEFAULT_AGREE_GOAL, ge=1)

    start_date: datetime
    end_date: datetime
    source_url: str
    status: BillStatus = Field(default=BillStatus.IN_PROGRESS)

    @computed_field
    @property
    def progress_rate(self) -> float:
        """Share of the agree goal reached, in percent"""
        return self.agree_count / self.agree_goal * 100

    def natural_key(self) -> str:
        """Return natural key for upsert matching"""
        return self.petition_id


class PetitionHistoryPoint(BaseModel):
    """Single agree-count observation for a petition"""

    petition_id: str
    agree_count: int = Field(ge=0)
    recorded_at: Optional[datetime] = None
