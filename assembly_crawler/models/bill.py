"""
Bill domain model.

Represents a legislative notice (입법예고) from the National Assembly
legislative notice system.

Responsibility: Single bill entity as extracted from a notice detail page
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


UNDETERMINED = "미정"
PROPOSAL_REASON_MAX_LENGTH = 500


class ProposerType(str, Enum):
    """Who proposed the bill"""
    GOVERNMENT = "정부"
    MEMBER = "의원"

    @classmethod
    def from_proposer(cls, proposer: Optional[str]) -> "ProposerType":
        """Government bills carry the government marker in the proposer text"""
        if proposer and cls.GOVERNMENT.value in proposer:
            return cls.GOVERNMENT
        return cls.MEMBER


class BillStatus(str, Enum):
    """Notice lifecycle status"""
    IN_PROGRESS = "IN_PROGRESS"
    ENDED = "ENDED"


class Bill(BaseModel):
    """
    Legislative notice extracted from the notice system.

    Natural key: bill_number (the notice's lgsltPaId)
    Example: "PRC_X2Y4Z1..."
    """

    # MARK: - Natural Key
    bill_number: str = Field(
        description="Notice identifier from the detail URL, or an UNKNOWN-<ms> placeholder",
        max_length=100
    )

    # MARK: - Core Fields
    bill_name: str = Field(description="Bill title without the proposer parenthetical")
    proposer_type: ProposerType = Field(default=ProposerType.MEMBER)
    proposer: Optional[str] = Field(default=None, description="Proposer text")
    committee: str = Field(default=UNDETERMINED, description="Responsible committee")

    proposal_reason: str = Field(
        default="",
        description="Lead excerpt of the content",
        max_length=PROPOSAL_REASON_MAX_LENGTH
    )
    main_content: str = Field(default="", description="Full extracted body text")

    notice_start: datetime = Field(description="Start of the notice period")
    notice_end: datetime = Field(description="End of the notice period")

    opinion_count: int = Field(default=0, ge=0)
    source_url: str = Field(description="Detail page URL")
    status: BillStatus = Field(default=BillStatus.IN_PROGRESS)

    # MARK: - Metadata
    last_fetched_at: Optional[datetime] = Field(
        default=None,
        description="When this record was extracted"
    )

    def natural_key(self) -> str:
        """
        Return natural key for this bill.

        Used for upsert matching in the database.
        """
        return self.bill_number

    def is_government_bill(self) -> bool:
        """Check if this is a government-proposed bill"""
        return self.proposer_type == ProposerType.GOVERNMENT

    def has_placeholder_number(self) -> bool:
        """Check if the notice id was missing from the source URL"""
        return self.bill_number.startswith("UNKNOWN-")
