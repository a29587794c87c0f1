"""
Typed query filters for repository lookups.

Each entity gets a small filter type whose fields are the filterable
columns with typed values; repositories turn them into SQLAlchemy
clauses instead of accepting free-form filter dicts.

Responsibility: Translate typed filter values into WHERE clauses
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import ColumnElement, or_

from .models import BillModel, PetitionModel
from ..models.bill import BillStatus, ProposerType


@dataclass(frozen=True)
class BillFilter:
    """Filterable bill fields; unset fields do not constrain the query."""

    status: Optional[BillStatus] = None
    committee: Optional[str] = None
    proposer_type: Optional[ProposerType] = None
    notice_end_before: Optional[datetime] = None
    search: Optional[str] = None

    def clauses(self) -> List[ColumnElement[bool]]:
        clauses: List[ColumnElement[bool]] = []

        if self.status is not None:
            clauses.append(BillModel.status == self.status.value)
        if self.committee:
            clauses.append(BillModel.committee == self.committee)
        if self.proposer_type is not None:
            clauses.append(BillModel.proposer_type == self.proposer_type.value)
        if self.notice_end_before is not None:
            clauses.append(BillModel.notice_end < self.notice_end_before)
        if self.search:
            pattern = f"%{self.search}%"
            clauses.append(or_(
                BillModel.bill_name.ilike(pattern),
                BillModel.proposal_reason.ilike(pattern),
                BillModel.main_content.ilike(pattern),
            ))

        return clauses


@dataclass(frozen=True)
class PetitionFilter:
    """Filterable petition fields; unset fields do not constrain the query."""

    status: Optional[BillStatus] = None
    category: Optional[str] = None
    min_agree_count: Optional[int] = None
    end_date_before: Optional[datetime] = None
    search: Optional[str] = None

    def clauses(self) -> List[ColumnElement[bool]]:
        clauses: List[ColumnElement[bool]] = []

        if self.status is not None:
            clauses.append(PetitionModel.status == self.status.value)
        if self.category:
            clauses.append(PetitionModel.category == self.category)
        if self.min_agree_count is not None:
            clauses.append(PetitionModel.agree_count >= self.min_agree_count)
        if self.end_date_before is not None:
            clauses.append(PetitionModel.end_date < self.end_date_before)
        if self.search:
            pattern = f"%{self.search}%"
            clauses.append(or_(
                PetitionModel.title.ilike(pattern),
                PetitionModel.content.ilike(pattern),
            ))

        return clauses
