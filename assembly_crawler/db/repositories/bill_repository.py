"""
Repository for bill data operations.

Implements repository pattern for legislative notices with natural key
lookups, an atomic upsert and the status sweep.

Responsibility: Abstract database operations for bills
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from .upsert import dialect_insert
from ..filters import BillFilter
from ..models import BillModel
from ...models.bill import Bill, BillStatus, ProposerType
from ...models.crawl import PersistenceStatus
from ...utils.date_utils import utc_now
from ...utils.hash_utils import compute_bill_hash

logger = logging.getLogger(__name__)

# Columns refreshed when a known bill_number is seen again
_MUTABLE_COLUMNS = (
    "bill_name",
    "proposer_type",
    "proposer",
    "committee",
    "proposal_reason",
    "main_content",
    "notice_start",
    "notice_end",
    "opinion_count",
    "source_url",
    "content_hash",
    "last_fetched_at",
)


@dataclass(slots=True)
class BillPersistenceOutcome:
    """Represents the result of persisting a single bill."""

    record_id: int
    status: PersistenceStatus
    content_hash: str


class BillRepository:
    """
    Repository for bill data persistence.

    Example:
        async with database.session() as session:
            repo = BillRepository(session)

            outcome = await repo.upsert(bill)
            ended = await repo.mark_ended(utc_now())
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: Active database session
        """
        self.session = session

    async def get_by_key(self, bill_number: str) -> Optional[Bill]:
        """
        Get bill by its business key.

        Returns:
            Bill domain object if found, None otherwise
        """
        result = await self.session.execute(
            select(BillModel).where(BillModel.bill_number == bill_number)
        )
        model = result.scalar_one_or_none()
        return self._model_to_domain(model) if model else None

    async def upsert(self, bill: Bill) -> BillPersistenceOutcome:
        """
        Insert or update a bill keyed by bill_number.

        The write is a single INSERT ... ON CONFLICT DO UPDATE, so two
        concurrent runs can never create duplicate rows; the stored
        content hash decides whether the write counted as a change.
        """
        existing = (await self.session.execute(
            select(BillModel.id, BillModel.content_hash)
            .where(BillModel.bill_number == bill.bill_number)
        )).first()

        content_hash = compute_bill_hash(bill)
        now = utc_now()

        stmt = dialect_insert(self.session, BillModel).values(
            **self._domain_to_values(bill, content_hash, now)
        )
        refreshed = {column: stmt.excluded[column] for column in _MUTABLE_COLUMNS}
        refreshed["status"] = BillStatus.IN_PROGRESS.value
        refreshed["updated_at"] = now

        stmt = stmt.on_conflict_do_update(
            index_elements=["bill_number"],
            set_=refreshed,
        ).returning(BillModel.id)

        record_id = (await self.session.execute(stmt)).scalar_one()

        if existing is None:
            status = PersistenceStatus.CREATED
        elif existing.content_hash != content_hash:
            status = PersistenceStatus.UPDATED
        else:
            status = PersistenceStatus.UNCHANGED

        logger.debug(f"Bill {bill.bill_number} persisted as {status.value}")

        return BillPersistenceOutcome(
            record_id=record_id,
            status=status,
            content_hash=content_hash,
        )

    async def count_where(self, criteria: Optional[BillFilter] = None) -> int:
        """Count bills matching the filter"""
        criteria = criteria or BillFilter()
        result = await self.session.execute(
            select(func.count()).select_from(BillModel).where(*criteria.clauses())
        )
        return result.scalar_one()

    async def find_where(
        self,
        criteria: Optional[BillFilter] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Bill]:
        """
        Find bills matching the filter, soonest-closing notices first.

        Args:
            criteria: Typed filter (no filter returns everything)
            limit: Maximum number of results
            offset: Number of results to skip
        """
        criteria = criteria or BillFilter()
        result = await self.session.execute(
            select(BillModel)
            .where(*criteria.clauses())
            .order_by(BillModel.notice_end.asc(), BillModel.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_domain(model) for model in result.scalars().all()]

    async def mark_ended(self, now: Optional[datetime] = None) -> int:
        """
        Close every in-progress notice whose notice period is over.

        Returns:
            Number of bills moved to ENDED
        """
        now = now or utc_now()
        result = await self.session.execute(
            update(BillModel)
            .where(
                BillModel.status == BillStatus.IN_PROGRESS.value,
                BillModel.notice_end < now,
            )
            .values(status=BillStatus.ENDED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def _domain_to_values(self, bill: Bill, content_hash: str, now: datetime) -> dict:
        """Convert a Bill to INSERT column values"""
        return {
            "bill_number": bill.bill_number,
            "bill_name": bill.bill_name,
            "proposer_type": bill.proposer_type.value,
            "proposer": bill.proposer,
            "committee": bill.committee,
            "proposal_reason": bill.proposal_reason,
            "main_content": bill.main_content,
            "notice_start": bill.notice_start,
            "notice_end": bill.notice_end,
            "opinion_count": bill.opinion_count,
            "source_url": bill.source_url,
            "status": BillStatus.IN_PROGRESS.value,
            "content_hash": content_hash,
            "last_fetched_at": bill.last_fetched_at or now,
            "created_at": now,
            "updated_at": now,
        }

    def _model_to_domain(self, model: BillModel) -> Bill:
        """Convert ORM model to domain model"""
        return Bill(
            bill_number=model.bill_number,
            bill_name=model.bill_name,
            proposer_type=ProposerType(model.proposer_type),
            proposer=model.proposer,
            committee=model.committee,
            proposal_reason=model.proposal_reason,
            main_content=model.main_content,
            notice_start=model.notice_start,
            notice_end=model.notice_end,
            opinion_count=model.opinion_count,
            source_url=model.source_url,
            status=BillStatus(model.status),
            last_fetched_at=model.last_fetched_at,
        )
