"""
Repository for petition data operations.

Petitions are upserted by petition_id; a re-crawl refreshes only the
fields that can move (title, category, agree count, progress, link)
and appends a history point whenever the agree count changed.

Responsibility: Abstract database operations for petitions and their history
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from .upsert import dialect_insert
from ..filters import PetitionFilter
from ..models import PetitionModel, PetitionHistoryModel
from ...models.bill import BillStatus
from ...models.crawl import PersistenceStatus
from ...models.petition import Petition, PetitionHistoryPoint
from ...utils.date_utils import utc_now
from ...utils.hash_utils import compute_petition_hash

logger = logging.getLogger(__name__)

# Content, hashtags, goal and dates are fixed at first sight
_MUTABLE_COLUMNS = (
    "title",
    "category",
    "agree_count",
    "progress_rate",
    "source_url",
    "content_hash",
)


@dataclass(slots=True)
class PetitionPersistenceOutcome:
    """Represents the result of persisting a single petition."""

    record_id: int
    status: PersistenceStatus
    content_hash: str
    previous_agree_count: Optional[int] = None
    history_appended: bool = False


class PetitionRepository:
    """
    Repository for petition data persistence.

    Example:
        async with database.session() as session:
            repo = PetitionRepository(session)
            outcome = await repo.upsert(petition)
            points = await repo.history(petition.petition_id)
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_key(self, petition_id: str) -> Optional[Petition]:
        """Get petition by its business key"""
        result = await self.session.execute(
            select(PetitionModel).where(PetitionModel.petition_id == petition_id)
        )
        model = result.scalar_one_or_none()
        return self._model_to_domain(model) if model else None

    async def upsert(self, petition: Petition) -> PetitionPersistenceOutcome:
        """
        Insert or update a petition keyed by petition_id.

        History is only written for known petitions whose agree count
        moved; the first sighting stores the count on the row itself.
        """
        existing = (await self.session.execute(
            select(PetitionModel.id, PetitionModel.agree_count, PetitionModel.content_hash)
            .where(PetitionModel.petition_id == petition.petition_id)
        )).first()

        content_hash = compute_petition_hash(petition)
        now = utc_now()

        stmt = dialect_insert(self.session, PetitionModel).values(
            **self._domain_to_values(petition, content_hash, now)
        )
        refreshed = {column: stmt.excluded[column] for column in _MUTABLE_COLUMNS}
        refreshed["status"] = BillStatus.IN_PROGRESS.value
        refreshed["updated_at"] = now

        stmt = stmt.on_conflict_do_update(
            index_elements=["petition_id"],
            set_=refreshed,
        ).returning(PetitionModel.id)

        record_id = (await self.session.execute(stmt)).scalar_one()

        if existing is None:
            return PetitionPersistenceOutcome(
                record_id=record_id,
                status=PersistenceStatus.CREATED,
                content_hash=content_hash,
            )

        history_appended = False
        if existing.agree_count != petition.agree_count:
            self.session.add(PetitionHistoryModel(
                petition_ref=record_id,
                agree_count=petition.agree_count,
                recorded_at=now,
            ))
            await self.session.flush()
            history_appended = True

        status = (
            PersistenceStatus.UPDATED
            if existing.content_hash != content_hash
            else PersistenceStatus.UNCHANGED
        )

        return PetitionPersistenceOutcome(
            record_id=record_id,
            status=status,
            content_hash=content_hash,
            previous_agree_count=existing.agree_count,
            history_appended=history_appended,
        )

    async def append_history(
        self,
        petition_id: str,
        agree_count: int,
        recorded_at: Optional[datetime] = None
    ) -> PetitionHistoryPoint:
        """
        Record an agree-count observation for a stored petition.

        Raises:
            LookupError: If the petition has never been stored
        """
        record_id = await self.session.scalar(
            select(PetitionModel.id).where(PetitionModel.petition_id == petition_id)
        )
        if record_id is None:
            raise LookupError(f"Unknown petition: {petition_id}")

        point = PetitionHistoryModel(
            petition_ref=record_id,
            agree_count=agree_count,
            recorded_at=recorded_at or utc_now(),
        )
        self.session.add(point)
        await self.session.flush()

        return PetitionHistoryPoint(
            petition_id=petition_id,
            agree_count=point.agree_count,
            recorded_at=point.recorded_at,
        )

    async def history(self, petition_id: str) -> List[PetitionHistoryPoint]:
        """History points for a petition, oldest first"""
        result = await self.session.execute(
            select(PetitionHistoryModel.agree_count, PetitionHistoryModel.recorded_at)
            .join(PetitionModel, PetitionHistoryModel.petition_ref == PetitionModel.id)
            .where(PetitionModel.petition_id == petition_id)
            .order_by(PetitionHistoryModel.recorded_at.asc(), PetitionHistoryModel.id.asc())
        )
        return [
            PetitionHistoryPoint(
                petition_id=petition_id,
                agree_count=row.agree_count,
                recorded_at=row.recorded_at,
            )
            for row in result.all()
        ]

    async def count_where(self, criteria: Optional[PetitionFilter] = None) -> int:
        """Count petitions matching the filter"""
        criteria = criteria or PetitionFilter()
        result = await self.session.execute(
            select(func.count()).select_from(PetitionModel).where(*criteria.clauses())
        )
        return result.scalar_one()

    async def find_where(
        self,
        criteria: Optional[PetitionFilter] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[Petition]:
        """Find petitions matching the filter, most agreed first"""
        criteria = criteria or PetitionFilter()
        result = await self.session.execute(
            select(PetitionModel)
            .where(*criteria.clauses())
            .order_by(PetitionModel.agree_count.desc(), PetitionModel.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [self._model_to_domain(model) for model in result.scalars().all()]

    async def mark_ended(self, now: Optional[datetime] = None) -> int:
        """Close every in-progress petition whose end date has passed"""
        now = now or utc_now()
        result = await self.session.execute(
            update(PetitionModel)
            .where(
                PetitionModel.status == BillStatus.IN_PROGRESS.value,
                PetitionModel.end_date < now,
            )
            .values(status=BillStatus.ENDED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    def _domain_to_values(self, petition: Petition, content_hash: str, now: datetime) -> dict:
        return {
            "petition_id": petition.petition_id,
            "category": petition.category,
            "title": petition.title,
            "content": petition.content,
            "hashtags": list(petition.hashtags),
            "agree_count": petition.agree_count,
            "agree_goal": petition.agree_goal,
            "progress_rate": petition.progress_rate,
            "start_date": petition.start_date,
            "end_date": petition.end_date,
            "source_url": petition.source_url,
            "status": BillStatus.IN_PROGRESS.value,
            "content_hash": content_hash,
            "created_at": now,
            "updated_at": now,
        }

    def _model_to_domain(self, model: PetitionModel) -> Petition:
        return Petition(
            petition_id=model.petition_id,
            category=model.category,
            title=model.title,
            content=model.content,
            hashtags=model.hashtags or [],
            agree_count=model.agree_count,
            agree_goal=model.agree_goal,
            start_date=model.start_date,
            end_date=model.end_date,
            source_url=model.source_url,
            status=BillStatus(model.status),
        )
