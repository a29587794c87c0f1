"""
End-of-notice status sweep.

Crawlers only ever mark records IN_PROGRESS; closing notices and
petitions whose period is over happens here, on its own schedule.

Responsibility: Move expired bills and petitions to ENDED
"""

from datetime import datetime
from typing import Any, Dict, Optional
import logging

from ..db.session import Database
from ..db.repositories import BillRepository, PetitionRepository
from ..utils.date_utils import utc_now

logger = logging.getLogger(__name__)


class StatusSweeper:
    """
    Example:
        result = await StatusSweeper(database).sweep()
        # {"bills_ended": 3, "petitions_ended": 1, "swept_at": "..."}
    """

    def __init__(self, database: Database):
        self.database = database

    async def sweep(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or utc_now()

        async with self.database.session() as session:
            bills_ended = await BillRepository(session).mark_ended(now)
            petitions_ended = await PetitionRepository(session).mark_ended(now)

        logger.info(
            f"Status sweep complete: {bills_ended} bills and "
            f"{petitions_ended} petitions moved to ENDED"
        )

        return {
            "bills_ended": bills_ended,
            "petitions_ended": petitions_ended,
            "swept_at": now.isoformat(),
        }
