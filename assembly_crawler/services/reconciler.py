"""
Upsert reconcilers for crawled records.

Each record is persisted in its own transaction so one bad row never
rolls back the rest of the run.

Responsibility: Persist extracted records and classify the outcome
"""

import logging

from ..db.session import Database
from ..db.repositories import (
    BillRepository,
    BillPersistenceOutcome,
    PetitionRepository,
    PetitionPersistenceOutcome,
)
from ..models.bill import Bill
from ..models.petition import Petition

logger = logging.getLogger(__name__)


class BillReconciler:
    """
    Persists bills one transaction at a time.

    Example:
        reconciler = BillReconciler(database)
        outcome = await reconciler.upsert(bill)
    """

    def __init__(self, database: Database):
        self.database = database

    async def upsert(self, bill: Bill) -> BillPersistenceOutcome:
        """
        Raises:
            Exception: Any persistence error, after the transaction was rolled back
        """
        try:
            async with self.database.session() as session:
                outcome = await BillRepository(session).upsert(bill)
        except Exception as e:
            logger.error(f"Failed to save bill {bill.bill_number}: {e}")
            raise

        logger.info(f"Saved bill {bill.bill_number} ({outcome.status.value}): {bill.bill_name}")
        return outcome


class PetitionReconciler:
    """
    Persists petitions one transaction at a time.

    The history point for a changed agree count is written in the same
    transaction as the petition row.
    """

    def __init__(self, database: Database):
        self.database = database

    async def upsert(self, petition: Petition) -> PetitionPersistenceOutcome:
        try:
            async with self.database.session() as session:
                outcome = await PetitionRepository(session).upsert(petition)
        except Exception as e:
            logger.error(f"Failed to save petition {petition.petition_id}: {e}")
            raise

        if outcome.history_appended:
            logger.info(
                f"Petition {petition.petition_id} agree count "
                f"{outcome.previous_agree_count} -> {petition.agree_count}"
            )
        logger.info(f"Saved petition {petition.petition_id} ({outcome.status.value})")
        return outcome
