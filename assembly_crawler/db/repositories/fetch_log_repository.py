"""
Repository for FetchLog database operations.

One row per crawl run, used for monitoring crawler health and for the
run history exposed over HTTP.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import select

from ..models import FetchLogModel
from ..session import Database


class FetchLogRepository:
    """Repository for crawl run logs."""

    def __init__(self, db: Database):
        """
        Initialize repository with database instance.

        Each call opens its own session so a run log is written even
        when the run's record transactions failed.

        Args:
            db: Database instance
        """
        self.db = db

    async def create_log(
        self,
        source: str,
        status: str,
        records_attempted: int,
        records_succeeded: int,
        records_failed: int,
        duration_seconds: float,
        fetch_params: Optional[dict] = None,
        error_count: int = 0,
        error_summary: Optional[List[dict]] = None,
    ) -> FetchLogModel:
        """
        Create a new run log entry.

        Args:
            source: Crawler name ("bills", "petitions", "status_sweep")
            status: AdapterStatus value of the run
            records_attempted: Items the run tried to process
            records_succeeded: Records persisted
            records_failed: Items that raised
            duration_seconds: Duration of the run in seconds
            fetch_params: Run counters and parameters
            error_count: Number of errors encountered
            error_summary: Serialized error details

        Returns:
            Created FetchLogModel instance
        """
        async with self.db.session() as session:
            log = FetchLogModel(
                source=source,
                status=status,
                records_attempted=records_attempted,
                records_succeeded=records_succeeded,
                records_failed=records_failed,
                duration_seconds=duration_seconds,
                fetch_params=fetch_params,
                error_count=error_count,
                error_summary=error_summary,
            )

            session.add(log)
            await session.flush()

            return log

    async def get_logs_since(
        self,
        cutoff_time: datetime,
        source: Optional[str] = None,
    ) -> List[FetchLogModel]:
        """
        Get all logs since a specific datetime, newest first.

        Args:
            cutoff_time: Datetime to filter logs from
            source: Optional crawler name filter
        """
        async with self.db.session() as session:
            query = select(FetchLogModel).where(
                FetchLogModel.created_at >= cutoff_time
            )

            if source:
                query = query.where(FetchLogModel.source == source)

            query = query.order_by(FetchLogModel.created_at.desc(), FetchLogModel.id.desc())

            result = await session.execute(query)
            return list(result.scalars().all())

    async def get_recent_logs(
        self,
        limit: int = 100,
        source: Optional[str] = None,
    ) -> List[FetchLogModel]:
        """
        Get most recent run logs.

        Args:
            limit: Maximum number of logs to return
            source: Optional crawler name filter
        """
        async with self.db.session() as session:
            query = select(FetchLogModel)

            if source:
                query = query.where(FetchLogModel.source == source)

            query = query.order_by(FetchLogModel.created_at.desc(), FetchLogModel.id.desc()).limit(limit)

            result = await session.execute(query)
            return list(result.scalars().all())
