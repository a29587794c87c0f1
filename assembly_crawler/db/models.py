"""
SQLAlchemy database models for the Assembly crawler.

ORM models that map to database tables with proper indexing,
constraints, and relationships.

Responsibility: Define database schema and ORM mappings
"""

from datetime import datetime
from typing import Optional, List
from sqlalchemy import (
    String, Integer, Float, DateTime, Text, JSON,
    ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..utils.date_utils import utc_now


class Base(DeclarativeBase):
    """Base class for all ORM models"""
    pass


class BillModel(Base):
    """
    Database model for legislative notices.

    Maps to the 'bills' table; bill_number is the business key used
    by the crawler's upsert.
    """

    __tablename__ = "bills"

    # Primary key (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Natural key
    bill_number: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    # Core fields
    bill_name: Mapped[str] = mapped_column(Text, nullable=False)
    proposer_type: Mapped[str] = mapped_column(String(20), nullable=False)
    proposer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    committee: Mapped[str] = mapped_column(Text, nullable=False, index=True)

    proposal_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    main_content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    notice_start: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notice_end: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    opinion_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="IN_PROGRESS",
        index=True
    )

    content_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    # Timestamps
    last_fetched_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now
    )

    __table_args__ = (
        Index('idx_bill_status_notice_end', 'status', 'notice_end'),
        CheckConstraint('opinion_count >= 0', name='ck_bill_opinion_count_non_negative'),
    )

    def __repr__(self) -> str:
        return (
            f"<BillModel(id={self.id}, "
            f"bill_number={self.bill_number}, "
            f"status={self.status})>"
        )


class PetitionModel(Base):
    """
    Database model for national consent petitions.

    petition_id is the business key; history points hang off the
    internal id.
    """

    __tablename__ = "petitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Natural key
    petition_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    category: Mapped[str] = mapped_column(Text, nullable=False, default="", index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    hashtags: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)

    agree_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    agree_goal: Mapped[int] = mapped_column(Integer, nullable=False)
    progress_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)

    source_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="IN_PROGRESS",
        index=True
    )

    content_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        onupdate=utc_now
    )

    history: Mapped[List["PetitionHistoryModel"]] = relationship(
        back_populates="petition",
        order_by="PetitionHistoryModel.recorded_at",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint('agree_count >= 0', name='ck_petition_agree_count_non_negative'),
        CheckConstraint('agree_goal > 0', name='ck_petition_agree_goal_positive'),
    )

    def __repr__(self) -> str:
        return (
            f"<PetitionModel(id={self.id}, "
            f"petition_id={self.petition_id}, "
            f"agree_count={self.agree_count})>"
        )


class PetitionHistoryModel(Base):
    """
    Append-only agree-count time series for a petition.

    Rows are only ever inserted by the crawler.
    """

    __tablename__ = "petition_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    petition_ref: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("petitions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    agree_count: Mapped[int] = mapped_column(Integer, nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        index=True
    )

    petition: Mapped["PetitionModel"] = relationship(back_populates="history")

    __table_args__ = (
        Index('idx_petition_history_owner_time', 'petition_ref', 'recorded_at'),
    )

    def __repr__(self) -> str:
        return (
            f"<PetitionHistoryModel(petition_ref={self.petition_ref}, "
            f"agree_count={self.agree_count})>"
        )


class FetchLogModel(Base):
    """
    Database model for tracking crawl runs.

    One row per run, including failed runs, for monitoring and debugging.
    """

    __tablename__ = "fetch_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Run metadata
    source: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    # Metrics
    records_attempted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_succeeded: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    records_failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_seconds: Mapped[float] = mapped_column(nullable=False)

    # Parameters and detailed counters (JSON for flexibility)
    fetch_params: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Errors (if any)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_summary: Mapped[Optional[List[dict]]] = mapped_column(JSON, nullable=True)

    # Timestamp
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utc_now,
        index=True
    )

    __table_args__ = (
        Index('idx_fetch_log_source_status', 'source', 'status', 'created_at'),
    )

    def __repr__(self) -> str:
        return (
            f"<FetchLogModel(id={self.id}, "
            f"source={self.source}, "
            f"status={self.status})>"
        )
