"""
Repository layer for database operations.

Provides clean abstractions over SQLAlchemy for domain entities.
"""

from .bill_repository import BillRepository, BillPersistenceOutcome
from .petition_repository import PetitionRepository, PetitionPersistenceOutcome
from .fetch_log_repository import FetchLogRepository

__all__ = [
    "BillRepository",
    "BillPersistenceOutcome",
    "PetitionRepository",
    "PetitionPersistenceOutcome",
    "FetchLogRepository",
]
