"""
Database package for the Assembly crawler.

Contains SQLAlchemy models, session management, typed filters and
repositories.
"""

from .models import Base, BillModel, PetitionModel, PetitionHistoryModel, FetchLogModel
from .session import Database
from .filters import BillFilter, PetitionFilter

__all__ = [
    "Base",
    "BillModel",
    "PetitionModel",
    "PetitionHistoryModel",
    "FetchLogModel",
    "Database",
    "BillFilter",
    "PetitionFilter",
]
