"""Services package for persistence and maintenance around crawl runs"""

from .reconciler import BillReconciler, PetitionReconciler
from .status_sweep import StatusSweeper

__all__ = [
    "BillReconciler",
    "PetitionReconciler",
    "StatusSweeper",
]
