"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .day_ledger_repository import DayLedgerRepository
from .directory_repository import DirectoryRepository

__all__ = [
    "DayLedgerRepository",
    "DirectoryRepository",
]
