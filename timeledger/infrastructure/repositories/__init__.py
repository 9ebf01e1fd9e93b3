"""
SQLAlchemy repository implementations.
"""

from .day_ledger_repository import SQLAlchemyDayLedgerRepository
from .directory_repository import SQLAlchemyDirectoryRepository

__all__ = [
    "SQLAlchemyDayLedgerRepository",
    "SQLAlchemyDirectoryRepository",
]
