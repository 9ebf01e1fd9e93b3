"""
Mappers between database models and domain objects.
"""

from .day_ledger_mapper import DayLedgerMapper, normalize_row, normalize_rows
from .directory_mapper import DirectoryMapper

__all__ = [
    "DayLedgerMapper",
    "DirectoryMapper",
    "normalize_row",
    "normalize_rows",
]
