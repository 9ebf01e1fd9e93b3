"""
Domain models for the timesheet ledger.
This module exports all domain entities, read models and exceptions.
"""

# Base classes and exceptions
from .base import (
    BaseEntity,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    NotFoundError,
    ConflictError,
    PersistenceError
)

# Ledger
from .day_ledger import DayLedger, WorkSegment, LedgerMode

# Read models
from .classified_entry import (
    ClassifiedEntry,
    EntryType,
    LedgerRecord,
    SegmentRecord
)
from .directory import (
    ClientInfo,
    ProjectInfo,
    UserInfo,
    UserRole,
    Directory
)
from .report import (
    ReportKind,
    ReportPeriod,
    ReportNode,
    DetailRow,
    ReportResult,
    DashboardSummary
)

__all__ = [
    "BaseEntity",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "NotFoundError",
    "ConflictError",
    "PersistenceError",
    "DayLedger",
    "WorkSegment",
    "LedgerMode",
    "ClassifiedEntry",
    "EntryType",
    "LedgerRecord",
    "SegmentRecord",
    "ClientInfo",
    "ProjectInfo",
    "UserInfo",
    "UserRole",
    "Directory",
    "ReportKind",
    "ReportPeriod",
    "ReportNode",
    "DetailRow",
    "ReportResult",
    "DashboardSummary",
]
