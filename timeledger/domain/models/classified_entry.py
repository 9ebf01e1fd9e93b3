"""
Classified entry read model.
Typed, display-ready rows derived from stored day ledgers.
"""

from dataclasses import dataclass, field, asdict
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional


class EntryType(str, Enum):
    """Kind of time recorded on a day."""
    WORK = "WORK"
    VACATION = "VACATION"
    SICK_LEAVE = "SICK_LEAVE"
    PERMIT = "PERMIT"

    @property
    def is_leave(self) -> bool:
        return self in (EntryType.VACATION, EntryType.SICK_LEAVE)


WORK_SEGMENT_PREFIX = "ws"
TIMESHEET_PREFIX = "ts"
PERMIT_SUFFIX = "permit"


def segment_entry_id(segment_id: Any) -> str:
    return f"{WORK_SEGMENT_PREFIX}-{segment_id}"


def ledger_entry_id(timesheet_id: Any) -> str:
    return f"{TIMESHEET_PREFIX}-{timesheet_id}"


def permit_entry_id(timesheet_id: Any) -> str:
    return f"{TIMESHEET_PREFIX}-{timesheet_id}-{PERMIT_SUFFIX}"


@dataclass
class ClassifiedEntry:
    """A derived view of one stored row. Never persisted."""

    id: str
    user_id: Optional[int]
    project_id: Optional[int]
    date: Optional[date]
    hours: float
    entry_type: EntryType
    permits_hours: float = 0.0
    illness: bool = False
    holiday: bool = False
    timesheet_id: Optional[int] = None
    segment_id: Optional[int] = None
    customer_id: Optional[int] = None

    @property
    def is_work(self) -> bool:
        return self.entry_type == EntryType.WORK

    @property
    def is_synthetic_permit(self) -> bool:
        """True for the permit row split off a day that also has worked hours."""
        return self.entry_type == EntryType.PERMIT and self.id.endswith(f"-{PERMIT_SUFFIX}")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["entry_type"] = self.entry_type.value
        data["date"] = self.date.isoformat() if self.date else None
        return data


@dataclass
class SegmentRecord:
    """Canonical shape of one stored work segment row."""

    id: Optional[int] = None
    project_id: Optional[int] = None
    customer_id: Optional[int] = None
    hours: Optional[float] = None


@dataclass
class LedgerRecord:
    """Canonical shape of one stored day row after normalization."""

    timesheet_id: Optional[int] = None
    employee_id: Optional[int] = None
    day: Optional[date] = None
    permits_hours: Optional[float] = None
    illness: bool = False
    holiday: bool = False
    segments: List[SegmentRecord] = field(default_factory=list)
