"""
DayLedger domain model.
Represents one employee's time allocation for one calendar day.
"""

import copy
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from timeledger.domain.models.base import BaseEntity, ValidationError


class LedgerMode(str, Enum):
    """The two states a day ledger can be in."""
    WORK = "work"
    LEAVE = "leave"


@dataclass
class WorkSegment:
    """One project/hours pair inside a day ledger."""

    project_id: int
    hours: float
    customer_id: Optional[int] = None
    id: Optional[int] = None

    def validate(self) -> None:
        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")
        if self.hours is None or self.hours <= 0:
            raise ValidationError("Worked hours must be positive", "hours")

    @property
    def is_new(self) -> bool:
        return self.id is None


@dataclass(eq=False)
class DayLedger(BaseEntity):
    """
    DayLedger entity.

    A ledger is either a pure leave day (illness or holiday) or a composite of
    work segments plus optional permit hours. Leave flags exclude both.
    """

    employee_id: Optional[int] = None
    day: Optional[date] = None
    worked_hours: List[WorkSegment] = field(default_factory=list)
    permits_hours: float = 0.0
    illness: bool = False
    holiday: bool = False

    def validate(self) -> None:
        """Validate ledger state, including work/leave exclusivity."""
        if not self.employee_id:
            raise ValidationError("Employee ID is required", "employee_id")

        if self.day is None:
            raise ValidationError("Day is required", "day")

        if self.permits_hours is None or self.permits_hours < 0:
            raise ValidationError("Permit hours cannot be negative", "permits_hours")

        if self.is_leave and (self.worked_hours or self.permits_hours):
            raise ValidationError(
                "A leave day cannot carry worked hours or permit hours", "worked_hours"
            )

        for segment in self.worked_hours:
            segment.validate()

    @property
    def mode(self) -> LedgerMode:
        return LedgerMode.LEAVE if self.is_leave else LedgerMode.WORK

    @property
    def is_leave(self) -> bool:
        return bool(self.illness or self.holiday)

    @property
    def is_empty(self) -> bool:
        """True when the ledger no longer carries any data worth keeping."""
        return not self.worked_hours and not self.permits_hours and not self.is_leave

    @property
    def total_worked_hours(self) -> float:
        return sum(segment.hours for segment in self.worked_hours)

    def find_segment(self, segment_id: int) -> Optional[WorkSegment]:
        for segment in self.worked_hours:
            if segment.id == segment_id:
                return segment
        return None

    def copy(self) -> "DayLedger":
        """Return a deep copy that can be changed without touching this ledger."""
        return copy.deepcopy(self)
