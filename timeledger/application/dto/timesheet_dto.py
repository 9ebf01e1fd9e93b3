"""
Timesheet DTOs for the application layer.
Data Transfer Objects for logging, editing, deleting and listing time.
"""

from typing import Optional, List
import datetime
from pydantic import Field, field_validator, model_validator

from timeledger.domain.models.classified_entry import ClassifiedEntry, EntryType
from timeledger.domain.services.recurrence import RecurrenceRule
from .base_dto import RequestDTO, ResponseDTO


# Request DTOs
class AddEntryRequestDTO(RequestDTO):
    """DTO for logging time, optionally repeated over a date range."""

    day: datetime.date = Field(description="Day to log, first day of a recurrence")
    kind: EntryType = Field(default=EntryType.WORK, description="WORK, VACATION, SICK_LEAVE or PERMIT")
    project_id: Optional[int] = Field(default=None, gt=0, description="Project worked on (WORK only)")
    customer_id: Optional[int] = Field(default=None, gt=0, description="Customer billed (defaults to the project's client)")
    hours: Optional[float] = Field(default=None, description="Worked hours, or permit hours for PERMIT")
    employee_id: Optional[int] = Field(default=None, gt=0, description="Employee (defaults to the caller)")
    recurrence: RecurrenceRule = Field(default=RecurrenceRule.NONE, description="NONE, DAILY or WEEKLY")
    recurrence_end: Optional[datetime.date] = Field(default=None, description="Last day of the recurrence (inclusive)")

    @model_validator(mode="after")
    def validate_recurrence_end(self):
        """Validate that the recurrence ends on or after its first day."""
        if self.recurrence_end and self.recurrence_end < self.day:
            raise ValueError("recurrence_end must not be before day")
        return self


class UpdateSegmentRequestDTO(RequestDTO):
    """DTO for editing one work segment."""

    day: datetime.date = Field(description="Day the segment belongs to")
    project_id: Optional[int] = Field(default=None, gt=0, description="New project")
    hours: Optional[float] = Field(default=None, description="New hours")
    employee_id: Optional[int] = Field(default=None, gt=0, description="Employee (defaults to the caller)")
    segment_id: Optional[int] = Field(default=None, description="Set from the path")

    @model_validator(mode="after")
    def validate_has_changes(self):
        """Validate that at least one field is being changed."""
        if self.project_id is None and self.hours is None:
            raise ValueError("Provide project_id or hours")
        return self


class DeleteEntryRequestDTO(RequestDTO):
    """DTO for deleting a classified entry by its id."""

    entry_id: str = Field(min_length=1, description="Classified entry id, e.g. ws-12 or ts-4-permit")
    day: datetime.date = Field(description="Day the entry belongs to")
    employee_id: Optional[int] = Field(default=None, gt=0, description="Employee (defaults to the caller)")

    @field_validator("entry_id")
    @classmethod
    def validate_entry_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("entry_id cannot be empty")
        return v


class ListEntriesRequestDTO(RequestDTO):
    """DTO for listing classified entries."""

    employee_id: Optional[int] = Field(default=None, gt=0, description="Employee (defaults to the caller)")
    month: Optional[int] = Field(default=None, ge=1, le=12)
    year: Optional[int] = Field(default=None, ge=1900, le=9999)
    all_users: bool = Field(default=False, description="Admins only: every employee's entries")

    @model_validator(mode="after")
    def validate_month_has_year(self):
        if self.month is not None and self.year is None:
            raise ValueError("month requires year")
        return self


# Response DTOs
class ClassifiedEntryResponseDTO(ResponseDTO):
    """One classified timesheet row."""

    id: str
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    customer_id: Optional[int] = None
    date: Optional[datetime.date] = None
    hours: float
    entry_type: EntryType
    permits_hours: float = 0.0
    illness: bool = False
    holiday: bool = False
    timesheet_id: Optional[int] = None
    segment_id: Optional[int] = None

    @classmethod
    def from_domain(cls, entry: ClassifiedEntry) -> "ClassifiedEntryResponseDTO":
        return cls(
            id=entry.id,
            user_id=entry.user_id,
            project_id=entry.project_id,
            customer_id=entry.customer_id,
            date=entry.date,
            hours=entry.hours,
            entry_type=entry.entry_type,
            permits_hours=entry.permits_hours,
            illness=entry.illness,
            holiday=entry.holiday,
            timesheet_id=entry.timesheet_id,
            segment_id=entry.segment_id,
        )


class EntryListResponseDTO(ResponseDTO):
    entries: List[ClassifiedEntryResponseDTO] = Field(default_factory=list)
    total: int = 0
    total_hours: float = 0.0


class BatchFailureDTO(ResponseDTO):
    """One date of a batch that could not be written."""

    date: datetime.date
    error: str
    error_code: Optional[str] = None


class BatchResultDTO(ResponseDTO):
    """Outcome of logging one request over every date of its recurrence."""

    succeeded: List[datetime.date] = Field(default_factory=list)
    failed: List[BatchFailureDTO] = Field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class DayLedgerResponseDTO(ResponseDTO):
    """Ledger state after a segment edit, as classified rows."""

    timesheet_id: Optional[int] = None
    employee_id: int
    day: datetime.date
    entries: List[ClassifiedEntryResponseDTO] = Field(default_factory=list)


class DeleteEntryResponseDTO(ResponseDTO):
    entry_id: str
    deleted: bool
