"""Reconciliation engine for day ledgers.
Applies add, update and delete semantics to the one ledger an employee has per day.
"""

import logging
from datetime import date
from typing import Optional, Union

from timeledger.domain.models.base import ConflictError, NotFoundError, ValidationError
from timeledger.domain.models.classified_entry import ClassifiedEntry, EntryType
from timeledger.domain.models.day_ledger import DayLedger, WorkSegment
from timeledger.domain.repositories.day_ledger_repository import DayLedgerRepository

logger = logging.getLogger(__name__)


MAX_DAILY_HOURS = 24.0


class ReconciliationEngine:
    """
    Domain service reconciling entries against the per-day ledger.

    Work segments accumulate while a ledger is in work mode; any leave call
    (illness or holiday) wipes accumulated work and permits for that day.
    Ledgers read from the repository are never modified in place: changes are
    applied to a copy and only the repository's answer is returned.
    Repository errors propagate unchanged.
    """

    def __init__(
        self,
        repository: DayLedgerRepository,
        max_daily_hours: float = MAX_DAILY_HOURS
    ):
        self.repository = repository
        self.max_daily_hours = max_daily_hours

    async def get_day(self, employee_id: int, day: date) -> Optional[DayLedger]:
        return await self.repository.get_day_ledger(employee_id, day)

    async def add_entry(
        self,
        employee_id: int,
        day: date,
        kind: Union[EntryType, str],
        project_id: Optional[int] = None,
        hours: Optional[float] = None,
        customer_id: Optional[int] = None
    ) -> DayLedger:
        """
        Record one entry for an employee-day and persist the resulting ledger.

        For WORK, hours are the segment's hours; for PERMIT they are the
        permit hours. SICK_LEAVE and VACATION take no project or hours.
        """
        kind = self._validate_add(employee_id, day, kind, project_id, hours)

        illness = kind == EntryType.SICK_LEAVE
        holiday = kind == EntryType.VACATION
        permits = float(hours) if kind == EntryType.PERMIT else 0.0
        has_leave = permits > 0 or illness or holiday

        new_segment = None
        if not has_leave:
            new_segment = WorkSegment(project_id=project_id, hours=float(hours), customer_id=customer_id)

        existing = await self.repository.get_day_ledger(employee_id, day)

        if existing is None:
            ledger = DayLedger(
                employee_id=employee_id,
                day=day,
                worked_hours=[segment for segment in [new_segment] if segment is not None],
                permits_hours=0.0 if (illness or holiday) else permits,
                illness=illness,
                holiday=holiday,
            )
            ledger.validate()
            saved = await self.repository.create_day_ledger(ledger)
            logger.info(f"Created day ledger {saved.id} for employee {employee_id} on {day} ({kind.value})")
            return saved

        ledger = existing.copy()
        ledger.illness = illness
        ledger.holiday = holiday

        if illness or holiday:
            if existing.worked_hours or existing.permits_hours:
                logger.info(
                    f"{kind.value} on {day} supersedes {len(existing.worked_hours)} work segment(s) "
                    f"and {existing.permits_hours} permit hour(s) for employee {employee_id}"
                )
            ledger.worked_hours = []
            ledger.permits_hours = 0.0
        else:
            if permits > 0:
                ledger.permits_hours = permits
            if new_segment is not None:
                ledger.worked_hours.append(new_segment)
            self._check_daily_total(ledger)

        ledger.mark_as_updated()
        ledger.validate()
        saved = await self.repository.update_day_ledger(ledger)
        logger.info(f"Updated day ledger {saved.id} for employee {employee_id} on {day} ({kind.value})")
        return saved

    async def update_segment(
        self,
        employee_id: int,
        day: date,
        segment_id: int,
        project_id: Optional[int] = None,
        hours: Optional[float] = None,
        customer_id: Optional[int] = None
    ) -> DayLedger:
        """
        Edit one work segment in place, keeping every other segment.

        Moving the segment to another project sets its customer to customer_id.
        """
        if hours is not None:
            self._validate_hours(hours)

        existing = await self.repository.get_day_ledger(employee_id, day)
        if existing is None:
            raise NotFoundError("DayLedger", f"{employee_id}/{day.isoformat()}")

        ledger = existing.copy()
        segment = ledger.find_segment(segment_id)
        if segment is None:
            raise NotFoundError("WorkSegment", segment_id)

        if project_id is not None:
            segment.project_id = project_id
            segment.customer_id = customer_id
        if hours is not None:
            segment.hours = float(hours)
            self._check_daily_total(ledger)

        ledger.mark_as_updated()
        ledger.validate()
        return await self.repository.update_day_ledger(ledger)

    async def delete_entry(self, entry: ClassifiedEntry) -> bool:
        """
        Delete the data behind a classified entry.

        Returns False when there was nothing left to delete, so deleting the
        same entry twice is harmless.
        """
        if entry.segment_id is not None:
            deleted = await self.repository.delete_work_segment(entry.segment_id)
            if deleted:
                await self._drop_if_empty(entry.user_id, entry.date)
            return deleted

        if entry.entry_type != EntryType.PERMIT:
            if entry.timesheet_id is None:
                return False
            return await self.repository.delete_day_ledger(entry.timesheet_id)

        existing = await self.repository.get_day_ledger(entry.user_id, entry.date)
        if existing is None or existing.is_leave:
            return False

        if existing.worked_hours:
            if not existing.permits_hours:
                return False
            ledger = existing.copy()
            ledger.permits_hours = 0.0
            ledger.mark_as_updated()
            await self.repository.update_day_ledger(ledger)
            logger.info(f"Removed permit hours from day ledger {existing.id}, work segments kept")
            return True

        return await self.repository.delete_day_ledger(existing.id)

    async def _drop_if_empty(self, employee_id: Optional[int], day: Optional[date]) -> None:
        if employee_id is None or day is None:
            return
        ledger = await self.repository.get_day_ledger(employee_id, day)
        if ledger is not None and ledger.is_empty:
            await self.repository.delete_day_ledger(ledger.id)
            logger.info(f"Deleted empty day ledger {ledger.id} after its last segment was removed")

    def _validate_add(
        self,
        employee_id: int,
        day: date,
        kind: Union[EntryType, str],
        project_id: Optional[int],
        hours: Optional[float]
    ) -> EntryType:
        if not employee_id:
            raise ValidationError("Employee ID is required", "employee_id")
        if day is None:
            raise ValidationError("Day is required", "day")

        try:
            kind = EntryType(kind)
        except ValueError:
            raise ValidationError(f"Unsupported entry type: {kind}", "kind")

        if kind.is_leave:
            if project_id is not None or hours:
                raise ConflictError(
                    f"A {kind.value} entry cannot carry a project or hours"
                )
            return kind

        if kind == EntryType.PERMIT:
            if project_id is not None:
                raise ConflictError("A PERMIT entry cannot be booked on a project")
            self._validate_hours(hours)
            return kind

        if not project_id:
            raise ValidationError("Project ID is required for work entries", "project_id")
        self._validate_hours(hours)
        return kind

    def _validate_hours(self, hours: Optional[float]) -> None:
        if hours is None or hours <= 0:
            raise ValidationError("Hours must be positive", "hours")
        if hours > self.max_daily_hours:
            raise ValidationError(f"Hours cannot exceed {self.max_daily_hours:g} per day", "hours")

    def _check_daily_total(self, ledger: DayLedger) -> None:
        booked = ledger.total_worked_hours + (ledger.permits_hours or 0.0)
        if booked > self.max_daily_hours:
            raise ValidationError(
                f"{ledger.day.isoformat()} would hold {booked:g} hours, "
                f"more than the {self.max_daily_hours:g} allowed per day",
                "hours"
            )
