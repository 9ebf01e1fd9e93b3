"""
Day ledger mapper for converting between domain entities, database models
and raw stored rows.

`normalize_row` is the single place where the different field names used by
stored rows (`project` / `project_id` / `projectId`, `employee` /
`employee_id`, `day` / `date`, ...) are resolved into the canonical
LedgerRecord. Nothing past this module looks at raw field names.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from timeledger.domain.models.classified_entry import LedgerRecord, SegmentRecord
from timeledger.domain.models.day_ledger import DayLedger, WorkSegment
from timeledger.infrastructure.db.models import DayLedgerModel, WorkSegmentModel


TIMESHEET_ID_FIELDS = ("timesheet_id", "timesheetId", "day_ledger_id")
EMPLOYEE_FIELDS = ("employee_id", "employeeId", "employee", "user_id", "userId")
DAY_FIELDS = ("day", "date")
PERMITS_FIELDS = ("permits_hours", "permitsHours")
SEGMENTS_FIELDS = ("worked_hours", "workedHours", "timeworks")
PROJECT_FIELDS = ("project_id", "projectId", "project")
CUSTOMER_FIELDS = ("customer_id", "customerId", "customer")


class DayLedgerMapper:
    """Maps between the DayLedger domain entity and DayLedgerModel."""

    def model_to_domain(self, model: DayLedgerModel) -> DayLedger:
        """Convert DayLedgerModel to DayLedger domain entity."""
        ledger = DayLedger(
            employee_id=model.employee_id,
            day=model.day,
            worked_hours=[self.segment_to_domain(segment) for segment in model.worked_hours],
            permits_hours=model.permits_hours or 0.0,
            illness=bool(model.illness),
            holiday=bool(model.holiday),
        )

        # Set entity metadata
        ledger.id = model.id
        if model.created_at:
            ledger.created_at = model.created_at
        if model.updated_at:
            ledger.updated_at = model.updated_at

        return ledger

    def segment_to_domain(self, model: WorkSegmentModel) -> WorkSegment:
        return WorkSegment(
            id=model.id,
            project_id=model.project_id,
            customer_id=model.customer_id,
            hours=model.hours,
        )

    def domain_to_model(self, ledger: DayLedger) -> DayLedgerModel:
        """Convert a new DayLedger domain entity to DayLedgerModel."""
        model = DayLedgerModel(
            employee_id=ledger.employee_id,
            day=ledger.day,
            permits_hours=ledger.permits_hours,
            illness=ledger.illness,
            holiday=ledger.holiday,
        )
        model.worked_hours = [
            self.segment_to_model(segment, position)
            for position, segment in enumerate(ledger.worked_hours)
        ]
        return model

    def segment_to_model(self, segment: WorkSegment, position: int) -> WorkSegmentModel:
        return WorkSegmentModel(
            project_id=segment.project_id,
            customer_id=segment.customer_id,
            hours=segment.hours,
            position=position,
        )

    def update_model(self, model: DayLedgerModel, ledger: DayLedger) -> None:
        """
        Copy ledger state onto a stored model.
        Known segments are updated, new ones inserted, missing ones dropped.
        """
        model.permits_hours = ledger.permits_hours
        model.illness = ledger.illness
        model.holiday = ledger.holiday

        stored = {segment.id: segment for segment in model.worked_hours}
        segments = []
        for position, segment in enumerate(ledger.worked_hours):
            existing = stored.get(segment.id) if segment.id is not None else None
            if existing is None:
                segments.append(self.segment_to_model(segment, position))
                continue
            existing.project_id = segment.project_id
            existing.customer_id = segment.customer_id
            existing.hours = segment.hours
            existing.position = position
            segments.append(existing)
        model.worked_hours = segments

    def model_to_row(self, model: DayLedgerModel) -> Dict[str, Any]:
        """Render a stored ledger as the raw row shape served by list_rows."""
        return {
            "id": model.id,
            "employee": model.employee_id,
            "day": model.day.isoformat() if model.day else None,
            "permits_hours": model.permits_hours,
            "illness": model.illness,
            "holiday": model.holiday,
            "worked_hours": [
                {
                    "id": segment.id,
                    "project": segment.project_id,
                    "customer": segment.customer_id,
                    "hours": segment.hours,
                }
                for segment in model.worked_hours
            ],
        }


def _first(row: Mapping[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = row.get(name)
        if value is not None:
            return value
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Mapping):
        return _as_int(value.get("id"))
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "t")
    return bool(value)


def _as_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _segment_from(raw: Any) -> Optional[SegmentRecord]:
    if not isinstance(raw, Mapping):
        return None
    return SegmentRecord(
        id=_as_int(raw.get("id")),
        project_id=_as_int(_first(raw, PROJECT_FIELDS)),
        customer_id=_as_int(_first(raw, CUSTOMER_FIELDS)),
        hours=_as_float(raw.get("hours")),
    )


def normalize_row(row: Any) -> LedgerRecord:
    """
    Normalize one raw stored row into a LedgerRecord.

    Two shapes are accepted: a day row with its segments nested under
    `worked_hours` (or `workedHours` / `timeworks`), and a flat segment row
    carrying its project, hours and `timesheet_id`. Never raises; fields that
    cannot be read are left empty.
    """
    if not isinstance(row, Mapping):
        return LedgerRecord()

    nested = _first(row, SEGMENTS_FIELDS)
    if nested is not None or _first(row, PROJECT_FIELDS) is None:
        timesheet_id = _as_int(_first(row, TIMESHEET_ID_FIELDS + ("id",)))
        segments = [s for s in (_segment_from(raw) for raw in (nested or []) if isinstance(nested, list)) if s]
    else:
        timesheet_id = _as_int(_first(row, TIMESHEET_ID_FIELDS))
        segment = _segment_from(row)
        segments = [segment] if segment else []

    return LedgerRecord(
        timesheet_id=timesheet_id,
        employee_id=_as_int(_first(row, EMPLOYEE_FIELDS)),
        day=_as_date(_first(row, DAY_FIELDS)),
        permits_hours=_as_float(_first(row, PERMITS_FIELDS)),
        illness=_as_bool(row.get("illness")),
        holiday=_as_bool(row.get("holiday")),
        segments=segments,
    )


def normalize_rows(rows: Iterable[Any]) -> List[LedgerRecord]:
    """
    Normalize raw rows, merging rows that belong to the same day ledger.
    Records keep the order in which their ledger was first seen.
    """
    records: List[LedgerRecord] = []
    by_timesheet: Dict[int, LedgerRecord] = {}

    for row in rows or []:
        record = normalize_row(row)
        if record.timesheet_id is None:
            records.append(record)
            continue

        known = by_timesheet.get(record.timesheet_id)
        if known is None:
            by_timesheet[record.timesheet_id] = record
            records.append(record)
            continue

        known.segments.extend(record.segments)
        if not known.permits_hours and record.permits_hours:
            known.permits_hours = record.permits_hours
        known.illness = known.illness or record.illness
        known.holiday = known.holiday or record.holiday

    return records
