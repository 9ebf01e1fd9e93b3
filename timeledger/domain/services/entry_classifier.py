"""Entry classifier.
Turns stored day records into typed, display-ready entries.
"""

import logging
import math
from typing import Any, Iterable, List, Optional

from timeledger.domain.models.classified_entry import (
    ClassifiedEntry,
    EntryType,
    LedgerRecord,
    SegmentRecord,
    ledger_entry_id,
    permit_entry_id,
    segment_entry_id,
)
from timeledger.domain.models.day_ledger import DayLedger

logger = logging.getLogger(__name__)


def _as_hours(value: Any) -> float:
    """Read an hour value leniently; anything unusable counts as zero."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(hours) or hours < 0:
        return 0.0
    return hours


def record_from_ledger(ledger: DayLedger) -> LedgerRecord:
    """Build the canonical record for an in-memory ledger."""
    return LedgerRecord(
        timesheet_id=ledger.id,
        employee_id=ledger.employee_id,
        day=ledger.day,
        permits_hours=ledger.permits_hours,
        illness=ledger.illness,
        holiday=ledger.holiday,
        segments=[
            SegmentRecord(
                id=segment.id,
                project_id=segment.project_id,
                customer_id=segment.customer_id,
                hours=segment.hours,
            )
            for segment in ledger.worked_hours
        ],
    )


class EntryClassifier:
    """
    Domain service classifying stored day records.

    Precedence is holiday, then illness, then permit, then work. A day that
    holds both worked hours and permit hours yields one WORK entry per segment
    plus a synthetic PERMIT entry. Classification never raises: malformed
    input degrades to a zero-hour WORK entry.
    """

    def classify(
        self,
        record: LedgerRecord,
        segments: Optional[Iterable[SegmentRecord]] = None
    ) -> List[ClassifiedEntry]:
        try:
            if segments is None:
                segments = record.segments
            return self._classify(record, [s for s in (segments or []) if s is not None])
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning(f"Degrading malformed timesheet record to an empty work entry: {exc}")
            return [self._fallback_entry(record)]

    def classify_records(self, records: Iterable[LedgerRecord]) -> List[ClassifiedEntry]:
        """Classify many records, keeping input order."""
        entries: List[ClassifiedEntry] = []
        for record in records:
            entries.extend(self.classify(record))
        return entries

    def classify_ledger(self, ledger: DayLedger) -> List[ClassifiedEntry]:
        return self.classify(record_from_ledger(ledger))

    def _classify(self, record: LedgerRecord, segments: List[SegmentRecord]) -> List[ClassifiedEntry]:
        timesheet_id = record.timesheet_id
        permits = _as_hours(record.permits_hours)
        illness = bool(record.illness)
        holiday = bool(record.holiday)

        def leave_entry(entry_type: EntryType, permits_hours: float = 0.0) -> ClassifiedEntry:
            return ClassifiedEntry(
                id=ledger_entry_id(timesheet_id),
                user_id=record.employee_id,
                project_id=None,
                date=record.day,
                hours=0.0,
                entry_type=entry_type,
                permits_hours=permits_hours,
                illness=illness,
                holiday=holiday,
                timesheet_id=timesheet_id,
            )

        if holiday:
            return [leave_entry(EntryType.VACATION)]
        if illness:
            return [leave_entry(EntryType.SICK_LEAVE)]
        if permits > 0 and not segments:
            return [leave_entry(EntryType.PERMIT, permits)]

        if not segments:
            # Work-mode day without any recorded segment.
            return [self._fallback_entry(record)]

        entries = [
            ClassifiedEntry(
                id=(
                    segment_entry_id(segment.id)
                    if segment.id is not None
                    else f"{ledger_entry_id(timesheet_id)}-{index}"
                ),
                user_id=record.employee_id,
                project_id=segment.project_id,
                date=record.day,
                hours=_as_hours(segment.hours),
                entry_type=EntryType.WORK,
                timesheet_id=timesheet_id,
                segment_id=segment.id,
                customer_id=segment.customer_id,
            )
            for index, segment in enumerate(segments)
        ]

        if permits > 0:
            entries.append(
                ClassifiedEntry(
                    id=permit_entry_id(timesheet_id),
                    user_id=record.employee_id,
                    project_id=None,
                    date=record.day,
                    hours=0.0,
                    entry_type=EntryType.PERMIT,
                    permits_hours=permits,
                    timesheet_id=timesheet_id,
                )
            )

        return entries

    @staticmethod
    def _fallback_entry(record: Any) -> ClassifiedEntry:
        timesheet_id = getattr(record, "timesheet_id", None)
        return ClassifiedEntry(
            id=ledger_entry_id(timesheet_id),
            user_id=getattr(record, "employee_id", None),
            project_id=None,
            date=getattr(record, "day", None),
            hours=0.0,
            entry_type=EntryType.WORK,
            timesheet_id=timesheet_id,
        )
