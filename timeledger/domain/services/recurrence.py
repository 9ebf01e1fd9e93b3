"""Recurrence expansion for logged-time requests.
Turns one request into the calendar dates it applies to.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator, List, Optional

from timeledger.domain.models.base import ValidationError


SATURDAY = 5
SUNDAY = 6
MAX_RECURRENCE_DAYS = 366


class RecurrenceRule(str, Enum):
    """How a single request repeats over a date range."""
    NONE = "NONE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"


@dataclass(frozen=True)
class RecurrencePlan:
    """
    Finite, restartable sequence of target dates.

    Iterating twice yields the same dates. Dates are stepped as calendar
    dates, so no timezone or DST offset can shift them.
    """

    start: date
    end: date
    rule: RecurrenceRule

    def __iter__(self) -> Iterator[date]:
        if self.rule == RecurrenceRule.NONE:
            yield self.start
            return

        current = self.start
        while current <= self.end:
            if self._matches(current):
                yield current
            current += timedelta(days=1)

    def _matches(self, day: date) -> bool:
        if self.rule == RecurrenceRule.DAILY:
            return day.weekday() not in (SATURDAY, SUNDAY)
        return day.weekday() == self.start.weekday()

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def dates(self) -> List[date]:
        return list(self)


class RecurrenceExpander:
    """Domain service expanding a request into a RecurrencePlan."""

    def __init__(self, max_span_days: int = MAX_RECURRENCE_DAYS):
        self.max_span_days = max_span_days

    def expand(
        self,
        start_date: date,
        end_date: Optional[date] = None,
        rule: RecurrenceRule = RecurrenceRule.NONE
    ) -> RecurrencePlan:
        if start_date is None:
            raise ValidationError("Start date is required", "start_date")

        try:
            rule = RecurrenceRule(rule)
        except ValueError:
            raise ValidationError(f"Unsupported recurrence rule: {rule}", "rule")

        if rule == RecurrenceRule.NONE:
            return RecurrencePlan(start_date, start_date, rule)

        if end_date is None:
            raise ValidationError(f"{rule.value} recurrence requires an end date", "end_date")

        if end_date < start_date:
            raise ValidationError("Recurrence end date must not be before start date", "end_date")

        span = (end_date - start_date).days + 1
        if span > self.max_span_days:
            raise ValidationError(
                f"Recurrence cannot span more than {self.max_span_days} days", "end_date"
            )

        return RecurrencePlan(start_date, end_date, rule)
