"""
Report read models.
Rollup trees, flat detail rows and reporting periods.
"""

import calendar
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from timeledger.domain.models.base import ValidationError


class ReportKind(str, Enum):
    CLIENTS = "clients"
    TEAM = "team"
    PROJECTS = "projects"


@dataclass(frozen=True)
class ReportPeriod:
    """Inclusive calendar date range used to filter report entries."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("Report period end must not be before its start", "end")

    @classmethod
    def monthly(cls, year: int, month: int) -> "ReportPeriod":
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}", "month")
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def yearly(cls, year: int) -> "ReportPeriod":
        return cls(date(year, 1, 1), date(year, 12, 31))

    def contains(self, day: Optional[date]) -> bool:
        return day is not None and self.start <= day <= self.end


@dataclass
class ReportNode:
    """Generic rollup node summing hours over one grouping dimension."""

    key: str
    label: str
    total_hours: float = 0.0
    percentage: float = 0.0
    children: Dict[str, "ReportNode"] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)

    def child(self, key: str, label: str, **attributes: Any) -> "ReportNode":
        """Return the child for key, creating it on first sight."""
        node = self.children.get(key)
        if node is None:
            node = ReportNode(key=key, label=label, attributes=dict(attributes))
            self.children[key] = node
        return node

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "total_hours": self.total_hours,
            "percentage": self.percentage,
            "attributes": dict(self.attributes),
            "children": [child.to_dict() for child in self.children.values()],
        }


@dataclass(frozen=True)
class DetailRow:
    """One flat, date-filtered row used by raw exports."""

    date: date
    user: str
    client: str
    project: str
    hours: float
    user_id: Optional[int] = None
    project_id: Optional[int] = None


@dataclass
class ReportResult:
    kind: ReportKind
    period: ReportPeriod
    nodes: List[ReportNode] = field(default_factory=list)
    detail_rows: List[DetailRow] = field(default_factory=list)
    total_hours: float = 0.0


@dataclass
class DashboardSummary:
    total_hours: float
    active_project_count: int
    average_daily_hours: float
    hours_by_project: List[Dict[str, Any]] = field(default_factory=list)
    daily_trend: List[Dict[str, Any]] = field(default_factory=list)
