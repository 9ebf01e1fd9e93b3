"""
Report DTOs for the application layer.
Data Transfer Objects for rollup reports, the dashboard and exports.
"""

from typing import Any, Dict, List, Optional
import datetime
from enum import Enum
from pydantic import Field, field_validator

from timeledger.domain.models.report import DashboardSummary, DetailRow, ReportKind, ReportNode, ReportResult
from timeledger.domain.services.unit_converter import DisplayUnit, UnitConverter
from .base_dto import PeriodRequestDTO, RequestDTO, ResponseDTO


class ExportKind(str, Enum):
    """Reports that can be downloaded."""
    CLIENTS = "clients"
    TEAM = "team"
    DETAILS = "details"


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"


# Request DTOs
class ReportRequestDTO(PeriodRequestDTO):
    """DTO for building a rollup report."""

    kind: ReportKind = Field(description="clients, team or projects")
    search: Optional[str] = Field(default=None, max_length=255, description="Filter top-level groups by name")
    unit: DisplayUnit = Field(default=DisplayUnit.HOURS, description="hours or days")

    @field_validator("search")
    @classmethod
    def validate_search(cls, v):
        if v is not None and len(v.strip()) == 0:
            return None
        return v


class DashboardRequestDTO(RequestDTO):
    """DTO for the dashboard KPIs."""

    today: Optional[datetime.date] = Field(default=None, description="Last day of the window, defaults to today")
    employee_id: Optional[int] = Field(default=None, gt=0, description="Employee (defaults to the caller)")
    all_users: bool = Field(default=False, description="Admins only: every employee's hours")
    unit: DisplayUnit = Field(default=DisplayUnit.HOURS)


class ExportRequestDTO(PeriodRequestDTO):
    """DTO for downloading a report as CSV or XLSX."""

    kind: ExportKind = Field(description="clients, team or details")
    format: ExportFormat = Field(default=ExportFormat.CSV)
    search: Optional[str] = Field(default=None, max_length=255)


# Response DTOs
class ReportNodeDTO(ResponseDTO):
    """One group of a rollup tree."""

    key: str
    label: str
    total_hours: float
    display_value: str
    percentage: float
    attributes: Dict[str, Any] = Field(default_factory=dict)
    children: List["ReportNodeDTO"] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, node: ReportNode, converter: UnitConverter, unit: DisplayUnit) -> "ReportNodeDTO":
        return cls(
            key=node.key,
            label=node.label,
            total_hours=node.total_hours,
            display_value=converter.format(node.total_hours, unit),
            percentage=node.percentage,
            attributes=dict(node.attributes),
            children=[cls.from_domain(child, converter, unit) for child in node.children.values()],
        )


class DetailRowDTO(ResponseDTO):
    date: datetime.date
    user: str
    client: str
    project: str
    hours: float

    @classmethod
    def from_domain(cls, row: DetailRow) -> "DetailRowDTO":
        return cls(date=row.date, user=row.user, client=row.client, project=row.project, hours=row.hours)


class ReportResponseDTO(ResponseDTO):
    """A rollup tree with its flat detail rows."""

    kind: ReportKind
    period_start: datetime.date
    period_end: datetime.date
    unit: DisplayUnit
    total_hours: float
    total_display: str
    nodes: List[ReportNodeDTO] = Field(default_factory=list)
    detail_rows: List[DetailRowDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: ReportResult, converter: UnitConverter, unit: DisplayUnit) -> "ReportResponseDTO":
        return cls(
            kind=result.kind,
            period_start=result.period.start,
            period_end=result.period.end,
            unit=unit,
            total_hours=result.total_hours,
            total_display=converter.format_label(result.total_hours, unit),
            nodes=[ReportNodeDTO.from_domain(node, converter, unit) for node in result.nodes],
            detail_rows=[DetailRowDTO.from_domain(row) for row in result.detail_rows],
        )


class ProjectHoursDTO(ResponseDTO):
    project_id: Optional[int] = None
    name: str
    color: str
    hours: float


class TrendPointDTO(ResponseDTO):
    date: datetime.date
    hours: float


class DashboardResponseDTO(ResponseDTO):
    """Dashboard KPIs over the recent window."""

    total_hours: float
    total_display: str
    active_project_count: int
    average_daily_hours: float
    unit: DisplayUnit
    hours_by_project: List[ProjectHoursDTO] = Field(default_factory=list)
    daily_trend: List[TrendPointDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(
        cls,
        summary: DashboardSummary,
        converter: UnitConverter,
        unit: DisplayUnit
    ) -> "DashboardResponseDTO":
        return cls(
            total_hours=summary.total_hours,
            total_display=converter.format_label(summary.total_hours, unit),
            active_project_count=summary.active_project_count,
            average_daily_hours=summary.average_daily_hours,
            unit=unit,
            hours_by_project=[ProjectHoursDTO(**bucket) for bucket in summary.hours_by_project],
            daily_trend=[TrendPointDTO(**point) for point in summary.daily_trend],
        )
