"""
Report use cases for the application layer.
Builds rollup reports, dashboard KPIs and report exports.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Set, Tuple

from timeledger.application.entry_loader import EntryLoader
from timeledger.application.use_cases.base_use_case import AuthorizedUseCase, QueryUseCase
from timeledger.application.dto.report_dto import (
    DashboardRequestDTO, DashboardResponseDTO, ExportFormat, ExportKind,
    ExportRequestDTO, ReportRequestDTO, ReportResponseDTO
)
from timeledger.domain.models.classified_entry import ClassifiedEntry
from timeledger.domain.models.directory import UserRole
from timeledger.domain.models.report import ReportKind, ReportPeriod, ReportResult
from timeledger.domain.repositories.directory_repository import DirectoryRepository
from timeledger.domain.services.aggregation_engine import AggregationEngine
from timeledger.domain.services.unit_converter import UnitConverter
from timeledger.infrastructure.export import ExportFile, export_filename, render_csv, render_xlsx, report_table
from timeledger.infrastructure.export.csv_exporter import CSV_MEDIA_TYPE
from timeledger.infrastructure.export.xlsx_exporter import XLSX_MEDIA_TYPE

logger = logging.getLogger(__name__)


def report_period(year: int, month: Optional[int] = None) -> ReportPeriod:
    if month is None:
        return ReportPeriod.yearly(year)
    return ReportPeriod.monthly(year, month)


class _ReportBase(AuthorizedUseCase):
    """Shared loading for the admin-only reports."""

    def __init__(
        self,
        loader: EntryLoader,
        directory_repository: DirectoryRepository,
        aggregation: Optional[AggregationEngine] = None
    ):
        super().__init__()
        self.loader = loader
        self.directory_repository = directory_repository
        self.aggregation = aggregation or AggregationEngine()

    async def _check_authorization(self, request) -> None:
        self._require_role(UserRole.ADMIN.value)

    async def _build(
        self,
        kind: ReportKind,
        year: int,
        month: Optional[int],
        search: Optional[str]
    ) -> ReportResult:
        period = report_period(year, month)
        entries = await self.loader.load(month=month, year=year, all_users=True)
        directory = await self.directory_repository.load_directory()
        return self.aggregation.build(kind, entries, directory, period, search)


class BuildReportUseCase(_ReportBase, QueryUseCase[ReportRequestDTO, ReportResponseDTO]):
    """Use case for the client, team and project rollups."""

    def __init__(
        self,
        loader: EntryLoader,
        directory_repository: DirectoryRepository,
        aggregation: Optional[AggregationEngine] = None,
        converter: Optional[UnitConverter] = None
    ):
        super().__init__(loader, directory_repository, aggregation)
        self.converter = converter or UnitConverter()

    async def _execute_business_logic(self, request: ReportRequestDTO) -> ReportResponseDTO:
        unit = self.converter.parse_unit(request.unit)
        result = await self._build(request.kind, request.year, request.month, request.search)
        return ReportResponseDTO.from_domain(result, self.converter, unit)


class ExportReportUseCase(_ReportBase, QueryUseCase[ExportRequestDTO, ExportFile]):
    """Use case for downloading a report as CSV or XLSX."""

    async def _execute_business_logic(self, request: ExportRequestDTO) -> ExportFile:
        kind = ExportKind(request.kind)
        report_kind = ReportKind.TEAM if kind == ExportKind.TEAM else ReportKind.CLIENTS
        search = None if kind == ExportKind.DETAILS else request.search

        result = await self._build(report_kind, request.year, request.month, search)
        columns, rows = report_table(kind.value, result)

        if ExportFormat(request.format) == ExportFormat.XLSX:
            content, media_type, extension = render_xlsx(rows, columns), XLSX_MEDIA_TYPE, "xlsx"
        else:
            content, media_type, extension = render_csv(rows, columns), CSV_MEDIA_TYPE, "csv"

        logger.info(f"Exported {len(rows)} {kind.value} row(s) as {extension}")
        return ExportFile(
            filename=export_filename(kind.value, result.period, extension),
            media_type=media_type,
            content=content,
        )


class DashboardUseCase(AuthorizedUseCase, QueryUseCase[DashboardRequestDTO, DashboardResponseDTO]):
    """
    Use case for the dashboard KPIs.
    Collaborators see their own hours; admins may ask for anyone's or everyone's.
    """

    def __init__(
        self,
        loader: EntryLoader,
        directory_repository: DirectoryRepository,
        aggregation: Optional[AggregationEngine] = None,
        converter: Optional[UnitConverter] = None,
        window_days: int = 14,
        trend_days: int = 7
    ):
        super().__init__()
        self.loader = loader
        self.directory_repository = directory_repository
        self.aggregation = aggregation or AggregationEngine()
        self.converter = converter or UnitConverter()
        self.window_days = window_days
        self.trend_days = trend_days

    async def _check_authorization(self, request: DashboardRequestDTO) -> None:
        if request.all_users:
            self._require_role(UserRole.ADMIN.value)
        else:
            self._employee_for(request.employee_id)

    async def _execute_business_logic(self, request: DashboardRequestDTO) -> DashboardResponseDTO:
        today = request.today or date.today()
        unit = self.converter.parse_unit(request.unit)
        employee_id = None if request.all_users else self._employee_for(request.employee_id)

        entries: List[ClassifiedEntry] = []
        for year, month in self._months_in_window(today):
            entries.extend(
                await self.loader.load(
                    employee_id=employee_id, month=month, year=year, all_users=request.all_users
                )
            )

        directory = await self.directory_repository.load_directory()
        summary = self.aggregation.dashboard(
            entries, directory, today,
            trend_days=self.trend_days,
            window_days=self.window_days,
        )
        return DashboardResponseDTO.from_domain(summary, self.converter, unit)

    def _months_in_window(self, today: date) -> List[Tuple[int, int]]:
        first = today - timedelta(days=max(self.window_days, self.trend_days) - 1)
        months: List[Tuple[int, int]] = []
        seen: Set[Tuple[int, int]] = set()
        day = first
        while day <= today:
            key = (day.year, day.month)
            if key not in seen:
                seen.add(key)
                months.append(key)
            day += timedelta(days=1)
        return months
