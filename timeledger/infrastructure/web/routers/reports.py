"""
Reports router.
Serves rollup reports, dashboard KPIs and CSV/XLSX exports.
"""

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import Response

from timeledger.application.entry_loader import EntryLoader
from timeledger.application.dto.report_dto import (
    DashboardRequestDTO,
    DashboardResponseDTO,
    ExportFormat,
    ExportKind,
    ExportRequestDTO,
    ReportRequestDTO,
    ReportResponseDTO,
)
from timeledger.application.use_cases.report_use_cases import (
    BuildReportUseCase,
    DashboardUseCase,
    ExportReportUseCase,
)
from timeledger.config import settings
from timeledger.domain.models.report import ReportKind
from timeledger.domain.services.unit_converter import DisplayUnit
from timeledger.infrastructure.auth import CurrentUser, get_current_user
from timeledger.infrastructure.repositories import SQLAlchemyDirectoryRepository
from timeledger.infrastructure.web.dependencies import (
    aggregation,
    converter,
    get_directory_repository,
    get_entry_loader,
)
from timeledger.infrastructure.web.middleware.error_handler import build_request, unwrap


router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponseDTO)
async def dashboard(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    loader: Annotated[EntryLoader, Depends(get_entry_loader)],
    directory: Annotated[SQLAlchemyDirectoryRepository, Depends(get_directory_repository)],
    today: Optional[date] = Query(None, description="Last day of the window, defaults to today"),
    employee_id: Optional[int] = Query(None, gt=0),
    all_users: bool = Query(False),
    unit: DisplayUnit = Query(DisplayUnit(settings.default_display_unit))
):
    """
    Dashboard KPIs over the recent window.

    - **all_users**: Everyone's hours (admins only)
    - **unit**: hours or days
    """
    request = build_request(
        DashboardRequestDTO, today=today, employee_id=employee_id, all_users=all_users, unit=unit
    )
    use_case = DashboardUseCase(
        loader,
        directory,
        aggregation=aggregation,
        converter=converter,
        window_days=settings.dashboard_window_days,
        trend_days=settings.dashboard_trend_days,
    ).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))


@router.get("/{kind}/export")
async def export_report(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    loader: Annotated[EntryLoader, Depends(get_entry_loader)],
    directory: Annotated[SQLAlchemyDirectoryRepository, Depends(get_directory_repository)],
    kind: ExportKind = Path(description="clients, team or details"),
    year: int = Query(..., ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    format: ExportFormat = Query(ExportFormat.CSV),
    search: Optional[str] = Query(None, max_length=255)
):
    """
    Download a report as CSV or XLSX (admins only).

    - **kind**: clients, team or details
    - **format**: csv or xlsx
    """
    request = build_request(
        ExportRequestDTO, kind=kind, year=year, month=month, format=format, search=search
    )
    use_case = ExportReportUseCase(loader, directory, aggregation).set_current_user(user.id, user.roles)
    export = unwrap(await use_case.execute(request))
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/{kind}", response_model=ReportResponseDTO)
async def build_report(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    loader: Annotated[EntryLoader, Depends(get_entry_loader)],
    directory: Annotated[SQLAlchemyDirectoryRepository, Depends(get_directory_repository)],
    kind: ReportKind = Path(description="clients, team or projects"),
    year: int = Query(..., ge=1900, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    search: Optional[str] = Query(None, max_length=255),
    unit: DisplayUnit = Query(DisplayUnit(settings.default_display_unit))
):
    """
    Rollup report with detail rows (admins only).

    - **kind**: clients, team or projects
    - **year** / **month**: Period, whole year when month is omitted
    - **search**: Filter top-level groups by name (and email for team)
    - **unit**: hours or days for display values
    """
    request = build_request(
        ReportRequestDTO, kind=kind, year=year, month=month, search=search, unit=unit
    )
    use_case = BuildReportUseCase(
        loader, directory, aggregation=aggregation, converter=converter
    ).set_current_user(user.id, user.roles)
    return unwrap(await use_case.execute(request))
