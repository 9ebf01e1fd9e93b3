"""
Use cases for the application layer.
"""

from .base_use_case import (
    UseCaseResult,
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    AuthorizedUseCase,
)
from .timesheet_use_cases import (
    AddRecurringEntriesUseCase,
    UpdateSegmentUseCase,
    DeleteEntryUseCase,
    ListEntriesUseCase,
)
from .report_use_cases import (
    BuildReportUseCase,
    ExportReportUseCase,
    DashboardUseCase,
    report_period,
)

__all__ = [
    "UseCaseResult",
    "BaseUseCase",
    "QueryUseCase",
    "CommandUseCase",
    "AuthorizedUseCase",
    "AddRecurringEntriesUseCase",
    "UpdateSegmentUseCase",
    "DeleteEntryUseCase",
    "ListEntriesUseCase",
    "BuildReportUseCase",
    "ExportReportUseCase",
    "DashboardUseCase",
    "report_period",
]
