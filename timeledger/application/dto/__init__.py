"""
Data Transfer Objects for the application layer.
"""

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, PeriodRequestDTO
from .timesheet_dto import (
    AddEntryRequestDTO,
    UpdateSegmentRequestDTO,
    DeleteEntryRequestDTO,
    ListEntriesRequestDTO,
    ClassifiedEntryResponseDTO,
    EntryListResponseDTO,
    BatchFailureDTO,
    BatchResultDTO,
    DayLedgerResponseDTO,
    DeleteEntryResponseDTO,
)
from .report_dto import (
    ExportKind,
    ExportFormat,
    ReportRequestDTO,
    DashboardRequestDTO,
    ExportRequestDTO,
    ReportNodeDTO,
    DetailRowDTO,
    ReportResponseDTO,
    DashboardResponseDTO,
)

__all__ = [
    "BaseDTO",
    "RequestDTO",
    "ResponseDTO",
    "PeriodRequestDTO",
    "AddEntryRequestDTO",
    "UpdateSegmentRequestDTO",
    "DeleteEntryRequestDTO",
    "ListEntriesRequestDTO",
    "ClassifiedEntryResponseDTO",
    "EntryListResponseDTO",
    "BatchFailureDTO",
    "BatchResultDTO",
    "DayLedgerResponseDTO",
    "DeleteEntryResponseDTO",
    "ExportKind",
    "ExportFormat",
    "ReportRequestDTO",
    "DashboardRequestDTO",
    "ExportRequestDTO",
    "ReportNodeDTO",
    "DetailRowDTO",
    "ReportResponseDTO",
    "DashboardResponseDTO",
]
