"""Flattens reports into the rows written by the exporters."""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from timeledger.domain.models.report import DetailRow, ReportPeriod, ReportResult


TABLE_COLUMNS: Dict[str, Sequence[str]] = {
    "clients": ("Client", "Total Hours", "Active Projects"),
    "team": ("Name", "Email", "Total Hours"),
    "details": ("Date", "User", "Client", "Project", "Hours"),
}


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes


def export_filename(kind: str, period: ReportPeriod, extension: str) -> str:
    """report_<kind>_<yyyy-mm>.<ext> for a month, report_<kind>_<yyyy>.<ext> for a year."""
    same_month = (period.start.year, period.start.month) == (period.end.year, period.end.month)
    label = period.start.strftime("%Y-%m") if same_month else str(period.start.year)
    return f"report_{kind}_{label}.{extension}"


def report_table(kind: str, result: ReportResult) -> Tuple[Sequence[str], List[Dict[str, object]]]:
    columns = TABLE_COLUMNS[kind]

    if kind == "clients":
        rows = [
            {
                "Client": node.label,
                "Total Hours": node.total_hours,
                "Active Projects": node.attributes.get("projects_count", 0),
            }
            for node in result.nodes
        ]
    elif kind == "team":
        rows = [
            {
                "Name": node.label,
                "Email": node.attributes.get("email", ""),
                "Total Hours": node.total_hours,
            }
            for node in result.nodes
        ]
    else:
        rows = [_detail(row) for row in result.detail_rows]

    return columns, rows


def _detail(row: DetailRow) -> Dict[str, object]:
    return {
        "Date": row.date.isoformat(),
        "User": row.user,
        "Client": row.client,
        "Project": row.project,
        "Hours": row.hours,
    }
