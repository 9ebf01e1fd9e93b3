"""XLSX rendering for report exports."""

import io
from typing import Dict, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter


XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Report"


def render_xlsx(
    rows: Iterable[Dict[str, object]],
    fieldnames: Sequence[str],
    sheet_title: str = SHEET_TITLE
) -> bytes:
    """Render dict rows to a single-sheet workbook with a bold header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append(list(fieldnames))
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in rows:
        ws.append([(row or {}).get(name) for name in fieldnames])

    for index, name in enumerate(fieldnames, start=1):
        widest = max(
            (len(str(cell.value)) for cell in ws[get_column_letter(index)] if cell.value is not None),
            default=len(name),
        )
        ws.column_dimensions[get_column_letter(index)].width = min(widest + 2, 60)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
