"""
Report exports: tabular shaping plus CSV and XLSX rendering.
"""

from .tables import ExportFile, TABLE_COLUMNS, export_filename, report_table
from .csv_exporter import render_csv
from .xlsx_exporter import render_xlsx

__all__ = [
    "ExportFile",
    "TABLE_COLUMNS",
    "export_filename",
    "report_table",
    "render_csv",
    "render_xlsx",
]
