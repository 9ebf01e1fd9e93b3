"""
Unit tests for report export shaping and rendering.
"""

import io
from datetime import date

from openpyxl import load_workbook

from timeledger.domain.models.report import DetailRow, ReportKind, ReportNode, ReportPeriod, ReportResult
from timeledger.infrastructure.export import export_filename, render_csv, render_xlsx, report_table


class TestReportTable:
    """Test cases for flattening reports into export rows."""

    def setup_method(self):
        self.result = ReportResult(
            kind=ReportKind.CLIENTS,
            period=ReportPeriod.monthly(2024, 1),
            nodes=[
                ReportNode(key="10", label="Acme", total_hours=12, attributes={"projects_count": 2}),
                ReportNode(key="unknown", label="Unknown", total_hours=1),
            ],
            detail_rows=[DetailRow(date=date(2024, 1, 3), user="Alice", client="Acme", project="Website", hours=5)],
        )

    def test_clients_table(self):
        """Test one row per client with its project count."""
        columns, rows = report_table("clients", self.result)

        assert list(columns) == ["Client", "Total Hours", "Active Projects"]
        assert rows == [
            {"Client": "Acme", "Total Hours": 12, "Active Projects": 2},
            {"Client": "Unknown", "Total Hours": 1, "Active Projects": 0},
        ]

    def test_team_table(self):
        """Test one row per user with name and email."""
        self.result.nodes = [ReportNode(key="2", label="Alice", total_hours=8, attributes={"email": "a@x.io"})]

        columns, rows = report_table("team", self.result)

        assert list(columns) == ["Name", "Email", "Total Hours"]
        assert rows == [{"Name": "Alice", "Email": "a@x.io", "Total Hours": 8}]

    def test_details_table(self):
        """Test detail rows use ISO dates."""
        columns, rows = report_table("details", self.result)

        assert list(columns) == ["Date", "User", "Client", "Project", "Hours"]
        assert rows[0]["Date"] == "2024-01-03"


class TestExportFilename:
    """Test cases for export file names."""

    def test_monthly(self):
        assert export_filename("clients", ReportPeriod.monthly(2024, 3), "csv") == "report_clients_2024-03.csv"

    def test_yearly(self):
        assert export_filename("details", ReportPeriod.yearly(2023), "xlsx") == "report_details_2023.xlsx"


class TestRenderers:
    """Test cases for the CSV and XLSX renderers."""

    def test_csv_header_and_extras(self):
        """Test the header row and that unknown keys are dropped."""
        content = render_csv([{"A": 1, "B": "x", "C": "ignored"}], ["A", "B"])

        assert content.decode("utf-8").splitlines() == ["A,B", "1,x"]

    def test_csv_empty(self):
        """Test an empty table still has its header."""
        assert render_csv([], ["A"]).decode("utf-8").strip() == "A"

    def test_xlsx(self):
        """Test the workbook holds a bold header and the rows."""
        content = render_xlsx([{"A": 1, "B": "x"}, {"A": 2}], ["A", "B"])

        sheet = load_workbook(io.BytesIO(content)).active
        assert sheet.title == "Report"
        assert [[c.value for c in row] for row in sheet.iter_rows()] == [["A", "B"], [1, "x"], [2, None]]
        assert sheet["A1"].font.bold is True
