"""
Unit tests for the report, export and dashboard use cases.
"""

import csv
import io
import pytest
from datetime import date

from openpyxl import load_workbook

from timeledger.application.entry_loader import EntryLoader
from timeledger.application.dto.report_dto import DashboardRequestDTO, ExportRequestDTO, ReportRequestDTO
from timeledger.application.use_cases.report_use_cases import (
    BuildReportUseCase, DashboardUseCase, ExportReportUseCase, report_period
)
from timeledger.domain.services.reconciliation_engine import ReconciliationEngine

from fakes import ADMIN_ID, ALICE_ID, BOB_ID, MOBILE, PLATFORM, WEBSITE, InMemoryDayLedgerRepository, seeded_directory


ADMIN_ROLES = ["admin"]
COLLABORATOR_ROLES = ["collaborator"]


class ReportTestBase:

    def setup_method(self):
        self.repository = InMemoryDayLedgerRepository()
        self.engine = ReconciliationEngine(self.repository)
        self.loader = EntryLoader(self.repository)
        self.directory = seeded_directory()

    async def seed(self):
        await self.engine.add_entry(ALICE_ID, date(2024, 1, 3), "WORK", project_id=WEBSITE.id, hours=5)
        await self.engine.add_entry(ALICE_ID, date(2024, 1, 3), "WORK", project_id=WEBSITE.id, hours=3)
        await self.engine.add_entry(ALICE_ID, date(2024, 1, 4), "VACATION")
        await self.engine.add_entry(BOB_ID, date(2024, 1, 5), "WORK", project_id=PLATFORM.id, hours=4)
        await self.engine.add_entry(BOB_ID, date(2024, 1, 8), "WORK", project_id=MOBILE.id, hours=4)
        await self.engine.add_entry(BOB_ID, date(2024, 2, 1), "WORK", project_id=PLATFORM.id, hours=6)


class TestBuildReportUseCase(ReportTestBase):
    """Test cases for BuildReportUseCase."""

    def use_case(self, user_id=ADMIN_ID, roles=ADMIN_ROLES):
        return BuildReportUseCase(self.loader, self.directory).set_current_user(user_id, roles)

    @pytest.mark.asyncio
    async def test_client_report(self):
        """Test the monthly client rollup."""
        await self.seed()

        result = await self.use_case().execute(ReportRequestDTO(kind="clients", year=2024, month=1))

        report = result.data
        assert report.period_start == date(2024, 1, 1)
        assert report.period_end == date(2024, 1, 31)
        assert report.total_hours == 16
        assert [(n.label, n.total_hours) for n in report.nodes] == [("Acme", 12), ("Globex", 4)]
        assert report.nodes[0].percentage == pytest.approx(75)
        assert report.total_display == "16.0 hours"
        assert len(report.detail_rows) == 4

    @pytest.mark.asyncio
    async def test_yearly_report_in_days(self):
        """Test a whole-year report with display values in days."""
        await self.seed()

        result = await self.use_case().execute(ReportRequestDTO(kind="team", year=2024, unit="days"))

        report = result.data
        assert report.total_hours == 22
        assert report.total_display == "2.8 days"
        alice = next(n for n in report.nodes if n.label == "Alice")
        assert alice.display_value == "1.0"
        assert alice.attributes["vacation_days"] == 1

    @pytest.mark.asyncio
    async def test_team_same_project_segments(self):
        """Test two segments on the same project show as 8h for the user."""
        await self.seed()

        result = await self.use_case().execute(ReportRequestDTO(kind="team", year=2024, month=1))

        alice = next(n for n in result.data.nodes if n.label == "Alice")
        assert alice.total_hours == 8
        assert alice.children[0].total_hours == 8

    @pytest.mark.asyncio
    async def test_search(self):
        """Test search narrows the top-level groups."""
        await self.seed()

        result = await self.use_case().execute(ReportRequestDTO(kind="projects", year=2024, month=1, search="mob"))

        assert [n.label for n in result.data.nodes] == ["Mobile"]

    @pytest.mark.asyncio
    async def test_admin_only(self):
        """Test collaborators cannot build reports."""
        result = await self.use_case(ALICE_ID, COLLABORATOR_ROLES).execute(
            ReportRequestDTO(kind="clients", year=2024, month=1)
        )

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    def test_report_period(self):
        """Test month and year periods."""
        assert report_period(2024, 2).end == date(2024, 2, 29)
        assert report_period(2024).start == date(2024, 1, 1)


class TestExportReportUseCase(ReportTestBase):
    """Test cases for ExportReportUseCase."""

    def use_case(self):
        return ExportReportUseCase(self.loader, self.directory).set_current_user(ADMIN_ID, ADMIN_ROLES)

    @pytest.mark.asyncio
    async def test_clients_csv(self):
        """Test the client summary as CSV."""
        await self.seed()

        result = await self.use_case().execute(ExportRequestDTO(kind="clients", year=2024, month=1))

        export = result.data
        assert export.filename == "report_clients_2024-01.csv"
        assert export.media_type.startswith("text/csv")
        rows = list(csv.DictReader(io.StringIO(export.content.decode("utf-8"))))
        assert [r["Client"] for r in rows] == ["Acme", "Globex"]
        assert rows[0]["Total Hours"] == "12.0"
        assert rows[0]["Active Projects"] == "2"

    @pytest.mark.asyncio
    async def test_details_csv(self):
        """Test raw detail rows ignore search and keep date order."""
        await self.seed()

        result = await self.use_case().execute(
            ExportRequestDTO(kind="details", year=2024, month=1, search="nothing matches")
        )

        rows = list(csv.DictReader(io.StringIO(result.data.content.decode("utf-8"))))
        assert [r["Date"] for r in rows] == ["2024-01-03", "2024-01-03", "2024-01-05", "2024-01-08"]
        assert rows[2] == {
            "Date": "2024-01-05", "User": "Bob", "Client": "Globex", "Project": "Platform", "Hours": "4.0"
        }

    @pytest.mark.asyncio
    async def test_team_xlsx(self):
        """Test the team summary as a workbook."""
        await self.seed()

        result = await self.use_case().execute(ExportRequestDTO(kind="team", year=2024, format="xlsx"))

        export = result.data
        assert export.filename == "report_team_2024.xlsx"
        sheet = load_workbook(io.BytesIO(export.content)).active
        values = [[cell.value for cell in row] for row in sheet.iter_rows()]
        assert values[0] == ["Name", "Email", "Total Hours"]
        assert values[1] == ["Bob", "bob@example.com", 14]
        assert values[2] == ["Alice", "alice@example.com", 8]


class TestDashboardUseCase(ReportTestBase):
    """Test cases for DashboardUseCase."""

    @pytest.mark.asyncio
    async def test_own_dashboard(self):
        """Test a collaborator's dashboard covers only their own hours."""
        await self.seed()

        result = await DashboardUseCase(self.loader, self.directory).set_current_user(
            BOB_ID, COLLABORATOR_ROLES
        ).execute(DashboardRequestDTO(today=date(2024, 2, 1)))

        dashboard = result.data
        assert dashboard.total_hours == 6
        assert dashboard.active_project_count == 1
        assert [p.hours for p in dashboard.daily_trend][-1] == 6
        assert len(dashboard.daily_trend) == 7

    @pytest.mark.asyncio
    async def test_window_spans_months(self):
        """Test a window crossing a month boundary loads both months."""
        await self.seed()
        await self.engine.add_entry(ALICE_ID, date(2024, 1, 29), "WORK", project_id=WEBSITE.id, hours=2)

        result = await DashboardUseCase(self.loader, self.directory).set_current_user(
            ADMIN_ID, ADMIN_ROLES
        ).execute(DashboardRequestDTO(today=date(2024, 2, 1), all_users=True, unit="days"))

        assert result.data.total_hours == 8
        assert result.data.total_display == "1.0 day"
        assert result.data.active_project_count == 2

    @pytest.mark.asyncio
    async def test_all_users_requires_admin(self):
        """Test everyone's dashboard is admin-only."""
        result = await DashboardUseCase(self.loader, self.directory).set_current_user(
            ALICE_ID, COLLABORATOR_ROLES
        ).execute(DashboardRequestDTO(all_users=True))

        assert result.error_code == "BUSINESS_RULE_VIOLATION"
