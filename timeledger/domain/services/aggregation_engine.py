"""Aggregation engine for reports and dashboards.
Rolls classified entries into client, team and project trees.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from timeledger.domain.models.classified_entry import ClassifiedEntry, EntryType
from timeledger.domain.models.directory import DEFAULT_PROJECT_COLOR, Directory
from timeledger.domain.models.report import (
    DashboardSummary,
    DetailRow,
    ReportKind,
    ReportNode,
    ReportPeriod,
    ReportResult,
)

logger = logging.getLogger(__name__)


UNKNOWN_LABEL = "Unknown"
UNKNOWN_KEY = "unknown"


class AggregationEngine:
    """
    Domain service building rollup trees from classified entries.

    All sums are raw hours. Nodes at every level are ordered by descending
    hours; ties keep the order in which they were first seen. Percentages are
    stored unrounded, relative to the parent node (top level: grand total).
    Foreign keys missing from the directory get placeholder labels.
    """

    def client_report(
        self,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        period: ReportPeriod,
        search: Optional[str] = None
    ) -> ReportResult:
        """Client -> project -> user rollup of work hours."""
        work = self._work_in_period(entries, period)
        root = ReportNode(key="all", label="All")

        for entry in work:
            client_key, client_label, client_id = self._client_of(directory, entry.project_id)
            client = root.child(
                client_key,
                client_label,
                client_id=client_id,
                projects_count=self._projects_count(directory, client_id),
            )
            project_name, color = self._project_of(directory, entry.project_id)
            project = client.child(
                self._key(entry.project_id), project_name,
                project_id=entry.project_id, color=color,
            )
            user_name, email = self._user_of(directory, entry.user_id)
            user = project.child(self._key(entry.user_id), user_name, user_id=entry.user_id, email=email)

            for node in (root, client, project, user):
                node.total_hours += entry.hours

        return self._result(ReportKind.CLIENTS, period, root, work, directory, search)

    def team_report(
        self,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        period: ReportPeriod,
        search: Optional[str] = None
    ) -> ReportResult:
        """
        User -> project rollup of work hours.

        Leave is kept out of project attribution and counted on the user's
        vacation_days, sick_days and permit_hours attributes. Users without
        work hours in the period are left out.
        """
        in_period = [entry for entry in entries if period.contains(entry.date)]
        root = ReportNode(key="all", label="All")

        for entry in in_period:
            user_name, email = self._user_of(directory, entry.user_id)
            user = root.child(
                self._key(entry.user_id), user_name,
                user_id=entry.user_id, email=email,
                vacation_days=0, sick_days=0, permit_hours=0.0,
            )

            if entry.entry_type == EntryType.VACATION:
                user.attributes["vacation_days"] += 1
            elif entry.entry_type == EntryType.SICK_LEAVE:
                user.attributes["sick_days"] += 1
            elif entry.entry_type == EntryType.PERMIT:
                user.attributes["permit_hours"] += entry.permits_hours
            else:
                project_name, color = self._project_of(directory, entry.project_id)
                project = user.child(
                    self._key(entry.project_id), project_name,
                    project_id=entry.project_id, color=color,
                )
                project.total_hours += entry.hours
                user.total_hours += entry.hours
                root.total_hours += entry.hours

        root.children = {
            key: node for key, node in root.children.items() if node.total_hours > 0
        }

        work = [entry for entry in in_period if entry.is_work and entry.hours > 0]
        return self._result(
            ReportKind.TEAM, period, root, work, directory, search,
            matches=lambda node, query: query in node.label.lower()
            or query in str(node.attributes.get("email", "")).lower(),
        )

    def project_report(
        self,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        period: ReportPeriod,
        search: Optional[str] = None
    ) -> ReportResult:
        """Project -> user rollup of work hours, labelled with each project's client."""
        work = self._work_in_period(entries, period)
        root = ReportNode(key="all", label="All")

        for entry in work:
            project_name, color = self._project_of(directory, entry.project_id)
            _, client_label, client_id = self._client_of(directory, entry.project_id)
            project = root.child(
                self._key(entry.project_id), project_name,
                project_id=entry.project_id, color=color,
                client=client_label, client_id=client_id,
            )
            user_name, email = self._user_of(directory, entry.user_id)
            user = project.child(self._key(entry.user_id), user_name, user_id=entry.user_id, email=email)

            for node in (root, project, user):
                node.total_hours += entry.hours

        return self._result(ReportKind.PROJECTS, period, root, work, directory, search)

    def build(
        self,
        kind: ReportKind,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        period: ReportPeriod,
        search: Optional[str] = None
    ) -> ReportResult:
        builders = {
            ReportKind.CLIENTS: self.client_report,
            ReportKind.TEAM: self.team_report,
            ReportKind.PROJECTS: self.project_report,
        }
        return builders[ReportKind(kind)](entries, directory, period, search)

    def detail_rows(
        self,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        period: ReportPeriod
    ) -> List[DetailRow]:
        return self._detail_rows(self._work_in_period(entries, period), directory)

    def dashboard(
        self,
        entries: Iterable[ClassifiedEntry],
        directory: Directory,
        today: date,
        trend_days: int = 7,
        window_days: int = 14
    ) -> DashboardSummary:
        """
        KPIs over the last window_days days ending today.

        The daily trend covers the last trend_days days, oldest first, with
        zero-hour days included.
        """
        window = ReportPeriod(today - timedelta(days=window_days - 1), today)
        work = self._work_in_period(entries, window)

        total = sum(entry.hours for entry in work)

        by_project: Dict[str, Dict] = {}
        for entry in work:
            name, color = self._project_of(directory, entry.project_id)
            bucket = by_project.setdefault(
                self._key(entry.project_id),
                {"project_id": entry.project_id, "name": name, "color": color, "hours": 0.0},
            )
            bucket["hours"] += entry.hours

        hours_by_day: Dict[date, float] = {}
        for entry in work:
            hours_by_day[entry.date] = hours_by_day.get(entry.date, 0.0) + entry.hours

        trend = []
        for offset in range(trend_days - 1, -1, -1):
            day = today - timedelta(days=offset)
            trend.append({"date": day, "hours": hours_by_day.get(day, 0.0)})

        return DashboardSummary(
            total_hours=total,
            active_project_count=len({entry.project_id for entry in work if entry.project_id is not None}),
            average_daily_hours=total / window_days if window_days else 0.0,
            hours_by_project=list(by_project.values()),
            daily_trend=trend,
        )

    def _result(
        self,
        kind: ReportKind,
        period: ReportPeriod,
        root: ReportNode,
        work: List[ClassifiedEntry],
        directory: Directory,
        search: Optional[str],
        matches: Optional[Callable[[ReportNode, str], bool]] = None
    ) -> ReportResult:
        nodes = self._finalize(root)

        if search and search.strip():
            query = search.strip().lower()
            matches = matches or (lambda node, q: q in node.label.lower())
            nodes = [node for node in nodes if matches(node, query)]

        logger.debug(f"Built {kind.value} report for {period.start}..{period.end}: {len(nodes)} group(s)")
        return ReportResult(
            kind=kind,
            period=period,
            nodes=nodes,
            detail_rows=self._detail_rows(work, directory),
            total_hours=root.total_hours,
        )

    def _finalize(self, parent: ReportNode) -> List[ReportNode]:
        """Sort children by descending hours (stable) and set percentages, recursively."""
        ordered = sorted(parent.children.values(), key=lambda node: -node.total_hours)
        for node in ordered:
            node.percentage = (
                node.total_hours / parent.total_hours * 100 if parent.total_hours else 0.0
            )
            node.children = {child.key: child for child in self._finalize(node)}
        parent.children = {node.key: node for node in ordered}
        return ordered

    def _detail_rows(self, work: List[ClassifiedEntry], directory: Directory) -> List[DetailRow]:
        rows = []
        for entry in sorted(work, key=lambda e: e.date):
            _, client_label, _ = self._client_of(directory, entry.project_id)
            project_name, _ = self._project_of(directory, entry.project_id)
            user_name, _ = self._user_of(directory, entry.user_id)
            rows.append(
                DetailRow(
                    date=entry.date,
                    user=user_name,
                    client=client_label,
                    project=project_name,
                    hours=entry.hours,
                    user_id=entry.user_id,
                    project_id=entry.project_id,
                )
            )
        return rows

    @staticmethod
    def _work_in_period(entries: Iterable[ClassifiedEntry], period: ReportPeriod) -> List[ClassifiedEntry]:
        # zero-hour WORK rows are classifier placeholders, not booked time
        return [
            entry for entry in entries
            if entry.is_work and entry.hours > 0 and period.contains(entry.date)
        ]

    @staticmethod
    def _key(value) -> str:
        return UNKNOWN_KEY if value is None else str(value)

    @staticmethod
    def _project_of(directory: Directory, project_id: Optional[int]) -> Tuple[str, str]:
        project = directory.projects.get(project_id)
        if project is None:
            return UNKNOWN_LABEL, DEFAULT_PROJECT_COLOR
        return project.name, project.color or DEFAULT_PROJECT_COLOR

    @staticmethod
    def _client_of(directory: Directory, project_id: Optional[int]) -> Tuple[str, str, Optional[int]]:
        project = directory.projects.get(project_id)
        if project is None or project.client_id is None:
            return UNKNOWN_KEY, UNKNOWN_LABEL, None
        client = directory.clients.get(project.client_id)
        label = client.name if client else f"Client {project.client_id}"
        return str(project.client_id), label, project.client_id

    @staticmethod
    def _user_of(directory: Directory, user_id: Optional[int]) -> Tuple[str, str]:
        user = directory.users.get(user_id)
        if user is None:
            return UNKNOWN_LABEL, ""
        return user.name, user.email

    @staticmethod
    def _projects_count(directory: Directory, client_id: Optional[int]) -> int:
        if client_id is None:
            return 0
        return sum(
            1 for project in directory.projects.values()
            if project.client_id == client_id and project.active
        )
