"""
In-memory repositories and a small directory used across the test suite.
"""

import copy
from calendar import monthrange
from datetime import date
from typing import Any, Dict, List, Optional, Set

from timeledger.domain.models.base import NotFoundError, PersistenceError
from timeledger.domain.models.day_ledger import DayLedger
from timeledger.domain.models.directory import ClientInfo, ProjectInfo, UserInfo, UserRole
from timeledger.domain.repositories.day_ledger_repository import DayLedgerRepository
from timeledger.domain.repositories.directory_repository import DirectoryRepository


class InMemoryDayLedgerRepository(DayLedgerRepository):
    """Dict-backed ledger store handing out copies, like a real backend."""

    def __init__(self):
        self.ledgers: Dict[int, DayLedger] = {}
        self.next_ledger_id = 1
        self.next_segment_id = 1
        self.failing_days: Set[date] = set()
        self.list_calls = 0
        self.write_calls = 0

    def _check(self, day: Optional[date]) -> None:
        if day in self.failing_days:
            raise PersistenceError(f"Storage unavailable for {day}")

    def _assign_segment_ids(self, ledger: DayLedger) -> None:
        for segment in ledger.worked_hours:
            if segment.id is None:
                segment.id = self.next_segment_id
                self.next_segment_id += 1

    async def get_day_ledger(self, employee_id: int, day: date) -> Optional[DayLedger]:
        for ledger in self.ledgers.values():
            if ledger.employee_id == employee_id and ledger.day == day:
                return copy.deepcopy(ledger)
        return None

    async def create_day_ledger(self, ledger: DayLedger) -> DayLedger:
        self._check(ledger.day)
        self.write_calls += 1
        stored = copy.deepcopy(ledger)
        stored.id = self.next_ledger_id
        self.next_ledger_id += 1
        self._assign_segment_ids(stored)
        self.ledgers[stored.id] = stored
        return copy.deepcopy(stored)

    async def update_day_ledger(self, ledger: DayLedger) -> DayLedger:
        self._check(ledger.day)
        if ledger.id not in self.ledgers:
            raise NotFoundError("DayLedger", ledger.id)
        self.write_calls += 1
        stored = copy.deepcopy(ledger)
        self._assign_segment_ids(stored)
        self.ledgers[stored.id] = stored
        return copy.deepcopy(stored)

    async def delete_day_ledger(self, ledger_id: int) -> bool:
        self.write_calls += 1
        return self.ledgers.pop(ledger_id, None) is not None

    async def delete_work_segment(self, segment_id: int) -> bool:
        self.write_calls += 1
        for ledger in self.ledgers.values():
            segment = ledger.find_segment(segment_id)
            if segment is not None:
                ledger.worked_hours.remove(segment)
                return True
        return False

    async def list_rows(
        self,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        all_users: bool = False
    ) -> List[Dict[str, Any]]:
        self.list_calls += 1
        rows = []
        for ledger in sorted(self.ledgers.values(), key=lambda l: (l.day, l.id)):
            if employee_id is not None and not all_users and ledger.employee_id != employee_id:
                continue
            if year is not None:
                if month is not None:
                    start, end = date(year, month, 1), date(year, month, monthrange(year, month)[1])
                else:
                    start, end = date(year, 1, 1), date(year, 12, 31)
                if not start <= ledger.day <= end:
                    continue
            rows.append({
                "id": ledger.id,
                "employee": ledger.employee_id,
                "day": ledger.day.isoformat(),
                "permits_hours": ledger.permits_hours,
                "illness": ledger.illness,
                "holiday": ledger.holiday,
                "worked_hours": [
                    {"id": s.id, "project": s.project_id, "customer": s.customer_id, "hours": s.hours}
                    for s in ledger.worked_hours
                ],
            })
        return rows

    def only_ledger(self) -> DayLedger:
        assert len(self.ledgers) == 1
        return next(iter(self.ledgers.values()))


class InMemoryDirectoryRepository(DirectoryRepository):

    def __init__(self, projects=(), clients=(), users=()):
        self.projects = {p.id: p for p in projects}
        self.clients = {c.id: c for c in clients}
        self.users = {u.id: u for u in users}

    async def get_project(self, project_id: int) -> Optional[ProjectInfo]:
        return self.projects.get(project_id)

    async def get_client(self, client_id: int) -> Optional[ClientInfo]:
        return self.clients.get(client_id)

    async def get_user(self, user_id: int) -> Optional[UserInfo]:
        return self.users.get(user_id)

    async def list_projects(self, active_only: bool = False) -> List[ProjectInfo]:
        return [p for p in self.projects.values() if p.active or not active_only]

    async def list_clients(self) -> List[ClientInfo]:
        return list(self.clients.values())

    async def list_users(self) -> List[UserInfo]:
        return list(self.users.values())


ADMIN_ID = 1
ALICE_ID = 2
BOB_ID = 3

ACME = ClientInfo(id=10, name="Acme")
GLOBEX = ClientInfo(id=20, name="Globex")

WEBSITE = ProjectInfo(id=100, name="Website", client_id=ACME.id, color="#6366f1")
MOBILE = ProjectInfo(id=101, name="Mobile", client_id=ACME.id, color="#10b981")
PLATFORM = ProjectInfo(id=200, name="Platform", client_id=GLOBEX.id, color="#f59e0b")

ADMIN = UserInfo(id=ADMIN_ID, name="Ada Admin", email="ada@example.com", role=UserRole.ADMIN)
ALICE = UserInfo(id=ALICE_ID, name="Alice", email="alice@example.com")
BOB = UserInfo(id=BOB_ID, name="Bob", email="bob@example.com")


def seeded_directory() -> InMemoryDirectoryRepository:
    return InMemoryDirectoryRepository(
        projects=[WEBSITE, MOBILE, PLATFORM],
        clients=[ACME, GLOBEX],
        users=[ADMIN, ALICE, BOB],
    )
