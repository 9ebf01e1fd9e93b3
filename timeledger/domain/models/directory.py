"""
Read-only directory records: projects, clients and users.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Optional


DEFAULT_PROJECT_COLOR = "#cbd5e1"


class UserRole(str, Enum):
    """User roles."""
    ADMIN = "admin"
    COLLABORATOR = "collaborator"


@dataclass(frozen=True)
class ClientInfo:
    id: int
    name: str


@dataclass(frozen=True)
class ProjectInfo:
    id: int
    name: str
    client_id: Optional[int] = None
    color: str = DEFAULT_PROJECT_COLOR
    active: bool = True


@dataclass(frozen=True)
class UserInfo:
    id: int
    name: str
    email: str = ""
    role: UserRole = UserRole.COLLABORATOR

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass
class Directory:
    """
    Lookup tables used by the aggregation engine.
    Missing keys are resolved to placeholder labels by the caller.
    """

    projects: Dict[int, ProjectInfo] = field(default_factory=dict)
    clients: Dict[int, ClientInfo] = field(default_factory=dict)
    users: Dict[int, UserInfo] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        projects: Iterable[ProjectInfo] = (),
        clients: Iterable[ClientInfo] = (),
        users: Iterable[UserInfo] = (),
    ) -> "Directory":
        return cls(
            projects={p.id: p for p in projects},
            clients={c.id: c for c in clients},
            users={u.id: u for u in users},
        )
