"""Directory repository interface.
Read-only access to projects, clients and users.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from timeledger.domain.models.directory import ClientInfo, Directory, ProjectInfo, UserInfo


class DirectoryRepository(ABC):
    """Repository interface for the read-only directories."""

    @abstractmethod
    async def get_project(self, project_id: int) -> Optional[ProjectInfo]:
        pass

    @abstractmethod
    async def get_client(self, client_id: int) -> Optional[ClientInfo]:
        pass

    @abstractmethod
    async def get_user(self, user_id: int) -> Optional[UserInfo]:
        pass

    @abstractmethod
    async def list_projects(self, active_only: bool = False) -> List[ProjectInfo]:
        pass

    @abstractmethod
    async def list_clients(self) -> List[ClientInfo]:
        pass

    @abstractmethod
    async def list_users(self) -> List[UserInfo]:
        pass

    async def load_directory(self) -> Directory:
        """Load every lookup table the aggregation engine needs."""
        return Directory.build(
            projects=await self.list_projects(),
            clients=await self.list_clients(),
            users=await self.list_users(),
        )
