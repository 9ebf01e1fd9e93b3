"""
Directory repository implementation using SQLAlchemy.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timeledger.domain.models.base import PersistenceError
from timeledger.domain.models.directory import ClientInfo, ProjectInfo, UserInfo
from timeledger.domain.repositories.directory_repository import DirectoryRepository as DirectoryRepositoryInterface
from timeledger.infrastructure.db.models import ClientModel, EmployeeModel, ProjectModel
from timeledger.infrastructure.mappers.directory_mapper import DirectoryMapper


class SQLAlchemyDirectoryRepository(DirectoryRepositoryInterface):
    """SQLAlchemy implementation of the read-only directories."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = DirectoryMapper()

    async def get_project(self, project_id: int) -> Optional[ProjectInfo]:
        model = self._first(ProjectModel, project_id)
        return self.mapper.project_to_domain(model) if model else None

    async def get_client(self, client_id: int) -> Optional[ClientInfo]:
        model = self._first(ClientModel, client_id)
        return self.mapper.client_to_domain(model) if model else None

    async def get_user(self, user_id: int) -> Optional[UserInfo]:
        model = self._first(EmployeeModel, user_id)
        return self.mapper.user_to_domain(model) if model else None

    async def list_projects(self, active_only: bool = False) -> List[ProjectInfo]:
        query = self.session.query(ProjectModel)
        if active_only:
            query = query.filter(ProjectModel.active.is_(True))
        return [self.mapper.project_to_domain(model) for model in self._all(query.order_by(ProjectModel.id))]

    async def list_clients(self) -> List[ClientInfo]:
        query = self.session.query(ClientModel).order_by(ClientModel.id)
        return [self.mapper.client_to_domain(model) for model in self._all(query)]

    async def list_users(self) -> List[UserInfo]:
        query = self.session.query(EmployeeModel).order_by(EmployeeModel.id)
        return [self.mapper.user_to_domain(model) for model in self._all(query)]

    def _first(self, model_class, entity_id):
        try:
            return self.session.query(model_class).filter_by(id=entity_id).first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load {model_class.__tablename__}", e)

    @staticmethod
    def _all(query):
        try:
            return query.all()
        except SQLAlchemyError as e:
            raise PersistenceError("Failed to load directory", e)
