"""
Directory mapper for converting client, project and employee rows to read models.
"""

from timeledger.domain.models.directory import DEFAULT_PROJECT_COLOR, ClientInfo, ProjectInfo, UserInfo, UserRole
from timeledger.infrastructure.db.models import ClientModel, EmployeeModel, ProjectModel


class DirectoryMapper:

    def client_to_domain(self, model: ClientModel) -> ClientInfo:
        return ClientInfo(id=model.id, name=model.name)

    def project_to_domain(self, model: ProjectModel) -> ProjectInfo:
        return ProjectInfo(
            id=model.id,
            name=model.name,
            client_id=model.client_id,
            color=model.color or DEFAULT_PROJECT_COLOR,
            active=bool(model.active),
        )

    def user_to_domain(self, model: EmployeeModel) -> UserInfo:
        return UserInfo(
            id=model.id,
            name=model.name,
            email=model.email or "",
            role=UserRole(model.role) if model.role else UserRole.COLLABORATOR,
        )
