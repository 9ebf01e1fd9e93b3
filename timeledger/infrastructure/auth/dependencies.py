"""
Authentication dependencies for FastAPI.
"""

from dataclasses import dataclass
from typing import Annotated, List, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from timeledger.domain.models.base import ValidationError
from timeledger.domain.models.directory import UserRole
from timeledger.infrastructure.auth.jwt_handler import JWTHandler


# Security scheme
security = HTTPBearer(auto_error=False)

jwt_handler = JWTHandler()


@dataclass(frozen=True)
class CurrentUser:
    id: int
    role: UserRole

    @property
    def roles(self) -> List[str]:
        return [self.role.value]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return jwt_handler


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> CurrentUser:
    """
    FastAPI dependency resolving the authenticated employee.

    Raises:
        HTTPException: 401 if the token is missing or invalid
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        token = credentials.credentials
        return CurrentUser(id=handler.get_user_id(token), role=handler.get_user_role(token))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )
