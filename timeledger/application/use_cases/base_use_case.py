"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass
from datetime import datetime

from timeledger.application.cache import EntryCache
from timeledger.domain.models.base import DomainException, ValidationError, BusinessRuleViolation
from timeledger.domain.models.directory import UserRole

logger = logging.getLogger(__name__)


T = TypeVar('T')
R = TypeVar('R')


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, DomainException):
            result = cls.error_result(exc.message, exc.code)
            if isinstance(exc, ValidationError) and exc.field:
                result.metadata = {"field": exc.field}
            return result
        return cls.error_result(str(exc) or type(exc).__name__, "UNKNOWN_ERROR")


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """

    def __init__(self):
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case, turning domain errors into an error result.
        """
        self.execution_start = datetime.utcnow()

        try:
            # Validate input
            await self._validate_request(request)

            # Execute business logic
            result = await self._execute_business_logic(request)

            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except Exception as exc:
            self.execution_end = datetime.utcnow()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            if isinstance(exc, DomainException):
                logger.info(f"{type(self).__name__} failed: {exc.code}: {exc.message}")
            else:
                logger.exception(f"{type(self).__name__} failed unexpectedly")

            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                **(error_result.metadata or {}),
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }

            return error_result

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if request is None:
            raise ValidationError("Request is required")

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    """
    pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Invalidates the entry cache once a command has changed stored data.
    """

    def __init__(self):
        super().__init__()
        self.cache: Optional[EntryCache] = None
        self.changed = False

    async def _execute_business_logic(self, request: T) -> R:
        self.changed = False
        try:
            return await self._execute_command_logic(request)
        finally:
            if self.changed:
                await self._invalidate_cache()

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    async def _invalidate_cache(self) -> None:
        if self.cache is not None:
            await self.cache.invalidate()


# Authorization mixin
class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases that require authorization.
    """

    def __init__(self):
        super().__init__()
        self.current_user_id: Optional[int] = None
        self.current_user_roles: List[str] = []

    def set_current_user(self, user_id: int, roles: List[str]):
        """Set the current user context."""
        self.current_user_id = user_id
        self.current_user_roles = list(roles)
        return self

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN.value in self.current_user_roles

    async def _validate_request(self, request: T) -> None:
        """Validate request with authorization check."""
        await super()._validate_request(request)

        if not self.current_user_id:
            raise ValidationError("User authentication required")

        await self._check_authorization(request)

    async def _check_authorization(self, request: T) -> None:
        """Check if the current user is authorized. Override in subclasses."""
        pass

    def _require_role(self, required_role: str) -> None:
        """Check if user has required role."""
        if required_role not in self.current_user_roles:
            raise BusinessRuleViolation(f"Role '{required_role}' required")

    def _require_owner_or_role(self, resource_owner_id: Optional[int], required_role: str) -> None:
        """Check if user is owner or has required role."""
        if self.current_user_id != resource_owner_id and required_role not in self.current_user_roles:
            raise BusinessRuleViolation("Insufficient permissions")

    def _employee_for(self, requested_id: Optional[int]) -> int:
        """The employee a request targets: the one asked for, else the caller."""
        employee_id = requested_id or self.current_user_id
        self._require_owner_or_role(employee_id, UserRole.ADMIN.value)
        return employee_id
