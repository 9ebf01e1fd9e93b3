"""
Unit tests for bearer tokens and HTTP error mapping.
"""

import pytest
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException
from jose import jwt

from timeledger.application.dto.timesheet_dto import ListEntriesRequestDTO
from timeledger.application.use_cases.base_use_case import UseCaseResult
from timeledger.config import get_settings
from timeledger.domain.models.base import ValidationError
from timeledger.domain.models.directory import UserRole
from timeledger.infrastructure.auth.jwt_handler import JWTHandler
from timeledger.infrastructure.web.middleware.error_handler import build_request, status_for, unwrap


class TestJWTHandler:
    """Test cases for JWTHandler."""

    def setup_method(self):
        self.handler = JWTHandler()

    def test_round_trip(self):
        """Test an issued token resolves to its employee and role."""
        token = self.handler.create_access_token(7, UserRole.ADMIN)

        assert self.handler.get_user_id(token) == 7
        assert self.handler.get_user_role(token) == UserRole.ADMIN
        assert self.handler.get_user_id(f"Bearer {token}") == 7

    def test_role_defaults_to_collaborator(self):
        """Test tokens without a role claim are collaborators."""
        settings = get_settings()
        expires = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"sub": "3", "exp": expires}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        assert self.handler.get_user_role(token) == UserRole.COLLABORATOR

    def test_expired_token(self):
        """Test expired tokens are rejected."""
        token = self.handler.create_access_token(7, expires_minutes=-1)

        with pytest.raises(ValidationError, match="Invalid JWT token"):
            self.handler.verify_token(token)

    def test_wrong_secret(self):
        """Test tokens signed with another key are rejected."""
        expires = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"sub": "7", "exp": expires}, "another-secret", algorithm="HS256")

        with pytest.raises(ValidationError):
            self.handler.verify_token(token)

    def test_missing_subject(self):
        """Test tokens without a subject are rejected."""
        settings = get_settings()
        expires = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"exp": expires}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        with pytest.raises(ValidationError, match="sub claim"):
            self.handler.verify_token(token)

    def test_non_numeric_subject(self):
        """Test the subject must be an employee id."""
        settings = get_settings()
        expires = int((datetime.now(timezone.utc) + timedelta(minutes=5)).timestamp())
        token = jwt.encode({"sub": "ada", "exp": expires}, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

        with pytest.raises(ValidationError, match="employee id"):
            self.handler.get_user_id(token)


class TestErrorMapping:
    """Test cases for mapping results to HTTP errors."""

    @pytest.mark.parametrize("code,status", [
        ("VALIDATION_ERROR", 422),
        ("ENTITY_NOT_FOUND", 404),
        ("CONFLICT", 409),
        ("PERSISTENCE_ERROR", 503),
        ("BUSINESS_RULE_VIOLATION", 403),
        ("UNKNOWN_ERROR", 500),
    ])
    def test_status_for(self, code, status):
        assert status_for(code) == status

    def test_unwrap_success(self):
        """Test successful results yield their data."""
        assert unwrap(UseCaseResult.success_result({"ok": True})) == {"ok": True}

    def test_unwrap_error(self):
        """Test failed results raise with code and message."""
        with pytest.raises(HTTPException) as exc_info:
            unwrap(UseCaseResult.error_result("Project with id 9 not found", "ENTITY_NOT_FOUND"))

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == {
            "error_code": "ENTITY_NOT_FOUND", "message": "Project with id 9 not found"
        }

    def test_build_request_rejects_invalid_query(self):
        """Test invalid query parameters answer 422."""
        with pytest.raises(HTTPException) as exc_info:
            build_request(ListEntriesRequestDTO, month=3)

        assert exc_info.value.status_code == 422
