"""
JWT token handler.
Validates bearer tokens and extracts the employee id and role.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from timeledger.config import Settings, get_settings
from timeledger.domain.models.base import ValidationError
from timeledger.domain.models.directory import UserRole


class JWTHandler:
    """Handles JWT token validation and user extraction."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.jwt_secret = self.settings.jwt_secret_key
        self.jwt_algorithm = self.settings.jwt_algorithm

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a JWT token.

        Args:
            token: JWT token string

        Returns:
            Dict containing token payload

        Raises:
            ValidationError: If token is invalid, expired or missing claims
        """
        # Remove 'Bearer ' prefix if present
        if token.startswith('Bearer '):
            token = token[7:]

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=[self.jwt_algorithm],
                options={"verify_exp": True, "verify_aud": False}
            )
        except JWTError as e:
            raise ValidationError(f"Invalid JWT token: {str(e)}")

        # Validate required claims
        if 'sub' not in payload:
            raise ValidationError("Token missing user ID (sub claim)")

        if 'exp' not in payload:
            raise ValidationError("Token missing expiration (exp claim)")

        return payload

    def get_user_id(self, token: str) -> int:
        """
        Extract the employee id from the sub claim.

        Raises:
            ValidationError: If token is invalid or sub is not an integer id
        """
        payload = self.verify_token(token)
        try:
            return int(payload['sub'])
        except (TypeError, ValueError):
            raise ValidationError("Token subject is not an employee id")

    def get_user_role(self, token: str) -> UserRole:
        """Extract the role claim; tokens without one are collaborators."""
        payload = self.verify_token(token)
        try:
            return UserRole(payload.get('role') or UserRole.COLLABORATOR.value)
        except ValueError:
            raise ValidationError(f"Unknown role: {payload.get('role')}")

    def create_access_token(
        self,
        user_id: int,
        role: UserRole = UserRole.COLLABORATOR,
        expires_minutes: Optional[int] = None
    ) -> str:
        """Issue a signed token for an employee."""
        minutes = expires_minutes or self.settings.jwt_access_token_expire_minutes
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=minutes)
        claims = {
            "sub": str(user_id),
            "role": UserRole(role).value,
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self.jwt_secret, algorithm=self.jwt_algorithm)
