"""
Bearer token authentication.
"""

from .jwt_handler import JWTHandler
from .dependencies import CurrentUser, get_current_user, get_jwt_handler

__all__ = [
    "JWTHandler",
    "CurrentUser",
    "get_current_user",
    "get_jwt_handler",
]
