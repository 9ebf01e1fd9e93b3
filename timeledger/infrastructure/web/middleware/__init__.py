"""
HTTP middleware and error mapping.
"""

from .error_handler import ErrorHandlerMiddleware, domain_exception_handler, status_for, unwrap

__all__ = [
    "ErrorHandlerMiddleware",
    "domain_exception_handler",
    "status_for",
    "unwrap",
]
