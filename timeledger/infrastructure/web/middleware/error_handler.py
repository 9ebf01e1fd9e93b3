"""
Error handling for the FastAPI application.
Maps domain error codes to HTTP statuses and formats uncaught exceptions.
"""

import logging
import traceback
from typing import Any, Dict, NoReturn, Type, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from timeledger.application.use_cases.base_use_case import UseCaseResult
from timeledger.config import settings
from timeledger.domain.models.base import DomainException

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


STATUS_BY_CODE: Dict[str, int] = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "ENTITY_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "CONFLICT": status.HTTP_409_CONFLICT,
    "PERSISTENCE_ERROR": status.HTTP_503_SERVICE_UNAVAILABLE,
    "BUSINESS_RULE_VIOLATION": status.HTTP_403_FORBIDDEN,
}


def status_for(error_code: str) -> int:
    return STATUS_BY_CODE.get(error_code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def unwrap(result: UseCaseResult) -> Any:
    """Return a successful result's data, or raise the matching HTTPException."""
    if result.success:
        return result.data
    raise_for_error(result.error, result.error_code)


def raise_for_error(message: str, error_code: str) -> NoReturn:
    raise HTTPException(
        status_code=status_for(error_code),
        detail={"error_code": error_code, "message": message},
    )


def build_request(dto_class: Type[M], **fields: Any) -> M:
    """Build a request DTO from query parameters, answering 422 when they are invalid."""
    try:
        return dto_class(**fields)
    except SchemaValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error_code": "VALIDATION_ERROR", "message": str(e)},
        )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    """Exception handler for domain errors raised outside a use case."""
    logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=status_for(exc.code), content={"detail": exc.to_dict()})


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        error_response = self.format_error_response(exc)

        # In development, add more debug information
        if settings.debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.get("status_code", 500),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        error_response = {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        if isinstance(exc, DomainException):
            error_response.update({
                "error": exc.code,
                "message": exc.message,
                "status_code": status_for(exc.code)
            })
        elif isinstance(exc, ValueError):
            error_response.update({
                "error": "Bad Request",
                "message": str(exc),
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, TimeoutError):
            error_response.update({
                "error": "Request Timeout",
                "message": "The request took too long to process",
                "status_code": status.HTTP_408_REQUEST_TIMEOUT
            })

        return error_response
