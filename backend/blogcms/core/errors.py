"""
Domain error taxonomy and the handlers that render it as JSON.

Services raise these exceptions; they never build HTTP responses themselves.
Every error renders as ``{"message": ..., "error": ...}``.
"""

import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BlogCMSError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(BlogCMSError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"
    default_message = "Invalid request"


class AuthenticationError(BlogCMSError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "authentication_error"
    default_message = "Not authorized"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class PermissionDeniedError(BlogCMSError):
    status_code = status.HTTP_403_FORBIDDEN
    error = "permission_denied"
    default_message = "Admin privileges required"


class NotFoundError(BlogCMSError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
    default_message = "Resource not found"


class ConflictError(BlogCMSError):
    """Uniqueness violation, from either the application check or the store."""

    status_code = status.HTTP_409_CONFLICT
    error = "conflict"
    default_message = "Resource already exists"


def error_response(exc: BlogCMSError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "error": exc.error},
        headers=exc.headers,
    )


async def blogcms_error_handler(request: Request, exc: BlogCMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error} on {request.method} {request.url.path}: {exc}")
    return error_response(exc)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render pydantic validation failures as a 400 with a readable message."""
    problems = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) or "request"
        problems.append(f"{field}: {err.get('msg', 'invalid value')}")
    message = "; ".join(problems) or ValidationError.default_message
    return error_response(ValidationError(message))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(BlogCMSError())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BlogCMSError, blogcms_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
