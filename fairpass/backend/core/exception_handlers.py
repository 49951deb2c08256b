"""
Exception Handlers.

Every failure leaves the API in the same envelope:

    {"success": false, "error": {"code", "message", "details"}, "metadata": {...}}

Application errors map to their HTTP status, request validation errors
become 422 VAL_REQUEST_INVALID, database errors that escape a service
become 409 or 503, and anything else is a logged 500 with no detail.

Usage:
    from fairpass.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from fairpass.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from fairpass.backend.core.logging import get_logger
from fairpass.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    ConflictError: 409,
    RateLimitError: 429,
    ExternalServiceError: 502,
    DatabaseError: 503,
}


def _get_request_id(request: Request) -> str | None:
    """Request ID set by the middleware, else the inbound header."""
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id")


def _error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=ErrorDetail(code=code, message=message, details=details),
        metadata=ResponseMetadata(request_id=_get_request_id(request)),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": _get_request_id(request),
    }


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    log_extra = {"code": exc.code, "message": exc.message, "status": status_code, **_request_context(request)}
    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    details = getattr(exc, "details", None) or None
    headers = None
    if isinstance(exc, RateLimitError):
        details = {"retry_after_seconds": exc.retry_after_seconds}
        headers = {
            "Retry-After": str(exc.retry_after_seconds),
            "X-RateLimit-Remaining": str(exc.remaining),
        }

    return _error_response(request, status_code, exc.code, exc.message, details, headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle FastAPI/Pydantic request validation errors.

    Each error is flattened to {field, message, type}; the field is the
    dotted location, e.g. "body.email" or "query.range".
    """
    errors = exc.errors()
    logger.warning(
        "Request validation failed",
        extra={"error_count": len(errors), **_request_context(request)},
    )
    return _error_response(
        request,
        422,
        "VAL_REQUEST_INVALID",
        "Request validation failed",
        {
            "validation_errors": [
                {
                    "field": ".".join(str(loc) for loc in err.get("loc", [])),
                    "message": err.get("msg", "Validation error"),
                    "type": err.get("type", "unknown"),
                }
                for err in errors
            ]
        },
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Database errors that escaped a service, typically raised at commit."""
    if isinstance(exc, IntegrityError):
        logger.warning("Integrity error at commit", extra={"error": str(exc.orig), **_request_context(request)})
        return _error_response(request, 409, "RES_CONFLICT", "Resource already exists")

    logger.error("Database error", extra={"error": str(exc), **_request_context(request)})
    return _error_response(request, 503, "SYS_DATABASE_ERROR", "Database unavailable")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log the full exception; the client only learns that something failed."""
    logger.exception(
        "Unhandled exception",
        extra={"exception_type": type(exc).__name__, **_request_context(request)},
    )
    return _error_response(request, 500, "SYS_INTERNAL_ERROR", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
