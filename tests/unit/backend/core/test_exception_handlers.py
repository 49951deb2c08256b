"""
Unit Tests for Exception Handlers.

Tests the exception handler functions in isolation.
"""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError

from fairpass.backend.core.exception_handlers import (
    EXCEPTION_STATUS_MAP,
    _get_request_id,
    application_error_handler,
    database_error_handler,
    unhandled_exception_handler,
    validation_error_handler,
)
from fairpass.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)


@pytest.fixture
def mock_request():
    request = MagicMock(spec=Request)
    request.state = MagicMock()
    request.state.request_id = "req-1"
    request.url = MagicMock()
    request.url.path = "/api/v1/test"
    request.method = "GET"
    request.headers = {}
    return request


def _body(response) -> dict:
    return json.loads(response.body)


class TestExceptionStatusMapping:
    @pytest.mark.parametrize(
        ("exc_type", "status"),
        [
            (NotFoundError, 404),
            (ValidationError, 400),
            (AuthenticationError, 401),
            (AuthorizationError, 403),
            (ConflictError, 409),
            (RateLimitError, 429),
            (ExternalServiceError, 502),
            (DatabaseError, 503),
        ],
    )
    def test_status_codes(self, exc_type, status):
        """Should map each application error to its HTTP status."""
        assert EXCEPTION_STATUS_MAP[exc_type] == status


class TestGetRequestId:
    def test_prefers_request_state(self, mock_request):
        assert _get_request_id(mock_request) == "req-1"

    def test_falls_back_to_header(self):
        request = MagicMock(spec=Request)
        request.state = object()
        request.headers = {"x-request-id": "hdr-9"}

        assert _get_request_id(request) == "hdr-9"


class TestApplicationErrorHandler:
    @pytest.mark.asyncio
    async def test_not_found_envelope(self, mock_request):
        """Should return the standard error envelope."""
        response = await application_error_handler(mock_request, NotFoundError("Event not found"))
        body = _body(response)

        assert response.status_code == 404
        assert body["success"] is False
        assert body["error"]["code"] == "RES_NOT_FOUND"
        assert body["error"]["message"] == "Event not found"
        assert body["metadata"]["request_id"] == "req-1"

    @pytest.mark.asyncio
    async def test_validation_details_included(self, mock_request):
        exc = ValidationError("Bad input", details={"field": "slug"})

        body = _body(await application_error_handler(mock_request, exc))

        assert body["error"]["details"] == {"field": "slug"}

    @pytest.mark.asyncio
    async def test_rate_limit_headers(self, mock_request):
        """Should tell the client when to retry."""
        exc = RateLimitError("Too many registration attempts", retry_after_seconds=42, remaining=0)

        response = await application_error_handler(mock_request, exc)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert _body(response)["error"]["details"] == {"retry_after_seconds": 42}


class TestValidationErrorHandler:
    @pytest.mark.asyncio
    async def test_lists_field_errors(self, mock_request):
        exc = RequestValidationError(
            [{"loc": ("body", "email"), "msg": "value is not a valid email address", "type": "value_error"}]
        )

        response = await validation_error_handler(mock_request, exc)
        body = _body(response)

        assert response.status_code == 422
        assert body["error"]["code"] == "VAL_REQUEST_INVALID"
        assert body["error"]["details"]["validation_errors"][0]["field"] == "body.email"


class TestUnhandledExceptionHandler:
    @pytest.mark.asyncio
    async def test_hides_internal_details(self, mock_request):
        """Should never leak the exception text."""
        response = await unhandled_exception_handler(mock_request, RuntimeError("db password is hunter2"))
        body = _body(response)

        assert response.status_code == 500
        assert body["error"]["code"] == "SYS_INTERNAL_ERROR"
        assert "hunter2" not in response.body.decode()


class TestDatabaseErrorHandler:
    @pytest.mark.asyncio
    async def test_integrity_error_is_conflict(self, mock_request):
        exc = IntegrityError("INSERT INTO check_ins", {}, Exception("UNIQUE constraint failed"))

        response = await database_error_handler(mock_request, exc)

        assert response.status_code == 409
        assert _body(response)["error"]["code"] == "RES_CONFLICT"

    @pytest.mark.asyncio
    async def test_other_errors_are_unavailable(self, mock_request):
        exc = OperationalError("SELECT 1", {}, Exception("connection refused"))

        response = await database_error_handler(mock_request, exc)
        body = _body(response)

        assert response.status_code == 503
        assert body["error"]["code"] == "SYS_DATABASE_ERROR"
        assert "refused" not in response.body.decode()
