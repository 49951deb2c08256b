"""
Unit Test Fixtures.

Fixtures for unit tests. Service tests run against the in-memory SQLite
database from the root conftest; everything outside the process (email,
WhatsApp, CRM, OpenAI) is mocked or left unconfigured.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from fairpass.backend.integrations.base import SendResult


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for tests that must not touch a database.

    Usage:
        def test_rollback(mock_db_session: AsyncMock):
            service = BaseService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    session.begin_nested = MagicMock(return_value=AsyncMock())
    return session


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def sent() -> SendResult:
    """A successful provider send."""
    return SendResult(success=True, message_id="msg-1")


@pytest.fixture
def mock_transport():
    """
    Build an httpx.MockTransport that records requests.

    Usage:
        transport, requests = mock_transport(lambda r: httpx.Response(200, json={}))
    """

    def build(handler):
        requests: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        return httpx.MockTransport(recording), requests

    return build
