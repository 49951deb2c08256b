"""
Integration Test Fixtures.

Fixtures for integration tests - the real application, services and
database. These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.database import get_db_session
from fairpass.backend.core.security import create_access_token
from fairpass.backend.main import create_app
from fairpass.backend.models import University
from fairpass.backend.models.enums import AdminRole, PrincipalType


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database session override.

    The client uses the test database session, so data created through
    fixtures is visible to the API and everything is dropped after the test.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def bearer(claims: dict[str, Any]) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


@pytest.fixture
def admin_headers(make_admin) -> Callable[..., Awaitable[dict[str, str]]]:
    """
    Create an admin with the given role and return its auth headers.

    Usage:
        async def test_list_users(client, admin_headers):
            headers = await admin_headers(AdminRole.SUPER_ADMIN)
            response = await client.get("/api/v1/users", headers=headers)
    """

    async def build(role: AdminRole = AdminRole.SUPER_ADMIN) -> dict[str, str]:
        admin = await make_admin(role)
        return bearer(
            {
                "sub": admin.id,
                "type": PrincipalType.ADMIN.value,
                "role": admin.role,
                "email": admin.email,
                "name": admin.name,
            }
        )

    return build


@pytest.fixture
def university_headers() -> Callable[[University], dict[str, str]]:
    """Auth headers for a representative of the given university."""

    def build(university: University) -> dict[str, str]:
        return bearer(
            {
                "sub": f"rep-{university.id}",
                "type": PrincipalType.UNIVERSITY.value,
                "role": "UNIVERSITY",
                "university_id": university.id,
            }
        )

    return build
