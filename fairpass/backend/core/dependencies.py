"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request ID,
client identity for rate limiting, and the authenticated principal.
"""

import uuid
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.database import get_db_session
from fairpass.backend.core.exceptions import AuthenticationError, AuthorizationError
from fairpass.backend.core.rate_limit import get_client_identifier
from fairpass.backend.core.security import decode_token
from fairpass.backend.models.enums import AdminRole, PrincipalType

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_client_id(request: Request) -> str:
    """Client IP as seen through proxy headers."""
    return get_client_identifier(request.headers)


ClientId = Annotated[str, Depends(get_client_id)]


@dataclass(frozen=True)
class Principal:
    """Authenticated caller decoded from the bearer token."""

    id: str
    type: str
    role: str
    email: str | None = None
    name: str | None = None
    university_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.type == PrincipalType.ADMIN


_bearer = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> Principal:
    """Decode the bearer token. Missing or invalid tokens are a 401."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_token(credentials.credentials)
    try:
        return Principal(
            id=payload["sub"],
            type=payload["type"],
            role=payload["role"],
            email=payload.get("email"),
            name=payload.get("name"),
            university_id=payload.get("university_id"),
        )
    except KeyError as e:
        raise AuthenticationError("Malformed token") from e


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]


def require_admin(*roles: AdminRole) -> Callable[..., Awaitable[Principal]]:
    """
    Build a dependency that admits admin principals with one of the given roles.

    With no roles, any admin (including ushers) is admitted.
    """

    async def dependency(principal: CurrentPrincipal) -> Principal:
        if not principal.is_admin:
            raise AuthorizationError("Admin access required")
        if roles and principal.role not in roles:
            raise AuthorizationError("Insufficient role for this operation")
        return principal

    return dependency


async def require_university(principal: CurrentPrincipal) -> Principal:
    """Admit only university principals bound to a university."""
    if principal.type != PrincipalType.UNIVERSITY or not principal.university_id:
        raise AuthorizationError("University access required")
    return principal


AnyAdmin = Annotated[Principal, Depends(require_admin())]
StaffAdmin = Annotated[
    Principal,
    Depends(require_admin(AdminRole.SUPER_ADMIN, AdminRole.EVENT_MANAGER, AdminRole.EVENT_STAFF)),
]
ManagerAdmin = Annotated[
    Principal,
    Depends(require_admin(AdminRole.SUPER_ADMIN, AdminRole.EVENT_MANAGER)),
]
SuperAdmin = Annotated[Principal, Depends(require_admin(AdminRole.SUPER_ADMIN))]
UniversityMember = Annotated[Principal, Depends(require_university)]
