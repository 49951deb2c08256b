"""
Auth Service.

Sign-in for admins (email and password), ushers (access code) and
university representatives. Every flow issues a bearer JWT whose claims
become the request Principal.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.config import get_app_config
from fairpass.backend.core.dependencies import Principal
from fairpass.backend.core.exceptions import AuthenticationError
from fairpass.backend.core.security import create_access_token, verify_password
from fairpass.backend.core.utils import utc_now
from fairpass.backend.models.admin_user import AdminUser
from fairpass.backend.models.enums import PrincipalType
from fairpass.backend.repositories.admin_user import AdminUserRepository
from fairpass.backend.repositories.university import UniversityUserRepository
from fairpass.backend.schemas.auth import PrincipalResponse, TokenResponse
from fairpass.backend.services.base import BaseService

UNIVERSITY_ROLE = "UNIVERSITY"


def issue_token(claims: dict[str, Any]) -> TokenResponse:
    """Sign the claims and wrap them in a token response."""
    expires_in = get_app_config().security.jwt.access_token_expire_minutes * 60
    principal = PrincipalResponse(id=claims["sub"], **{k: v for k, v in claims.items() if k != "sub"})
    return TokenResponse(
        access_token=create_access_token(claims),
        expires_in=expires_in,
        principal=principal,
    )


class AuthService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.admins = AdminUserRepository(session)
        self.university_users = UniversityUserRepository(session)

    async def login_admin(self, email: str, password: str) -> TokenResponse:
        """
        Sign an admin in with email and password.

        Raises:
            AuthenticationError: Unknown, inactive, password-less or wrong password
        """
        user = await self.admins.get_by_email(email)
        if (
            user is None
            or not user.is_active
            or not user.password_hash
            or not verify_password(password, user.password_hash)
        ):
            self._logger.warning("Admin login failed", extra={"email": email})
            raise AuthenticationError("Invalid email or password")

        return await self._admin_token(user)

    async def login_usher(self, access_code: str) -> TokenResponse:
        code = self._require(access_code, "Access code is required")

        user = await self.admins.get_by_access_code(code)
        if user is None or not user.is_active:
            self._logger.warning("Usher login failed")
            raise AuthenticationError("Invalid access code")

        return await self._admin_token(user)

    async def _admin_token(self, user: AdminUser) -> TokenResponse:
        await self.admins.apply(user, last_login_at=utc_now())
        self._log_operation("Admin signed in", user_id=user.id, role=user.role)
        return issue_token(
            {
                "sub": user.id,
                "type": PrincipalType.ADMIN.value,
                "role": user.role,
                "email": user.email,
                "name": user.name,
            }
        )

    async def login_university(self, email: str, password: str) -> TokenResponse:
        user = await self.university_users.get_by_email(email)
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            self._logger.warning("University login failed", extra={"email": email})
            raise AuthenticationError("Invalid email or password")

        self._log_operation("University user signed in", university_id=user.university_id)
        return issue_token(
            {
                "sub": user.id,
                "type": PrincipalType.UNIVERSITY.value,
                "role": UNIVERSITY_ROLE,
                "email": user.email,
                "name": user.name,
                "university_id": user.university_id,
            }
        )

    @staticmethod
    def me(principal: Principal) -> PrincipalResponse:
        return PrincipalResponse(
            id=principal.id,
            type=principal.type,
            role=principal.role,
            email=principal.email,
            name=principal.name,
            university_id=principal.university_id,
        )
