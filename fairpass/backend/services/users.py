"""
Admin User Service.

Management of back-office accounts: admins sign in with email and
password, ushers with an access code.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import ConflictError
from fairpass.backend.core.security import hash_password
from fairpass.backend.models.admin_user import AdminUser
from fairpass.backend.repositories.admin_user import AdminUserRepository
from fairpass.backend.schemas.user import UserCreate, UserUpdate
from fairpass.backend.services.base import BaseService

ACCESS_CODE_TAKEN = "Access Code already exists. Please choose a different one."
EMAIL_TAKEN = "Email already exists."


def normalize_access_code(access_code: str | None) -> str | None:
    """Trimmed access code; blank codes are stored as null."""
    if access_code is None:
        return None
    return access_code.strip() or None


class UserService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AdminUserRepository(session)

    async def list_users(self) -> list[AdminUser]:
        return await self.repo.list_by_name()

    async def get_user(self, user_id: str) -> AdminUser:
        return await self.repo.get_by_id(user_id)

    async def _check_unique(
        self,
        email: str | None,
        access_code: str | None,
        exclude_id: str | None = None,
    ) -> None:
        if email and await self.repo.email_taken(email, exclude_id):
            raise ConflictError(EMAIL_TAKEN)
        if access_code and await self.repo.access_code_taken(access_code, exclude_id):
            raise ConflictError(ACCESS_CODE_TAKEN)

    async def create_user(self, data: UserCreate) -> AdminUser:
        access_code = normalize_access_code(data.access_code)
        await self._check_unique(data.email, access_code)

        self._log_operation("Creating admin user", email=data.email, role=data.role)
        return await self._execute_db_operation(
            "create_user",
            self.repo.create(
                name=data.name,
                email=data.email,
                role=data.role,
                password_hash=hash_password(data.password) if data.password else None,
                access_code=access_code,
            ),
            conflict_message=EMAIL_TAKEN,
        )

    async def update_user(self, user_id: str, data: UserUpdate) -> AdminUser:
        """Partial update. Only fields present in the request change."""
        user = await self.repo.get_by_id(user_id)
        update_data = data.model_dump(exclude_unset=True)

        password = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = hash_password(password)
        if "access_code" in update_data:
            update_data["access_code"] = normalize_access_code(update_data["access_code"])

        await self._check_unique(
            update_data.get("email"), update_data.get("access_code"), exclude_id=user_id
        )

        self._log_operation("Updating admin user", user_id=user_id, fields=sorted(update_data))
        return await self._execute_db_operation(
            "update_user",
            self.repo.apply(user, **update_data),
            conflict_message=EMAIL_TAKEN,
        )

    async def delete_user(self, user_id: str) -> None:
        self._log_operation("Deleting admin user", user_id=user_id)
        await self._execute_db_operation("delete_user", self.repo.delete(user_id))
