"""
Admin User Repository.
"""

from sqlalchemy import select

from fairpass.backend.models.admin_user import AdminUser
from fairpass.backend.repositories.base import BaseRepository


class AdminUserRepository(BaseRepository[AdminUser]):
    """Repository for AdminUser model."""

    model = AdminUser
    not_found_message = "User not found"

    async def list_by_name(self) -> list[AdminUser]:
        return await self._all(select(AdminUser).order_by(AdminUser.name.asc()))

    async def get_by_email(self, email: str) -> AdminUser | None:
        return await self._first(select(AdminUser).where(AdminUser.email == email))

    async def get_by_access_code(self, access_code: str) -> AdminUser | None:
        return await self._first(select(AdminUser).where(AdminUser.access_code == access_code))

    async def email_taken(self, email: str, exclude_id: str | None = None) -> bool:
        query = select(AdminUser.id).where(AdminUser.email == email)
        if exclude_id:
            query = query.where(AdminUser.id != exclude_id)
        return await self._first(query) is not None

    async def access_code_taken(self, access_code: str, exclude_id: str | None = None) -> bool:
        query = select(AdminUser.id).where(AdminUser.access_code == access_code)
        if exclude_id:
            query = query.where(AdminUser.id != exclude_id)
        return await self._first(query) is not None
