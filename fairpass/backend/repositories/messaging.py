"""
Messaging Repositories.
"""

from sqlalchemy import select

from fairpass.backend.models.messaging import MessageLog, MessageTemplate
from fairpass.backend.repositories.base import BaseRepository


class MessageTemplateRepository(BaseRepository[MessageTemplate]):
    model = MessageTemplate
    not_found_message = "Template not found"

    async def list_by_name(self) -> list[MessageTemplate]:
        return await self._all(select(MessageTemplate).order_by(MessageTemplate.name.asc()))

    async def get_by_name(self, name: str) -> MessageTemplate | None:
        return await self._first(select(MessageTemplate).where(MessageTemplate.name == name))


class MessageLogRepository(BaseRepository[MessageLog]):
    model = MessageLog

    async def list_for_registration(self, registration_id: str) -> list[MessageLog]:
        return await self._all(
            select(MessageLog)
            .where(MessageLog.registration_id == registration_id)
            .order_by(MessageLog.created_at.desc())
        )

    async def exists_for(self, registration_id: str, template_name: str, status: str) -> bool:
        log = await self._first(
            select(MessageLog.id).where(
                MessageLog.registration_id == registration_id,
                MessageLog.template_name == template_name,
                MessageLog.status == status,
            )
        )
        return log is not None
