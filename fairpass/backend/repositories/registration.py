"""
Registration Repositories.

Data access for registrants, registrations and check-ins.
"""

from datetime import datetime

from sqlalchemy import func, or_, select

from fairpass.backend.models.event import Event
from fairpass.backend.models.registration import CheckIn, Registrant, Registration
from fairpass.backend.repositories.base import BaseRepository


class RegistrantRepository(BaseRepository[Registrant]):
    """Repository for Registrant model."""

    model = Registrant
    not_found_message = "Registrant not found"

    async def find_by_email_or_phone(self, email: str, phone: str) -> Registrant | None:
        return await self._first(
            select(Registrant)
            .where(or_(Registrant.email == email, Registrant.phone == phone))
            .order_by(Registrant.created_at.asc())
        )

    async def find_by_email(self, email: str) -> Registrant | None:
        return await self._first(
            select(Registrant)
            .where(Registrant.email == email)
            .order_by(Registrant.created_at.asc())
        )

    async def list_by_ids(self, ids: list[str]) -> list[Registrant]:
        if not ids:
            return []
        return await self._all(select(Registrant).where(Registrant.id.in_(ids)))

    async def list_unenriched(self, limit: int) -> list[Registrant]:
        """Registrants still missing gender or a standardized major."""
        return await self._all(
            select(Registrant)
            .where(or_(Registrant.gender.is_(None), Registrant.standardized_major.is_(None)))
            .order_by(Registrant.created_at.asc())
            .limit(limit)
        )


class RegistrationRepository(BaseRepository[Registration]):
    """
    Repository for Registration model.

    Registration eagerly loads its event, registrant and check-in, so every
    row returned here can be serialized without further queries.
    """

    model = Registration
    not_found_message = "Registration not found"

    @staticmethod
    def _search_criteria(search: str):
        pattern = f"%{search}%"
        return or_(
            Registrant.full_name.ilike(pattern),
            Registrant.email.ilike(pattern),
            Registrant.phone.ilike(pattern),
        )

    async def count_for_event(self, event_id: str) -> int:
        return await self.count(Registration.event_id == event_id)

    async def get_by_token(self, token: str) -> Registration | None:
        return await self._first(select(Registration).where(Registration.qr_token == token))

    async def token_exists(self, token: str) -> bool:
        return await self.get_by_token(token) is not None

    async def get_by_token_in_event(self, event_id: str, token: str) -> Registration | None:
        return await self._first(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.qr_token == token,
            )
        )

    async def get_for_event_and_registrant(
        self,
        event_id: str,
        registrant_id: str,
    ) -> Registration | None:
        return await self._first(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.registrant_id == registrant_id,
            )
        )

    async def find_in_event_by_contact(
        self,
        event_id: str,
        email: str,
        phone: str,
    ) -> Registration | None:
        """Registration in the event whose registrant matches email OR phone exactly."""
        return await self._first(
            select(Registration)
            .join(Registration.registrant)
            .where(
                Registration.event_id == event_id,
                or_(Registrant.email == email, Registrant.phone == phone),
            )
        )

    async def search_in_event(self, event_id: str, term: str) -> Registration | None:
        """First registration whose email or phone contains term (case-insensitive)."""
        pattern = f"%{term}%"
        return await self._first(
            select(Registration)
            .join(Registration.registrant)
            .where(
                Registration.event_id == event_id,
                or_(Registrant.email.ilike(pattern), Registrant.phone.ilike(pattern)),
            )
            .order_by(Registration.created_at.asc())
        )

    async def latest_active_for_email(self, email: str, now: datetime) -> Registration | None:
        """Newest registration for the email whose event has not ended."""
        return await self._first(
            select(Registration)
            .join(Registration.registrant)
            .join(Registration.event)
            .where(Registrant.email == email, Event.end_date_time >= now)
            .order_by(Registration.created_at.desc())
        )

    async def list_registrations(
        self,
        event_id: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Registration]:
        query = select(Registration).join(Registration.registrant)
        if event_id:
            query = query.where(Registration.event_id == event_id)
        if search:
            query = query.where(self._search_criteria(search))
        return await self._all(
            query.order_by(Registration.created_at.desc()).limit(limit).offset(offset)
        )

    async def count_registrations(
        self,
        event_id: str | None = None,
        search: str | None = None,
    ) -> int:
        query = select(func.count(Registration.id)).join(Registration.registrant)
        if event_id:
            query = query.where(Registration.event_id == event_id)
        if search:
            query = query.where(self._search_criteria(search))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def list_for_export(self, event_id: str | None = None) -> list[Registration]:
        query = select(Registration)
        if event_id:
            query = query.where(Registration.event_id == event_id)
        return await self._all(query.order_by(Registration.created_at.desc()))

    async def list_for_event(self, event_id: str) -> list[Registration]:
        return await self._all(
            select(Registration)
            .where(Registration.event_id == event_id)
            .order_by(Registration.created_at.asc())
        )

    async def list_recent(self, limit: int) -> list[Registration]:
        return await self._all(
            select(Registration).order_by(Registration.created_at.desc()).limit(limit)
        )

    async def search_students(
        self,
        event_ids: list[str],
        term: str,
        limit: int = 20,
    ) -> list[Registration]:
        """Registrations in the given events matching name, email or phone."""
        if not event_ids:
            return []
        return await self._all(
            select(Registration)
            .join(Registration.registrant)
            .where(Registration.event_id.in_(event_ids), self._search_criteria(term))
            .order_by(Registration.created_at.desc())
            .limit(limit)
        )

    async def count_checked_in(self, event_id: str) -> int:
        result = await self.session.execute(
            select(func.count(CheckIn.id))
            .join(CheckIn.registration)
            .where(Registration.event_id == event_id)
        )
        return result.scalar_one()


class CheckInRepository(BaseRepository[CheckIn]):
    """Repository for CheckIn model."""

    model = CheckIn

    async def get_for_registration(self, registration_id: str) -> CheckIn | None:
        return await self._first(
            select(CheckIn).where(CheckIn.registration_id == registration_id)
        )
