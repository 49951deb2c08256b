"""
University Repositories.

Data access for universities, their users, event participation and favorites.
"""

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from fairpass.backend.models.enums import EventStatus
from fairpass.backend.models.event import Event
from fairpass.backend.models.university import (
    EventParticipating,
    FavoriteStudent,
    University,
    UniversityUser,
)
from fairpass.backend.repositories.base import BaseRepository


class UniversityRepository(BaseRepository[University]):
    """Repository for University model."""

    model = University
    not_found_message = "University not found"

    async def list_with_counts(
        self,
        active_only: bool = False,
    ) -> list[tuple[University, int, int]]:
        """Universities by name with (university, event_count, user_count)."""
        event_count = (
            select(func.count(EventParticipating.id))
            .where(EventParticipating.university_id == University.id)
            .correlate(University)
            .scalar_subquery()
        )
        user_count = (
            select(func.count(UniversityUser.id))
            .where(UniversityUser.university_id == University.id)
            .correlate(University)
            .scalar_subquery()
        )
        query = select(University, event_count, user_count).order_by(University.name.asc())
        if active_only:
            query = query.where(University.is_active.is_(True))
        result = await self.session.execute(query)
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def get_with_details(self, university_id: str) -> University | None:
        return await self._first(
            select(University)
            .options(
                selectinload(University.participations),
                selectinload(University.users),
            )
            .where(University.id == university_id)
        )


class UniversityUserRepository(BaseRepository[UniversityUser]):
    """Repository for UniversityUser model."""

    model = UniversityUser

    async def get_by_email(self, email: str) -> UniversityUser | None:
        return await self._first(select(UniversityUser).where(UniversityUser.email == email))

    async def get_for_university(self, university_id: str) -> UniversityUser | None:
        return await self._first(
            select(UniversityUser)
            .where(UniversityUser.university_id == university_id)
            .order_by(UniversityUser.created_at.asc())
        )


class ParticipationRepository(BaseRepository[EventParticipating]):
    """Repository for EventParticipating model."""

    model = EventParticipating
    not_found_message = "University is not assigned to this event"

    async def get(self, event_id: str, university_id: str) -> EventParticipating | None:
        return await self._first(
            select(EventParticipating).where(
                EventParticipating.event_id == event_id,
                EventParticipating.university_id == university_id,
            )
        )

    async def list_for_university(self, university_id: str) -> list[EventParticipating]:
        return await self._all(
            select(EventParticipating)
            .join(EventParticipating.event)
            .where(EventParticipating.university_id == university_id)
            .order_by(Event.start_date_time.asc())
        )

    async def event_ids_for_university(
        self,
        university_id: str,
        statuses: list[str] | None = None,
    ) -> list[str]:
        query = select(EventParticipating.event_id).where(
            EventParticipating.university_id == university_id
        )
        if statuses:
            query = query.where(EventParticipating.status.in_(statuses))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def delete_all_for_event(self, event_id: str) -> int:
        participations = await self._all(
            select(EventParticipating).where(EventParticipating.event_id == event_id)
        )
        for participation in participations:
            await self.session.delete(participation)
        await self.session.flush()
        return len(participations)

    async def count_with_status(self, status: str) -> int:
        return await self.count(EventParticipating.status == status)

    async def list_events_available_for(self, university_id: str) -> list[Event]:
        """Draft or published events the university is not yet assigned to."""
        assigned = select(EventParticipating.event_id).where(
            EventParticipating.university_id == university_id
        )
        return await self._all(
            select(Event)
            .where(
                Event.status.in_([EventStatus.DRAFT, EventStatus.PUBLISHED]),
                Event.id.not_in(assigned),
            )
            .order_by(Event.start_date_time.desc())
        )


class FavoriteRepository(BaseRepository[FavoriteStudent]):
    """Repository for FavoriteStudent model."""

    model = FavoriteStudent
    not_found_message = "Favorite not found"

    async def list_for_event(self, university_id: str, event_id: str) -> list[FavoriteStudent]:
        return await self._all(
            select(FavoriteStudent)
            .where(
                FavoriteStudent.university_id == university_id,
                FavoriteStudent.event_id == event_id,
            )
            .order_by(FavoriteStudent.created_at.desc())
        )

    async def get_existing(
        self,
        event_id: str,
        university_id: str,
        registration_id: str,
    ) -> FavoriteStudent | None:
        return await self._first(
            select(FavoriteStudent).where(
                FavoriteStudent.event_id == event_id,
                FavoriteStudent.university_id == university_id,
                FavoriteStudent.registration_id == registration_id,
            )
        )

    async def get_owned(self, favorite_id: str, university_id: str) -> FavoriteStudent | None:
        return await self._first(
            select(FavoriteStudent).where(
                FavoriteStudent.id == favorite_id,
                FavoriteStudent.university_id == university_id,
            )
        )

    async def map_for_registrations(
        self,
        university_id: str,
        registration_ids: list[str],
    ) -> dict[str, FavoriteStudent]:
        if not registration_ids:
            return {}
        favorites = await self._all(
            select(FavoriteStudent).where(
                FavoriteStudent.university_id == university_id,
                FavoriteStudent.registration_id.in_(registration_ids),
            )
        )
        return {favorite.registration_id: favorite for favorite in favorites}
