"""
Event Repositories.

Data access for events and their sessions.
"""

from datetime import datetime

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from fairpass.backend.core.exceptions import NotFoundError
from fairpass.backend.models.enums import EventStatus
from fairpass.backend.models.event import Event, EventSession
from fairpass.backend.repositories.base import BaseRepository


class EventRepository(BaseRepository[Event]):
    """Repository for Event model."""

    model = Event
    not_found_message = "Event not found"

    @staticmethod
    def _criteria(status: str | None, search: str | None) -> list:
        criteria = []
        if status:
            criteria.append(Event.status == status)
        if search:
            pattern = f"%{search}%"
            criteria.append(or_(Event.title.ilike(pattern), Event.city.ilike(pattern)))
        return criteria

    async def list_events(
        self,
        status: str | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Event]:
        """Events newest start first, optionally filtered by status and title/city."""
        query = (
            select(Event)
            .where(*self._criteria(status, search))
            .order_by(Event.start_date_time.desc())
            .limit(limit)
            .offset(offset)
        )
        return await self._all(query)

    async def count_events(self, status: str | None = None, search: str | None = None) -> int:
        return await self.count(*self._criteria(status, search))

    async def get_with_sessions(self, event_id: str) -> Event:
        """Event with its sessions loaded. Raises NotFoundError."""
        event = await self._first(
            select(Event).options(selectinload(Event.sessions)).where(Event.id == event_id)
        )
        if event is None:
            raise NotFoundError(self.not_found_message)
        return event

    async def get_by_slug(self, slug: str) -> Event | None:
        return await self._first(
            select(Event).options(selectinload(Event.sessions)).where(Event.slug == slug)
        )

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        query = select(Event.id).where(Event.slug == slug)
        if exclude_id:
            query = query.where(Event.id != exclude_id)
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    async def list_upcoming_published(self, now: datetime) -> list[Event]:
        """Published events that have not ended, soonest first."""
        return await self._all(
            select(Event)
            .where(Event.status == EventStatus.PUBLISHED, Event.end_date_time >= now)
            .order_by(Event.start_date_time.asc())
        )

    async def list_published_starting_after(self, since: datetime) -> list[Event]:
        return await self._all(
            select(Event)
            .where(Event.status == EventStatus.PUBLISHED, Event.start_date_time >= since)
            .order_by(Event.start_date_time.asc())
        )

    async def list_published_starting_between(
        self,
        start: datetime,
        end: datetime,
    ) -> list[Event]:
        return await self._all(
            select(Event)
            .where(
                Event.status == EventStatus.PUBLISHED,
                Event.start_date_time >= start,
                Event.start_date_time <= end,
            )
            .order_by(Event.start_date_time.asc())
        )


class EventSessionRepository(BaseRepository[EventSession]):
    """Repository for EventSession model."""

    model = EventSession
    not_found_message = "Session not found"

    async def list_for_event(self, event_id: str) -> list[EventSession]:
        return await self._all(
            select(EventSession)
            .where(EventSession.event_id == event_id)
            .order_by(EventSession.start_time.asc())
        )

    async def get_in_event(self, event_id: str, session_id: str) -> EventSession | None:
        return await self._first(
            select(EventSession).where(
                EventSession.id == session_id,
                EventSession.event_id == event_id,
            )
        )
