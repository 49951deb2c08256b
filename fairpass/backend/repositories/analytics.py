"""
Analytics Repository.

Aggregate queries behind the dashboard, the overview report and per-event
analytics. Grouping happens in SQL; label cleanup (nulls to "Unknown")
and bucketing by day or month happen in the service.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.models.enums import EventStatus
from fairpass.backend.models.event import Event
from fairpass.backend.models.registration import CheckIn, Registrant, Registration


class AnalyticsRepository:
    """Read-only aggregate queries across events, registrations and check-ins."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _range(column: Any, start: datetime | None, end: datetime | None) -> list:
        criteria = []
        if start is not None:
            criteria.append(column >= start)
        if end is not None:
            criteria.append(column < end)
        return criteria

    async def registration_timestamps(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        event_id: str | None = None,
    ) -> list[datetime]:
        query = select(Registration.created_at).where(
            *self._range(Registration.created_at, start, end)
        )
        if event_id:
            query = query.where(Registration.event_id == event_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_registrations(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        result = await self.session.execute(
            select(func.count(Registration.id)).where(
                *self._range(Registration.created_at, start, end)
            )
        )
        return result.scalar_one()

    async def count_events(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        result = await self.session.execute(
            select(func.count(Event.id)).where(*self._range(Event.created_at, start, end))
        )
        return result.scalar_one()

    async def count_active_events(self, now: datetime) -> int:
        result = await self.session.execute(
            select(func.count(Event.id)).where(
                Event.status == EventStatus.PUBLISHED,
                Event.end_date_time >= now,
            )
        )
        return result.scalar_one()

    async def count_check_ins(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        event_id: str | None = None,
    ) -> int:
        query = select(func.count(CheckIn.id)).where(
            *self._range(CheckIn.checked_in_at, start, end)
        )
        if event_id:
            query = query.join(CheckIn.registration).where(Registration.event_id == event_id)
        result = await self.session.execute(query)
        return result.scalar_one()

    async def event_status_counts(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[tuple[str, int]]:
        result = await self.session.execute(
            select(Event.status, func.count(Event.id))
            .where(*self._range(Event.created_at, start, end))
            .group_by(Event.status)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def registrant_field_counts(
        self,
        field: str,
        start: datetime | None = None,
        end: datetime | None = None,
        skip_null: bool = False,
    ) -> list[tuple[str | None, int]]:
        """
        Registrant counts grouped by one registrant column.

        With a period, only registrants who registered for something in that
        period are counted, whenever the registrant row itself was created.
        """
        column = getattr(Registrant, field)
        query = select(column, func.count(Registrant.id)).group_by(column)
        if start is not None or end is not None:
            query = query.where(
                exists().where(
                    Registration.registrant_id == Registrant.id,
                    *self._range(Registration.created_at, start, end),
                )
            )
        if skip_null:
            query = query.where(column.is_not(None))
        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def event_registrant_field_counts(
        self,
        event_id: str,
        field: str,
    ) -> list[tuple[str | None, int]]:
        """Registrations of one event grouped by a registrant column."""
        column = getattr(Registrant, field)
        result = await self.session.execute(
            select(column, func.count(Registration.id))
            .join(Registration.registrant)
            .where(Registration.event_id == event_id)
            .group_by(column)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def top_events_by_registrations(
        self,
        start: datetime | None,
        end: datetime | None,
        limit: int,
    ) -> list[tuple[str, str, int]]:
        """(event_id, title, registrations) ranked by registrations in the period."""
        registrations = func.count(Registration.id)
        result = await self.session.execute(
            select(Event.id, Event.title, registrations)
            .join(Registration, Registration.event_id == Event.id)
            .where(*self._range(Registration.created_at, start, end))
            .group_by(Event.id, Event.title)
            .order_by(registrations.desc())
            .limit(limit)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]

    async def count_checked_in_registrations(
        self,
        event_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> int:
        """Registrations of the event made in the period that have a check-in."""
        result = await self.session.execute(
            select(func.count(CheckIn.id))
            .join(CheckIn.registration)
            .where(
                Registration.event_id == event_id,
                *self._range(Registration.created_at, start, end),
            )
        )
        return result.scalar_one()
