"""
Event Service.

Business logic for events and their agenda sessions.
"""

import time
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from fairpass.backend.core.utils import utc_now
from fairpass.backend.models.enums import EventStatus
from fairpass.backend.models.event import Event, EventSession
from fairpass.backend.repositories.event import EventRepository, EventSessionRepository
from fairpass.backend.schemas.event import EventCreate, EventUpdate, SessionCreate, SessionUpdate
from fairpass.backend.services.base import BaseService

SCANNER_LOOKBACK = timedelta(days=7)

# Columns copied when an event is duplicated
EVENT_CONTENT_FIELDS = (
    "country",
    "city",
    "venue_name",
    "venue_address",
    "map_url",
    "start_date_time",
    "end_date_time",
    "timezone",
    "banner_image_url",
    "gallery_images",
    "description",
    "registration_open_at",
    "registration_close_at",
    "capacity",
    "ga_tracking_id",
    "fb_pixel_id",
    "linkedin_partner_id",
    "tiktok_pixel_id",
    "snap_pixel_id",
    "zoho_lead_source",
    "zoho_campaign_id",
)

SESSION_CONTENT_FIELDS = ("description", "start_time", "end_time", "location", "speaker", "order")


class EventService(BaseService):
    """Service for event and session business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = EventRepository(session)
        self.sessions = EventSessionRepository(session)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def list_events_paginated(
        self,
        status: EventStatus | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Event], int]:
        """
        List events newest start first with total count for pagination.

        Args:
            status: Only events with this status
            search: Case-insensitive match on title or city
            limit: Maximum number of events
            offset: Number to skip for pagination

        Returns:
            Tuple of (events list, total count)
        """
        events = await self.repo.list_events(status, search, limit=limit, offset=offset)
        total = await self.repo.count_events(status, search)
        return events, total

    async def list_public_events(self) -> list[Event]:
        return await self.repo.list_upcoming_published(utc_now())

    async def get_event(self, event_id: str) -> Event:
        """Event with sessions. Raises NotFoundError."""
        return await self.repo.get_with_sessions(event_id)

    async def get_public_event(self, slug: str) -> Event:
        """Published event by slug. Drafts and finished events are hidden."""
        event = await self.repo.get_by_slug(slug)
        if event is None or event.status != EventStatus.PUBLISHED:
            raise NotFoundError("Event not found")
        return event

    async def create_event(self, data: EventCreate, created_by_id: str | None = None) -> Event:
        if await self.repo.slug_exists(data.slug):
            raise ConflictError("Slug already exists")

        self._log_operation("Creating event", slug=data.slug)
        event = await self._execute_db_operation(
            "create_event",
            self.repo.create(**data.model_dump(), created_by_id=created_by_id),
            conflict_message="Slug already exists",
        )
        return await self.repo.get_with_sessions(event.id)

    async def update_event(self, event_id: str, data: EventUpdate) -> Event:
        event = await self.repo.get_by_id(event_id)
        if await self.repo.slug_exists(data.slug, exclude_id=event_id):
            raise ConflictError("Slug already exists")

        self._log_operation("Updating event", event_id=event_id)
        await self._execute_db_operation(
            "update_event",
            self.repo.apply(event, **data.model_dump()),
            conflict_message="Slug already exists",
        )
        return await self.repo.get_with_sessions(event_id)

    async def delete_event(self, event_id: str) -> None:
        """Delete an event with its sessions, registrations, participations and logs."""
        self._log_operation("Deleting event", event_id=event_id)
        await self._execute_db_operation("delete_event", self.repo.delete(event_id))

    async def duplicate_event(self, event_id: str, created_by_id: str | None) -> Event:
        """Copy an event and its sessions into a new DRAFT."""
        source = await self.repo.get_with_sessions(event_id)

        copy = await self._execute_db_operation(
            "duplicate_event",
            self.repo.create(
                **{field: getattr(source, field) for field in EVENT_CONTENT_FIELDS},
                title=f"{source.title} (Copy)",
                slug=f"{source.slug}-copy-{int(time.time() * 1000)}",
                status=EventStatus.DRAFT,
                created_by_id=created_by_id,
            ),
        )
        for item in source.sessions:
            await self.sessions.create(
                event_id=copy.id,
                title=item.title,
                **{field: getattr(item, field) for field in SESSION_CONTENT_FIELDS},
            )

        self._log_operation(
            "Event duplicated",
            source_id=event_id,
            event_id=copy.id,
            sessions=len(source.sessions),
        )
        return await self.repo.get_with_sessions(copy.id)

    async def list_scanner_events(self) -> list[Event]:
        """Published events that started at most a week ago, for the scanner picker."""
        return await self.repo.list_published_starting_after(utc_now() - SCANNER_LOOKBACK)

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    async def list_sessions(self, event_id: str) -> list[EventSession]:
        await self.repo.get_by_id(event_id)
        return await self.sessions.list_for_event(event_id)

    async def _get_session(self, event_id: str, session_id: str) -> EventSession:
        item = await self.sessions.get_in_event(event_id, session_id)
        if item is None:
            raise NotFoundError("Session not found")
        return item

    @staticmethod
    def _check_session_times(start: datetime, end: datetime) -> None:
        if end <= start:
            raise ValidationError("Session end time must be after start time")

    async def create_session(self, event_id: str, data: SessionCreate) -> EventSession:
        await self.repo.get_by_id(event_id)
        self._check_session_times(data.start_time, data.end_time)

        self._log_operation("Creating session", event_id=event_id, title=data.title)
        return await self._execute_db_operation(
            "create_session",
            self.sessions.create(event_id=event_id, **data.model_dump()),
        )

    async def update_session(
        self,
        event_id: str,
        session_id: str,
        data: SessionUpdate,
    ) -> EventSession:
        item = await self._get_session(event_id, session_id)
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return item

        self._check_session_times(
            update_data.get("start_time", item.start_time),
            update_data.get("end_time", item.end_time),
        )
        return await self._execute_db_operation(
            "update_session",
            self.sessions.apply(item, **update_data),
        )

    async def delete_session(self, event_id: str, session_id: str) -> None:
        item = await self._get_session(event_id, session_id)
        self._log_operation("Deleting session", event_id=event_id, session_id=session_id)
        await self.session.delete(item)
        await self.session.flush()

    async def duplicate_session(self, event_id: str, session_id: str) -> EventSession:
        item = await self._get_session(event_id, session_id)
        return await self.sessions.create(
            event_id=event_id,
            title=f"{item.title} (Copy)",
            **{field: getattr(item, field) for field in SESSION_CONTENT_FIELDS},
        )
