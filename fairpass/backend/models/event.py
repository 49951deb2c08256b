"""
Event Models.

An education fair and the agenda sessions that run during it.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fairpass.backend.models.base import Base, TimestampMixin, UUIDMixin
from fairpass.backend.models.enums import EventStatus

if TYPE_CHECKING:
    from fairpass.backend.models.messaging import MessageLog
    from fairpass.backend.models.registration import Registration
    from fairpass.backend.models.university import EventParticipating


class Event(UUIDMixin, TimestampMixin, Base):
    """A fair that students register for. Only PUBLISHED events accept registrations."""

    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    venue_address: Mapped[str] = mapped_column(String(500), nullable=False)
    map_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    start_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    end_date_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)
    banner_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    gallery_images: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    registration_open_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    registration_close_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=EventStatus.DRAFT,
        nullable=False,
        index=True,
    )

    # Marketing pixels rendered by the public site
    ga_tracking_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    fb_pixel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    linkedin_partner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    tiktok_pixel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    snap_pixel_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    zoho_lead_source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    zoho_campaign_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    )

    sessions: Mapped[list["EventSession"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventSession.start_time",
    )
    registrations: Mapped[list["Registration"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
    )
    participations: Mapped[list["EventParticipating"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
    )
    message_logs: Mapped[list["MessageLog"]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug={self.slug!r}, status={self.status})>"


class EventSession(UUIDMixin, TimestampMixin, Base):
    """Agenda item within an event."""

    __tablename__ = "event_sessions"

    event_id: Mapped[str] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    speaker: Mapped[str | None] = mapped_column(String(255), nullable=True)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    event: Mapped[Event] = relationship(back_populates="sessions")

    def __repr__(self) -> str:
        return f"<EventSession(id={self.id}, title={self.title!r})>"
