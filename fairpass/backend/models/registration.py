"""
Registration Models.

Registrant is the student, Registration joins a registrant to one event
and carries the QR token, CheckIn records the scan at the door.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fairpass.backend.core.utils import utc_now
from fairpass.backend.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fairpass.backend.models.event import Event
    from fairpass.backend.models.university import FavoriteStudent


class Registrant(UUIDMixin, TimestampMixin, Base):
    """A student. Shared across events, matched by email or phone."""

    __tablename__ = "registrants"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    country: Mapped[str] = mapped_column(String(120), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False)
    nationality: Mapped[str | None] = mapped_column(String(120), nullable=True)
    level_of_study: Mapped[str | None] = mapped_column(String(120), nullable=True)
    interested_major: Mapped[str | None] = mapped_column(String(255), nullable=True)

    consent_accepted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    consent_timestamp: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    utm_source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    utm_medium: Mapped[str | None] = mapped_column(String(255), nullable=True)
    utm_campaign: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Filled by AI enrichment
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    standardized_major: Mapped[str | None] = mapped_column(String(255), nullable=True)
    major_category: Mapped[str | None] = mapped_column(String(255), nullable=True)

    registrations: Mapped[list["Registration"]] = relationship(
        back_populates="registrant",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Registrant(id={self.id}, email={self.email!r})>"


class Registration(UUIDMixin, TimestampMixin, Base):
    """One registrant at one event. The QR token is the ticket."""

    __tablename__ = "registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "registrant_id", name="uq_registration_event_registrant"),
    )

    event_id: Mapped[str] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    registrant_id: Mapped[str] = mapped_column(
        ForeignKey("registrants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    qr_token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), default="REGISTERED", nullable=False)

    event: Mapped["Event"] = relationship(back_populates="registrations", lazy="selectin")
    registrant: Mapped[Registrant] = relationship(back_populates="registrations", lazy="selectin")
    check_in: Mapped["CheckIn | None"] = relationship(
        back_populates="registration",
        cascade="all, delete-orphan",
        uselist=False,
        lazy="selectin",
    )
    favorites: Mapped[list["FavoriteStudent"]] = relationship(
        back_populates="registration",
        cascade="all, delete-orphan",
    )

    @property
    def event_title(self) -> str:
        return self.event.title

    @property
    def checked_in(self) -> bool:
        return self.check_in is not None

    @property
    def checked_in_at(self) -> datetime | None:
        return self.check_in.checked_in_at if self.check_in else None

    def __repr__(self) -> str:
        return f"<Registration(id={self.id}, event_id={self.event_id})>"


class CheckIn(UUIDMixin, TimestampMixin, Base):
    """Entry scan. The unique registration_id keeps check-in to once per ticket."""

    __tablename__ = "check_ins"

    registration_id: Mapped[str] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    checked_in_by_id: Mapped[str | None] = mapped_column(
        ForeignKey("admin_users.id", ondelete="SET NULL"),
        nullable=True,
    )
    method: Mapped[str] = mapped_column(String(20), nullable=False)
    checked_in_at: Mapped[datetime] = mapped_column(DateTime, default=utc_now, nullable=False)

    registration: Mapped[Registration] = relationship(back_populates="check_in")
