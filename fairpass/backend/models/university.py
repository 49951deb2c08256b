"""
University Models.

Exhibiting universities, their portal users, their participation in events
and the students they bookmark while working a fair.
"""

from typing import TYPE_CHECKING

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fairpass.backend.models.base import Base, TimestampMixin, UUIDMixin
from fairpass.backend.models.enums import ParticipationStatus

if TYPE_CHECKING:
    from fairpass.backend.models.event import Event
    from fairpass.backend.models.registration import Registration


class University(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "universities"

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    logo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    website: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    country: Mapped[str] = mapped_column(String(120), default="Unknown", nullable=False)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    programs: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    users: Mapped[list["UniversityUser"]] = relationship(
        back_populates="university",
        cascade="all, delete-orphan",
    )
    participations: Mapped[list["EventParticipating"]] = relationship(
        back_populates="university",
        cascade="all, delete-orphan",
    )
    favorites: Mapped[list["FavoriteStudent"]] = relationship(
        back_populates="university",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<University(id={self.id}, name={self.name!r})>"


class UniversityUser(UUIDMixin, TimestampMixin, Base):
    """Portal account for a university representative."""

    __tablename__ = "university_users"

    university_id: Mapped[str] = mapped_column(
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)

    university: Mapped[University] = relationship(back_populates="users")


class EventParticipating(UUIDMixin, TimestampMixin, Base):
    """A university's place at an event. Scanning leads requires ACCEPTED."""

    __tablename__ = "event_participations"
    __table_args__ = (
        UniqueConstraint("event_id", "university_id", name="uq_participation_event_university"),
    )

    event_id: Mapped[str] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    university_id: Mapped[str] = mapped_column(
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=ParticipationStatus.INVITED,
        nullable=False,
    )
    booth_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    event: Mapped["Event"] = relationship(back_populates="participations", lazy="selectin")
    university: Mapped[University] = relationship(back_populates="participations", lazy="selectin")


class FavoriteStudent(UUIDMixin, TimestampMixin, Base):
    """A registration bookmarked by a university, with a private note and rating."""

    __tablename__ = "favorite_students"
    __table_args__ = (
        UniqueConstraint(
            "event_id",
            "university_id",
            "registration_id",
            name="uq_favorite_event_university_registration",
        ),
    )

    event_id: Mapped[str] = mapped_column(
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    university_id: Mapped[str] = mapped_column(
        ForeignKey("universities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    registration_id: Mapped[str] = mapped_column(
        ForeignKey("registrations.id", ondelete="CASCADE"),
        nullable=False,
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    university: Mapped[University] = relationship(back_populates="favorites")
    registration: Mapped["Registration"] = relationship(
        back_populates="favorites",
        lazy="selectin",
    )
