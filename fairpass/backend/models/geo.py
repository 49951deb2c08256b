"""
Country and City Models.

Reference data behind the city guide pages shown to visiting students.
"""

from typing import Any

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fairpass.backend.models.base import Base, TimestampMixin, UUIDMixin


class Country(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "countries"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(8), unique=True, nullable=False)
    flag_emoji: Mapped[str | None] = mapped_column(String(16), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), default="UTC", nullable=False)

    cities: Mapped[list["City"]] = relationship(
        back_populates="country",
        cascade="all, delete-orphan",
        order_by="City.name",
    )


class City(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "cities"

    country_id: Mapped[str] = mapped_column(
        ForeignKey("countries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    banner_image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    attractions: Mapped[list[Any]] = mapped_column(JSON, default=list, nullable=False)
    cafes_and_food: Mapped[list[Any]] = mapped_column(JSON, default=list, nullable=False)
    transportation: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    local_tips: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_info: Mapped[str | None] = mapped_column(Text, nullable=True)

    country: Mapped[Country] = relationship(back_populates="cities", lazy="selectin")

    @property
    def country_name(self) -> str:
        return self.country.name
