"""
Event Schemas.

Pydantic schemas for event and agenda session request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from fairpass.backend.models.enums import EventStatus
from fairpass.backend.schemas.base import OptionalUrl, OrmSchema, PartialUpdate, Url, UtcDateTime

SLUG_PATTERN = r"^[a-z0-9-]+$"


class EventBase(BaseModel):
    """Fields shared by create and update."""

    title: str = Field(..., min_length=3, max_length=255, examples=["Education Fair Istanbul 2026"])
    slug: str = Field(
        ...,
        min_length=3,
        max_length=255,
        pattern=SLUG_PATTERN,
        description="Lowercase letters, numbers and hyphens",
        examples=["education-fair-istanbul-2026"],
    )
    country: str = Field(..., min_length=2, max_length=120)
    city: str = Field(..., min_length=2, max_length=120)
    venue_name: str = Field(..., min_length=2, max_length=255)
    venue_address: str = Field(..., min_length=5, max_length=500)
    map_url: OptionalUrl = None
    start_date_time: UtcDateTime
    end_date_time: UtcDateTime
    timezone: str = Field(default="UTC", max_length=64)
    banner_image_url: OptionalUrl = None
    gallery_images: list[Url] = Field(default_factory=list)
    description: str | None = None
    registration_open_at: UtcDateTime | None = None
    registration_close_at: UtcDateTime | None = None
    capacity: int | None = Field(default=None, gt=0)
    status: EventStatus = EventStatus.DRAFT

    ga_tracking_id: str | None = None
    fb_pixel_id: str | None = None
    linkedin_partner_id: str | None = None
    tiktok_pixel_id: str | None = None
    snap_pixel_id: str | None = None
    zoho_lead_source: str | None = None
    zoho_campaign_id: str | None = None

    @model_validator(mode="after")
    def check_dates(self) -> "EventBase":
        if self.end_date_time <= self.start_date_time:
            raise ValueError("End date must be after start date")
        if (
            self.registration_open_at is not None
            and self.registration_close_at is not None
            and self.registration_open_at >= self.registration_close_at
        ):
            raise ValueError("Registration must open before it closes")
        return self


class EventCreate(EventBase):
    """Schema for creating an event."""


class EventUpdate(EventBase):
    """
    Schema for updating an event.

    Events are edited through the same form they are created with, so an
    update carries the full field set.
    """


class SessionResponse(OrmSchema):
    id: str
    event_id: str
    title: str
    description: str | None
    start_time: datetime
    end_time: datetime
    location: str | None
    speaker: str | None
    order: int


class EventResponse(OrmSchema):
    """Full event record."""

    id: str
    title: str
    slug: str
    country: str
    city: str
    venue_name: str
    venue_address: str
    map_url: str | None
    start_date_time: datetime
    end_date_time: datetime
    timezone: str
    banner_image_url: str | None
    gallery_images: list[str]
    description: str | None
    registration_open_at: datetime | None
    registration_close_at: datetime | None
    capacity: int | None
    status: str
    ga_tracking_id: str | None
    fb_pixel_id: str | None
    linkedin_partner_id: str | None
    tiktok_pixel_id: str | None
    snap_pixel_id: str | None
    zoho_lead_source: str | None
    zoho_campaign_id: str | None
    created_by_id: str | None
    created_at: datetime
    updated_at: datetime


class EventDetailResponse(EventResponse):
    sessions: list[SessionResponse] = Field(default_factory=list)


class EventSummary(OrmSchema):
    """Event card for lists."""

    id: str
    title: str
    slug: str
    country: str
    city: str
    venue_name: str
    start_date_time: datetime
    end_date_time: datetime
    banner_image_url: str | None
    capacity: int | None
    status: str


class ScannerEvent(OrmSchema):
    id: str
    title: str
    start_date_time: datetime


class SessionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    start_time: UtcDateTime
    end_time: UtcDateTime
    location: str | None = None
    speaker: str | None = None
    order: int = 0


class SessionUpdate(PartialUpdate):
    """Partial session update. Only fields that are sent change."""

    not_null = ("title", "start_time", "end_time", "order")

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    start_time: UtcDateTime | None = None
    end_time: UtcDateTime | None = None
    location: str | None = None
    speaker: str | None = None
    order: int | None = None
