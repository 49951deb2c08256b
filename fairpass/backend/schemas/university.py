"""
University Schemas.

Admin-side university management and the university portal.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from fairpass.backend.models.enums import ParticipationStatus
from fairpass.backend.schemas.base import OptionalUrl, OrmSchema, PartialUpdate
from fairpass.backend.schemas.event import EventSummary


class UniversityCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=255)
    logo_url: OptionalUrl = None
    website: OptionalUrl = None
    country: str = "Unknown"
    city: str | None = None
    description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    programs: list[str] = Field(default_factory=list)
    is_active: bool = True


class UniversityUpdate(PartialUpdate):
    """Partial update. Only fields that are sent change."""

    not_null = ("name", "country", "programs", "is_active")

    name: str | None = Field(default=None, min_length=2, max_length=255)
    logo_url: OptionalUrl = None
    website: OptionalUrl = None
    country: str | None = None
    city: str | None = None
    description: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    programs: list[str] | None = None
    is_active: bool | None = None


class UniversityResponse(OrmSchema):
    id: str
    name: str
    logo_url: str | None
    website: str | None
    country: str
    city: str | None
    description: str | None
    contact_email: str | None
    contact_phone: str | None
    programs: list[str]
    is_active: bool
    created_at: datetime


class UniversityListItem(UniversityResponse):
    event_count: int
    user_count: int


class UniversityUserResponse(OrmSchema):
    id: str
    university_id: str
    email: str
    name: str
    created_at: datetime


class ParticipationResponse(OrmSchema):
    id: str
    event_id: str
    university_id: str
    status: str
    booth_number: str | None
    notes: str | None
    created_at: datetime
    event: EventSummary


class UniversityDetail(UniversityResponse):
    participations: list[ParticipationResponse] = Field(default_factory=list)
    users: list[UniversityUserResponse] = Field(default_factory=list)


class ParticipationAssign(BaseModel):
    event_id: str
    booth_number: str | None = None
    notes: str | None = None


class ParticipationUpdate(PartialUpdate):
    not_null = ("status",)

    status: ParticipationStatus | None = None
    booth_number: str | None = None
    notes: str | None = None


class UniversityUserUpsert(BaseModel):
    email: EmailStr
    password: str | None = Field(default=None, min_length=6)
    name: str | None = None


class ContentRequest(BaseModel):
    name: str = Field(..., min_length=2)


# =============================================================================
# Portal
# =============================================================================


class PortalParticipation(OrmSchema):
    """The university's own view of an event it is part of."""

    id: str
    status: str
    booth_number: str | None
    event: EventSummary


class ScannedLead(BaseModel):
    name: str
    email: str
    phone: str
    academic_interest: str


class ScanRequest(BaseModel):
    qr_token: str = Field(..., min_length=1)


class FavoriteCreate(BaseModel):
    event_id: str
    registration_id: str
    note: str | None = None
    rating: int = Field(default=0, ge=0, le=5)


class FavoriteUpdate(BaseModel):
    note: str | None = None
    rating: int | None = Field(default=None, ge=0, le=5)


class FavoriteStudentInfo(BaseModel):
    registration_id: str
    full_name: str
    email: str
    phone: str
    country: str
    city: str
    interested_major: str | None
    level_of_study: str | None
    checked_in: bool


class FavoriteResponse(BaseModel):
    id: str
    event_id: str
    registration_id: str
    note: str | None
    rating: int
    created_at: datetime
    student: FavoriteStudentInfo | None = None


class StudentSearchResult(BaseModel):
    registration_id: str
    registrant_id: str
    full_name: str
    email: str
    phone: str
    country: str
    city: str
    interested_major: str | None
    major_category: str | None
    level_of_study: str | None
    checked_in: bool
    event_id: str
    event_title: str
    event_slug: str
    is_favorite: bool
    favorite_id: str | None = None
    favorite_note: str | None = None
    favorite_rating: int = 0
