"""
Registration Schemas.

Public registration form, tickets, kiosk recovery, exhibitor inquiries,
check-in and the admin registration views.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from fairpass.backend.schemas.base import OptionalUrl, OrmSchema

Locale = Literal["en", "tr", "ar"]


class RegistrationForm(BaseModel):
    """Public registration form."""

    full_name: str = Field(..., min_length=2, max_length=255, examples=["Ada Lovelace"])
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=50, examples=["+905551234567"])
    country: str = Field(..., min_length=2, max_length=120)
    city: str = Field(..., min_length=2, max_length=120)
    nationality: str | None = None
    level_of_study: str | None = None
    interested_major: str | None = None
    consent: bool
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    locale: Locale = "en"

    @field_validator("consent")
    @classmethod
    def consent_given(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must agree to the terms and privacy policy")
        return value


class RegistrationResult(BaseModel):
    registration_id: str
    qr_token: str


class RegistrantResponse(OrmSchema):
    id: str
    full_name: str
    email: str
    phone: str
    country: str
    city: str
    nationality: str | None
    level_of_study: str | None
    interested_major: str | None
    consent_accepted: bool
    consent_timestamp: datetime | None
    utm_source: str | None
    utm_medium: str | None
    utm_campaign: str | None
    gender: str | None
    standardized_major: str | None
    major_category: str | None
    created_at: datetime


class CheckInResponse(OrmSchema):
    id: str
    checked_in_at: datetime
    method: str
    checked_in_by_id: str | None


class TicketEvent(OrmSchema):
    id: str
    title: str
    slug: str
    venue_name: str
    venue_address: str
    city: str
    country: str
    start_date_time: datetime
    end_date_time: datetime
    timezone: str
    map_url: str | None
    banner_image_url: str | None


class TicketResponse(OrmSchema):
    """Everything the /r/{token} pass page shows."""

    id: str
    qr_token: str
    status: str
    qr_url: str
    qr_image: str = Field(description="QR code as a PNG data URL")
    registrant: RegistrantResponse
    event: TicketEvent
    check_in: CheckInResponse | None


class ResendTicketRequest(BaseModel):
    email: EmailStr


class KioskRecoveryRequest(BaseModel):
    email_or_phone: str = ""


class KioskRecoveryResult(BaseModel):
    qr_token: str
    student_name: str


class ExhibitorInquiry(BaseModel):
    institution_name: str = Field(..., min_length=2, max_length=255)
    contact_person: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=50)
    country: str = Field(..., min_length=2, max_length=120)
    website: OptionalUrl = None
    notes: str | None = None
    utm_source: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None


# =============================================================================
# Check-in
# =============================================================================


class CheckInRequest(BaseModel):
    event_id: str | None = None
    token: str | None = None
    search: str | None = Field(default=None, description="Email or phone fragment")


class CheckedInRegistration(BaseModel):
    student_name: str
    email: str
    already_checked_in: bool
    checked_in_at: datetime | None = None


class CheckInResult(BaseModel):
    """Scanner outcome. A miss is success=false rather than an HTTP error."""

    success: bool
    message: str
    registration: CheckedInRegistration | None = None


class LiveStats(BaseModel):
    check_in_count: int


# =============================================================================
# Admin views
# =============================================================================


class MessageLogResponse(OrmSchema):
    id: str
    channel: str
    template_name: str
    provider_message_id: str | None
    status: str
    error_text: str | None
    sent_at: datetime | None
    created_at: datetime


class RegistrationListItem(OrmSchema):
    id: str
    event_id: str
    event_title: str
    qr_token: str
    status: str
    created_at: datetime
    registrant: RegistrantResponse
    checked_in: bool
    checked_in_at: datetime | None


class RegistrationDetail(RegistrationListItem):
    event: TicketEvent
    check_in: CheckInResponse | None
    message_logs: list[MessageLogResponse] = Field(default_factory=list)


class ImportLead(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=5, max_length=50)
    country: str = "Unknown"
    city: str = "Unknown"
    language: Locale = "en"
    source: str = "Import"


class ImportRequest(BaseModel):
    event_id: str
    leads: list[ImportLead]


class ImportDetail(BaseModel):
    email: str
    status: Literal["success", "updated", "error"]
    message: str | None = None
    qr_token: str | None = None


class ImportResult(BaseModel):
    total: int = 0
    success: int = 0
    updated: int = 0
    duplicates: int = 0
    errors: int = 0
    details: list[ImportDetail] = Field(default_factory=list)
