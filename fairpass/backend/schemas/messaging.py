"""
Message Template Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from fairpass.backend.schemas.base import OrmSchema, PartialUpdate


class TemplateResponse(OrmSchema):
    id: str
    name: str
    channel: str
    subject: str | None
    body: str
    description: str | None
    is_default: bool
    updated_at: datetime


class TemplatePreview(BaseModel):
    """A template rendered with sample values."""

    subject: str | None
    body: str


class TemplateUpdate(PartialUpdate):
    not_null = ("body",)

    subject: str | None = None
    body: str | None = Field(default=None, min_length=1)
