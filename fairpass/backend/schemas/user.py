"""
Admin User Schemas.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from fairpass.backend.models.enums import AdminRole
from fairpass.backend.schemas.base import OrmSchema, PartialUpdate


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    role: AdminRole
    password: str | None = Field(default=None, min_length=6)
    access_code: str | None = Field(default=None, max_length=64)


class UserUpdate(PartialUpdate):
    """Partial update. A password, when sent, is re-hashed."""

    not_null = ("name", "email", "role", "is_active")

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: EmailStr | None = None
    role: AdminRole | None = None
    password: str | None = Field(default=None, min_length=6)
    access_code: str | None = Field(default=None, max_length=64)
    is_active: bool | None = None


class UserResponse(OrmSchema):
    id: str
    name: str
    email: str
    role: str
    access_code: str | None
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime
