"""
Auth Schemas.
"""

from pydantic import BaseModel, EmailStr, Field


class AdminLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)


class UsherLoginRequest(BaseModel):
    access_code: str = ""


class UniversityLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class PrincipalResponse(BaseModel):
    """Claims of the authenticated caller."""

    id: str
    type: str
    role: str
    email: str | None = None
    name: str | None = None
    university_id: str | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    principal: PrincipalResponse
