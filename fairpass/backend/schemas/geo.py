"""
Country and City Schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fairpass.backend.schemas.base import OptionalUrl, OrmSchema, PartialUpdate


class CountryCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    code: str = Field(..., min_length=2, max_length=8, description="Stored upper-case")
    flag_emoji: str | None = None
    timezone: str = "UTC"

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str) -> str:
        return value.strip().upper()


class CountryUpdate(PartialUpdate):
    not_null = ("name", "code", "timezone")

    name: str | None = Field(default=None, min_length=2, max_length=120)
    code: str | None = Field(default=None, min_length=2, max_length=8)
    flag_emoji: str | None = None
    timezone: str | None = None

    @field_validator("code")
    @classmethod
    def upper_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None


class CountryResponse(OrmSchema):
    id: str
    name: str
    code: str
    flag_emoji: str | None
    timezone: str
    created_at: datetime


class CountryListItem(CountryResponse):
    city_count: int


class CitySummary(OrmSchema):
    id: str
    name: str
    country_id: str


class CountryDetail(CountryResponse):
    cities: list[CitySummary] = Field(default_factory=list)


class CityCreate(BaseModel):
    country_id: str
    name: str = Field(..., min_length=2, max_length=120)
    description: str | None = None
    banner_image_url: OptionalUrl = None
    attractions: list[Any] = Field(default_factory=list)
    cafes_and_food: list[Any] = Field(default_factory=list)
    transportation: dict[str, Any] = Field(default_factory=dict)
    local_tips: str | None = None
    emergency_info: str | None = None


class CityUpdate(PartialUpdate):
    not_null = ("country_id", "name", "attractions", "cafes_and_food", "transportation")

    country_id: str | None = None
    name: str | None = Field(default=None, min_length=2, max_length=120)
    description: str | None = None
    banner_image_url: OptionalUrl = None
    attractions: list[Any] | None = None
    cafes_and_food: list[Any] | None = None
    transportation: dict[str, Any] | None = None
    local_tips: str | None = None
    emergency_info: str | None = None


class CityResponse(OrmSchema):
    id: str
    country_id: str
    country_name: str
    name: str
    description: str | None
    banner_image_url: str | None
    attractions: list[Any]
    cafes_and_food: list[Any]
    transportation: dict[str, Any]
    local_tips: str | None
    emergency_info: str | None
    created_at: datetime


class CityContentRequest(BaseModel):
    city: str = Field(..., min_length=2)
    country: str = Field(..., min_length=2)
