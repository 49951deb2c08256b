"""
Base Schemas.

Standard API response schemas and shared field helpers.
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Generic, TypeVar

from pydantic import (
    AfterValidator,
    AnyHttpUrl,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError

from fairpass.backend.core.utils import to_naive_utc, utc_now

DataT = TypeVar("DataT")

# Datetimes are stored naive UTC; aware input is converted on the way in
UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]

_http_url = TypeAdapter(AnyHttpUrl)


def empty_to_none(value: Any) -> Any:
    """Treat blank strings from forms as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ResponseMetadata(BaseModel):
    """Metadata included in all API responses."""

    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ErrorDetail(BaseModel):
    """Error detail structure."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Standard API response envelope.

    All API responses use this structure for consistency.
    """

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Standard error response."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)


class PaginationInfo(BaseModel):
    """Pagination metadata."""

    total: int
    limit: int
    offset: int
    has_more: bool = False


class PaginatedResponse(BaseModel, Generic[DataT]):
    """Paginated response with offset-based navigation."""

    success: bool = True
    data: list[DataT]
    error: None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)
    pagination: PaginationInfo


class OrmSchema(BaseModel):
    """Response schema read from ORM attributes."""

    model_config = ConfigDict(from_attributes=True)


class PartialUpdate(BaseModel):
    """
    Request body for a partial update: only the fields that are sent change.

    Fields named in `not_null` back NOT NULL columns. They may be left out
    but not sent as an explicit null.
    """

    not_null: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self) -> "PartialUpdate":
        nulls = [
            name for name in self.not_null
            if name in self.model_fields_set and getattr(self, name) is None
        ]
        if nulls:
            raise ValueError(f"Cannot be null: {', '.join(nulls)}")
        return self


class MessageResponse(BaseModel):
    """Plain acknowledgement for operations without a resource body."""

    message: str


def check_url(value: str | None) -> str | None:
    """Validate an absolute http(s) URL but keep the caller's exact string."""
    if value is not None:
        try:
            _http_url.validate_python(value)
        except PydanticValidationError as e:
            raise ValueError("Invalid URL") from e
    return value


# Optional URL where an empty string from a form means "no URL"
OptionalUrl = Annotated[str | None, BeforeValidator(empty_to_none), AfterValidator(check_url)]
Url = Annotated[str, AfterValidator(check_url)]
