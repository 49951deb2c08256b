"""
Enrichment and CRM administration schemas.
"""

from pydantic import BaseModel, Field


class EnrichmentResponse(BaseModel):
    standardized_major: str | None
    major_category: str | None
    gender: str | None


class EnrichBulkRequest(BaseModel):
    registrant_ids: list[str] = Field(..., min_length=1)


class EnrichBulkResult(BaseModel):
    success: int = 0
    failed: int = 0
    errors: list[str] = Field(default_factory=list)


class BackfillRequest(BaseModel):
    batch_size: int | None = Field(default=None, ge=1, le=500)
    delay_seconds: float | None = Field(default=None, ge=0)
    max_batches: int | None = Field(default=None, ge=1)


class BackfillResult(BaseModel):
    processed: int
    batches: int


class ZohoStatusResponse(BaseModel):
    connected: bool
    message: str
    expires_in: int | None = None
    error: str | None = None
    missing: dict[str, bool] = Field(default_factory=dict)


class ZohoTestResult(BaseModel):
    success: bool
    lead_id: str | None = None
    error: str | None = None
