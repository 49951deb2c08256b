"""
Integrations API Endpoints.

AI enrichment runs and CRM connection checks for admins.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import DbSession, ManagerAdmin, SuperAdmin
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.integrations import (
    BackfillRequest,
    BackfillResult,
    EnrichBulkRequest,
    EnrichBulkResult,
    EnrichmentResponse,
    ZohoStatusResponse,
    ZohoTestResult,
)
from fairpass.backend.services.enrichment import EnrichmentService
from fairpass.backend.services.integrations_admin import IntegrationsAdminService

router = APIRouter()


@router.post(
    "/enrichment/registrants/{registrant_id}",
    response_model=ApiResponse[EnrichmentResponse],
    summary="Enrich one registrant",
)
async def enrich_registrant(
    registrant_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EnrichmentResponse]:
    return ApiResponse(data=await EnrichmentService(db).enrich_registrant(registrant_id))


@router.post(
    "/enrichment/bulk",
    response_model=ApiResponse[EnrichBulkResult],
    summary="Enrich selected registrants",
)
async def enrich_bulk(
    data: EnrichBulkRequest,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EnrichBulkResult]:
    return ApiResponse(data=await EnrichmentService(db).enrich_bulk(data.registrant_ids))


@router.post(
    "/enrichment/backfill",
    response_model=ApiResponse[BackfillResult],
    summary="Enrich every registrant still missing AI fields",
)
async def backfill(
    data: BackfillRequest,
    db: DbSession,
    admin: SuperAdmin,
) -> ApiResponse[BackfillResult]:
    result = await EnrichmentService(db).backfill(
        batch_size=data.batch_size,
        delay_seconds=data.delay_seconds,
        max_batches=data.max_batches,
    )
    return ApiResponse(data=result)


@router.get(
    "/zoho/status",
    response_model=ApiResponse[ZohoStatusResponse],
    summary="Zoho connection status",
)
async def zoho_status(db: DbSession, admin: SuperAdmin) -> ApiResponse[ZohoStatusResponse]:
    return ApiResponse(data=await IntegrationsAdminService(db).zoho_status())


@router.post(
    "/zoho/test-lead",
    response_model=ApiResponse[ZohoTestResult],
    summary="Send a test lead to Zoho",
)
async def zoho_test_lead(db: DbSession, admin: SuperAdmin) -> ApiResponse[ZohoTestResult]:
    return ApiResponse(data=await IntegrationsAdminService(db).zoho_test_lead())
