"""
Registrations API Endpoints.

Admin listing, detail, CSV export and bulk lead import.
"""

from typing import Any

from fastapi import APIRouter, Query
from fastapi.responses import Response

from fairpass.backend.core.dependencies import DbSession, ManagerAdmin, RequestId
from fairpass.backend.core.pagination import Pagination, create_paginated_response
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.registration import (
    ImportRequest,
    ImportResult,
    RegistrationDetail,
    RegistrationListItem,
)
from fairpass.backend.services.registrations_admin import RegistrationsAdminService

router = APIRouter()


@router.get(
    "",
    summary="List registrations (paginated)",
    description="Newest first, filtered by event and name/email/phone search.",
)
async def list_registrations(
    db: DbSession,
    request_id: RequestId,
    admin: ManagerAdmin,
    pagination: Pagination,
    event_id: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
) -> dict[str, Any]:
    registrations, total = await RegistrationsAdminService(db).list_registrations_paginated(
        event_id=event_id,
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=registrations,
        item_schema=RegistrationListItem,
        total=total,
        pagination=pagination,
        request_id=request_id,
    )


@router.get(
    "/export",
    summary="Export registrations as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_registrations(
    db: DbSession,
    admin: ManagerAdmin,
    event_id: str | None = Query(default=None),
) -> Response:
    content, filename = await RegistrationsAdminService(db).export_csv(event_id)
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "/import",
    response_model=ApiResponse[ImportResult],
    summary="Import leads",
    description="Register a batch of leads for an event and email each new one a ticket.",
)
async def import_leads(
    data: ImportRequest,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[ImportResult]:
    return ApiResponse(data=await RegistrationsAdminService(db).import_leads(data))


@router.get(
    "/{registration_id}",
    response_model=ApiResponse[RegistrationDetail],
    summary="Get a registration",
)
async def get_registration(
    registration_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[RegistrationDetail]:
    return ApiResponse(data=await RegistrationsAdminService(db).get_registration(registration_id))
