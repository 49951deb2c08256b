"""
Scanner API Endpoints.

Venue entry scanning for any admin, ushers included.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import AnyAdmin, DbSession
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.event import ScannerEvent
from fairpass.backend.schemas.registration import CheckInRequest, CheckInResult, LiveStats
from fairpass.backend.services.checkin import CheckInService
from fairpass.backend.services.event import EventService

router = APIRouter()


@router.get(
    "/events",
    response_model=ApiResponse[list[ScannerEvent]],
    summary="Events to scan",
    description="Published events that started at most a week ago.",
)
async def list_scanner_events(db: DbSession, admin: AnyAdmin) -> ApiResponse[list[ScannerEvent]]:
    events = await EventService(db).list_scanner_events()
    return ApiResponse(data=[ScannerEvent.model_validate(e) for e in events])


@router.post(
    "/check-in",
    response_model=ApiResponse[CheckInResult],
    summary="Check a ticket in",
    description=(
        "Check in by QR token or by email/phone search. "
        "An unknown ticket returns success=false with HTTP 200."
    ),
)
async def check_in(
    data: CheckInRequest,
    db: DbSession,
    admin: AnyAdmin,
) -> ApiResponse[CheckInResult]:
    result = await CheckInService(db).check_in(
        data.event_id,
        token=data.token,
        search=data.search,
        operator_id=admin.id,
    )
    return ApiResponse(data=result)


@router.get(
    "/events/{event_id}/stats",
    response_model=ApiResponse[LiveStats],
    summary="Live check-in count",
)
async def live_stats(event_id: str, db: DbSession, admin: AnyAdmin) -> ApiResponse[LiveStats]:
    return ApiResponse(data=await CheckInService(db).live_stats(event_id))
