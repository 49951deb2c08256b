"""
University Portal API Endpoints.

Routes for signed-in university representatives. Every call is scoped to
the university carried in the caller's token.
"""

from fastapi import APIRouter, Query

from fairpass.backend.core.dependencies import DbSession, UniversityMember
from fairpass.backend.schemas.base import ApiResponse, MessageResponse
from fairpass.backend.schemas.event import EventSummary
from fairpass.backend.schemas.university import (
    FavoriteCreate,
    FavoriteResponse,
    FavoriteUpdate,
    PortalParticipation,
    ScannedLead,
    ScanRequest,
    StudentSearchResult,
)
from fairpass.backend.services.university_portal import UniversityPortalService

router = APIRouter()


@router.get(
    "/events",
    response_model=ApiResponse[list[PortalParticipation]],
    summary="My events",
)
async def my_events(
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[list[PortalParticipation]]:
    participations = await UniversityPortalService(db, member.university_id).my_events()
    return ApiResponse(data=[PortalParticipation.model_validate(p) for p in participations])


@router.get(
    "/explore",
    response_model=ApiResponse[list[EventSummary]],
    summary="Events open to join",
)
async def explore_events(
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[list[EventSummary]]:
    events = await UniversityPortalService(db, member.university_id).explore_events()
    return ApiResponse(data=[EventSummary.model_validate(e) for e in events])


@router.post(
    "/events/{event_id}/request",
    response_model=ApiResponse[MessageResponse],
    summary="Request to participate",
)
async def request_event_access(
    event_id: str,
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[MessageResponse]:
    result = await UniversityPortalService(db, member.university_id).request_event_access(event_id)
    return ApiResponse(data=result)


@router.post(
    "/scan",
    response_model=ApiResponse[ScannedLead],
    summary="Scan a student ticket",
)
async def scan_lead(
    data: ScanRequest,
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[ScannedLead]:
    lead = await UniversityPortalService(db, member.university_id).scan_lead(data.qr_token)
    return ApiResponse(data=lead)


@router.get(
    "/students/search",
    response_model=ApiResponse[list[StudentSearchResult]],
    summary="Search students",
    description="Search by name, email or phone in one event or across all of the university's events.",
)
async def search_students(
    db: DbSession,
    member: UniversityMember,
    q: str = Query(default="", max_length=100),
    event_id: str | None = Query(default=None),
    global_scope: bool = Query(default=False, alias="global"),
) -> ApiResponse[list[StudentSearchResult]]:
    results = await UniversityPortalService(db, member.university_id).search_students(
        q, event_id=event_id, global_scope=global_scope
    )
    return ApiResponse(data=results)


# =============================================================================
# Favorites
# =============================================================================


@router.get(
    "/favorites",
    response_model=ApiResponse[list[FavoriteResponse]],
    summary="List favorites for an event",
)
async def list_favorites(
    db: DbSession,
    member: UniversityMember,
    event_id: str | None = Query(default=None),
) -> ApiResponse[list[FavoriteResponse]]:
    favorites = await UniversityPortalService(db, member.university_id).list_favorites(event_id)
    return ApiResponse(data=favorites)


@router.post(
    "/favorites",
    response_model=ApiResponse[FavoriteResponse],
    status_code=201,
    summary="Add a favorite",
)
async def add_favorite(
    data: FavoriteCreate,
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[FavoriteResponse]:
    favorite = await UniversityPortalService(db, member.university_id).add_favorite(data)
    return ApiResponse(data=favorite)


@router.patch(
    "/favorites/{favorite_id}",
    response_model=ApiResponse[FavoriteResponse],
    summary="Update a favorite",
)
async def update_favorite(
    favorite_id: str,
    data: FavoriteUpdate,
    db: DbSession,
    member: UniversityMember,
) -> ApiResponse[FavoriteResponse]:
    favorite = await UniversityPortalService(db, member.university_id).update_favorite(
        favorite_id, data
    )
    return ApiResponse(data=favorite)


@router.delete("/favorites/{favorite_id}", status_code=204, summary="Remove a favorite")
async def delete_favorite(favorite_id: str, db: DbSession, member: UniversityMember) -> None:
    await UniversityPortalService(db, member.university_id).delete_favorite(favorite_id)
