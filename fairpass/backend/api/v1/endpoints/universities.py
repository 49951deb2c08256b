"""
Universities API Endpoints.

Admin management of universities, their event participation and their
portal login.
"""

from fastapi import APIRouter, Query

from fairpass.backend.core.dependencies import DbSession, ManagerAdmin
from fairpass.backend.integrations.ai import UniversityContent
from fairpass.backend.schemas.base import ApiResponse
from fairpass.backend.schemas.event import EventSummary
from fairpass.backend.schemas.university import (
    ContentRequest,
    ParticipationAssign,
    ParticipationResponse,
    ParticipationUpdate,
    UniversityCreate,
    UniversityDetail,
    UniversityListItem,
    UniversityResponse,
    UniversityUpdate,
    UniversityUserResponse,
    UniversityUserUpsert,
)
from fairpass.backend.services.university import UniversityService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[UniversityListItem]],
    summary="List universities",
    description="Ordered by name, with event and user counts.",
)
async def list_universities(
    db: DbSession,
    admin: ManagerAdmin,
    active_only: bool = Query(default=False),
) -> ApiResponse[list[UniversityListItem]]:
    return ApiResponse(data=await UniversityService(db).list_universities(active_only))


@router.post(
    "",
    response_model=ApiResponse[UniversityResponse],
    status_code=201,
    summary="Create a university",
)
async def create_university(
    data: UniversityCreate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityResponse]:
    university = await UniversityService(db).create_university(data)
    return ApiResponse(data=UniversityResponse.model_validate(university))


@router.post(
    "/generate-content",
    response_model=ApiResponse[UniversityContent],
    summary="Draft university content with AI",
)
async def generate_content(
    data: ContentRequest,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityContent]:
    return ApiResponse(data=await UniversityService(db).generate_university_content(data.name))


@router.get(
    "/{university_id}",
    response_model=ApiResponse[UniversityDetail],
    summary="Get a university",
)
async def get_university(
    university_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityDetail]:
    return ApiResponse(data=await UniversityService(db).get_university(university_id))


@router.patch(
    "/{university_id}",
    response_model=ApiResponse[UniversityResponse],
    summary="Update a university",
    description="Only provided fields are updated.",
)
async def update_university(
    university_id: str,
    data: UniversityUpdate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityResponse]:
    university = await UniversityService(db).update_university(university_id, data)
    return ApiResponse(data=UniversityResponse.model_validate(university))


@router.delete("/{university_id}", status_code=204, summary="Delete a university")
async def delete_university(university_id: str, db: DbSession, admin: ManagerAdmin) -> None:
    await UniversityService(db).delete_university(university_id)


# =============================================================================
# Participation
# =============================================================================


@router.get(
    "/{university_id}/available-events",
    response_model=ApiResponse[list[EventSummary]],
    summary="Events the university can be assigned to",
)
async def list_available_events(
    university_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[list[EventSummary]]:
    events = await UniversityService(db).list_available_events(university_id)
    return ApiResponse(data=[EventSummary.model_validate(e) for e in events])


@router.post(
    "/{university_id}/events",
    response_model=ApiResponse[ParticipationResponse],
    status_code=201,
    summary="Assign to an event",
)
async def assign_to_event(
    university_id: str,
    data: ParticipationAssign,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[ParticipationResponse]:
    participation = await UniversityService(db).assign_to_event(university_id, data)
    return ApiResponse(data=ParticipationResponse.model_validate(participation))


@router.patch(
    "/{university_id}/events/{event_id}",
    response_model=ApiResponse[ParticipationResponse],
    summary="Update participation",
    description="Change status (accept a request), booth number or notes.",
)
async def update_participation(
    university_id: str,
    event_id: str,
    data: ParticipationUpdate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[ParticipationResponse]:
    participation = await UniversityService(db).update_participation(university_id, event_id, data)
    return ApiResponse(data=ParticipationResponse.model_validate(participation))


@router.delete(
    "/{university_id}/events/{event_id}",
    status_code=204,
    summary="Remove from an event",
)
async def remove_from_event(
    university_id: str,
    event_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> None:
    await UniversityService(db).remove_from_event(university_id, event_id)


# =============================================================================
# Portal user
# =============================================================================


@router.get(
    "/{university_id}/user",
    response_model=ApiResponse[UniversityUserResponse | None],
    summary="Get the portal user",
)
async def get_university_user(
    university_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityUserResponse | None]:
    user = await UniversityService(db).get_university_user(university_id)
    return ApiResponse(data=UniversityUserResponse.model_validate(user) if user else None)


@router.put(
    "/{university_id}/user",
    response_model=ApiResponse[UniversityUserResponse],
    summary="Create or update the portal user",
)
async def upsert_university_user(
    university_id: str,
    data: UniversityUserUpsert,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[UniversityUserResponse]:
    user = await UniversityService(db).create_or_update_university_user(university_id, data)
    return ApiResponse(data=UniversityUserResponse.model_validate(user))
