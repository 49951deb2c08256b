"""
Events API Endpoints.

Admin management of events, their agenda sessions and per-event analytics.
"""

from typing import Any

from fastapi import APIRouter, Query

from fairpass.backend.core.dependencies import DbSession, ManagerAdmin, RequestId, StaffAdmin
from fairpass.backend.core.pagination import Pagination, create_paginated_response
from fairpass.backend.models.enums import EventStatus
from fairpass.backend.schemas.analytics import EventAnalytics
from fairpass.backend.schemas.base import ApiResponse, MessageResponse
from fairpass.backend.schemas.event import (
    EventCreate,
    EventDetailResponse,
    EventResponse,
    EventUpdate,
    SessionCreate,
    SessionResponse,
    SessionUpdate,
)
from fairpass.backend.services.analytics import AnalyticsService
from fairpass.backend.services.event import EventService
from fairpass.backend.services.university import UniversityService

router = APIRouter()


@router.get(
    "",
    summary="List events (paginated)",
    description="Events newest start first, optionally filtered by status and title/city search.",
)
async def list_events(
    db: DbSession,
    request_id: RequestId,
    admin: ManagerAdmin,
    pagination: Pagination,
    status: EventStatus | None = Query(default=None, description="Filter by status"),
    search: str | None = Query(default=None, max_length=100, description="Title or city"),
) -> dict[str, Any]:
    events, total = await EventService(db).list_events_paginated(
        status=status,
        search=search,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=events,
        item_schema=EventResponse,
        total=total,
        pagination=pagination,
        request_id=request_id,
    )


@router.post(
    "",
    response_model=ApiResponse[EventDetailResponse],
    status_code=201,
    summary="Create an event",
)
async def create_event(
    data: EventCreate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EventDetailResponse]:
    event = await EventService(db).create_event(data, created_by_id=admin.id)
    return ApiResponse(data=EventDetailResponse.model_validate(event))


@router.get(
    "/{event_id}",
    response_model=ApiResponse[EventDetailResponse],
    summary="Get an event",
)
async def get_event(
    event_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EventDetailResponse]:
    event = await EventService(db).get_event(event_id)
    return ApiResponse(data=EventDetailResponse.model_validate(event))


@router.put(
    "/{event_id}",
    response_model=ApiResponse[EventDetailResponse],
    summary="Update an event",
    description="Replace the event's fields.",
)
async def update_event(
    event_id: str,
    data: EventUpdate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EventDetailResponse]:
    event = await EventService(db).update_event(event_id, data)
    return ApiResponse(data=EventDetailResponse.model_validate(event))


@router.delete(
    "/{event_id}",
    status_code=204,
    summary="Delete an event",
    description="Delete an event with its sessions, registrations and participations.",
)
async def delete_event(event_id: str, db: DbSession, admin: ManagerAdmin) -> None:
    await EventService(db).delete_event(event_id)


@router.post(
    "/{event_id}/duplicate",
    response_model=ApiResponse[EventDetailResponse],
    status_code=201,
    summary="Duplicate an event",
    description="Copy the event and its sessions into a new draft.",
)
async def duplicate_event(
    event_id: str,
    db: DbSession,
    admin: StaffAdmin,
) -> ApiResponse[EventDetailResponse]:
    event = await EventService(db).duplicate_event(event_id, created_by_id=admin.id)
    return ApiResponse(data=EventDetailResponse.model_validate(event))


@router.get(
    "/{event_id}/analytics",
    response_model=ApiResponse[EventAnalytics],
    summary="Event analytics",
)
async def event_analytics(
    event_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[EventAnalytics]:
    return ApiResponse(data=await AnalyticsService(db).event_analytics(event_id))


@router.delete(
    "/{event_id}/universities",
    response_model=ApiResponse[MessageResponse],
    summary="Remove all universities from an event",
)
async def remove_all_universities(
    event_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[MessageResponse]:
    removed = await UniversityService(db).remove_all_from_event(event_id)
    return ApiResponse(data=MessageResponse(message=f"Removed {removed} universities"))


# =============================================================================
# Sessions
# =============================================================================


@router.get(
    "/{event_id}/sessions",
    response_model=ApiResponse[list[SessionResponse]],
    summary="List sessions",
)
async def list_sessions(
    event_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[list[SessionResponse]]:
    sessions = await EventService(db).list_sessions(event_id)
    return ApiResponse(data=[SessionResponse.model_validate(s) for s in sessions])


@router.post(
    "/{event_id}/sessions",
    response_model=ApiResponse[SessionResponse],
    status_code=201,
    summary="Create a session",
)
async def create_session(
    event_id: str,
    data: SessionCreate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[SessionResponse]:
    item = await EventService(db).create_session(event_id, data)
    return ApiResponse(data=SessionResponse.model_validate(item))


@router.patch(
    "/{event_id}/sessions/{session_id}",
    response_model=ApiResponse[SessionResponse],
    summary="Update a session",
)
async def update_session(
    event_id: str,
    session_id: str,
    data: SessionUpdate,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[SessionResponse]:
    item = await EventService(db).update_session(event_id, session_id, data)
    return ApiResponse(data=SessionResponse.model_validate(item))


@router.delete(
    "/{event_id}/sessions/{session_id}",
    status_code=204,
    summary="Delete a session",
)
async def delete_session(
    event_id: str,
    session_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> None:
    await EventService(db).delete_session(event_id, session_id)


@router.post(
    "/{event_id}/sessions/{session_id}/duplicate",
    response_model=ApiResponse[SessionResponse],
    status_code=201,
    summary="Duplicate a session",
)
async def duplicate_session(
    event_id: str,
    session_id: str,
    db: DbSession,
    admin: ManagerAdmin,
) -> ApiResponse[SessionResponse]:
    item = await EventService(db).duplicate_session(event_id, session_id)
    return ApiResponse(data=SessionResponse.model_validate(item))
