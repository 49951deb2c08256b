"""
Public API Endpoints.

Unauthenticated routes used by the registration site and venue kiosks:
event pages, registration, tickets and exhibitor inquiries.
"""

from fastapi import APIRouter

from fairpass.backend.core.dependencies import ClientId, DbSession
from fairpass.backend.schemas.base import ApiResponse, MessageResponse
from fairpass.backend.schemas.event import EventDetailResponse, EventSummary
from fairpass.backend.schemas.registration import (
    ExhibitorInquiry,
    KioskRecoveryRequest,
    KioskRecoveryResult,
    RegistrationForm,
    RegistrationResult,
    ResendTicketRequest,
    TicketResponse,
)
from fairpass.backend.services.event import EventService
from fairpass.backend.services.registration import RegistrationService

router = APIRouter()


@router.get(
    "/events",
    response_model=ApiResponse[list[EventSummary]],
    summary="Upcoming events",
    description="Published events that have not ended, soonest first.",
)
async def list_public_events(db: DbSession) -> ApiResponse[list[EventSummary]]:
    events = await EventService(db).list_public_events()
    return ApiResponse(data=[EventSummary.model_validate(e) for e in events])


@router.get(
    "/events/{slug}",
    response_model=ApiResponse[EventDetailResponse],
    summary="Event page",
)
async def get_public_event(slug: str, db: DbSession) -> ApiResponse[EventDetailResponse]:
    event = await EventService(db).get_public_event(slug)
    return ApiResponse(data=EventDetailResponse.model_validate(event))


@router.post(
    "/events/{event_id}/register",
    response_model=ApiResponse[RegistrationResult],
    status_code=201,
    summary="Register for an event",
    description="Register a student and send the ticket by email and WhatsApp.",
)
async def register(
    event_id: str,
    form: RegistrationForm,
    db: DbSession,
    client_id: ClientId,
) -> ApiResponse[RegistrationResult]:
    result = await RegistrationService(db).register(event_id, form, client_id)
    return ApiResponse(data=result)


@router.post(
    "/events/{event_id}/kiosk-recovery",
    response_model=ApiResponse[KioskRecoveryResult],
    summary="Recover a ticket at the kiosk",
    description="Find a registration by email or phone and resend its ticket.",
)
async def recover_ticket(
    event_id: str,
    data: KioskRecoveryRequest,
    db: DbSession,
) -> ApiResponse[KioskRecoveryResult]:
    result = await RegistrationService(db).recover_ticket_kiosk(event_id, data.email_or_phone)
    return ApiResponse(data=result)


@router.post(
    "/events/{event_id}/exhibitor-inquiries",
    response_model=ApiResponse[MessageResponse],
    status_code=201,
    summary="Exhibitor inquiry",
)
async def submit_exhibitor_inquiry(
    event_id: str,
    inquiry: ExhibitorInquiry,
    db: DbSession,
) -> ApiResponse[MessageResponse]:
    result = await RegistrationService(db).submit_exhibitor_inquiry(event_id, inquiry)
    return ApiResponse(data=result)


@router.get(
    "/tickets/{token}",
    response_model=ApiResponse[TicketResponse],
    summary="View a ticket",
)
async def get_ticket(token: str, db: DbSession) -> ApiResponse[TicketResponse]:
    ticket = await RegistrationService(db).get_ticket(token)
    return ApiResponse(data=ticket)


@router.post(
    "/tickets/resend",
    response_model=ApiResponse[MessageResponse],
    summary="Resend a ticket",
    description="Email the newest ticket for an event that has not ended.",
)
async def resend_ticket(data: ResendTicketRequest, db: DbSession) -> ApiResponse[MessageResponse]:
    result = await RegistrationService(db).resend_ticket(data.email)
    return ApiResponse(data=result)
