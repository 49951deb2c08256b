"""
Registration Service.

Public registration flow and ticket access: registering for an event,
viewing a ticket, resending it by email, recovering it at a kiosk, and
exhibitor inquiries.
"""

import json

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.config import get_app_config
from fairpass.backend.core.exceptions import (
    ConflictError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from fairpass.backend.core.rate_limit import check_rate_limit
from fairpass.backend.core.utils import utc_now
from fairpass.backend.integrations import ai
from fairpass.backend.integrations.base import SendResult
from fairpass.backend.integrations.email import recovery_copy
from fairpass.backend.integrations.qr import generate_qr_data_url, generate_qr_token, get_qr_url
from fairpass.backend.integrations.zoho import ZohoLead, get_zoho_client
from fairpass.backend.models.enums import EventStatus, MessageChannel, MessageStatus
from fairpass.backend.models.event import Event
from fairpass.backend.models.registration import Registrant, Registration
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.messaging import MessageLogRepository
from fairpass.backend.repositories.registration import RegistrantRepository, RegistrationRepository
from fairpass.backend.schemas.base import MessageResponse
from fairpass.backend.schemas.registration import (
    ExhibitorInquiry,
    KioskRecoveryResult,
    RegistrationForm,
    RegistrationResult,
    TicketResponse,
)
from fairpass.backend.services.base import BaseService
from fairpass.backend.services.messaging import MessagingService

QR_TOKEN_ATTEMPTS = 5


async def allocate_qr_token(registrations: RegistrationRepository) -> str:
    """A QR token not used by any registration."""
    for _ in range(QR_TOKEN_ATTEMPTS):
        token = generate_qr_token()
        if not await registrations.token_exists(token):
            return token
    raise ConflictError("Could not allocate a unique ticket code")


class RegistrationService(BaseService):
    """
    Service for public registration.

    register() commits the registration before notifications, CRM sync and
    AI enrichment run, so a ticket that was emailed always exists. Their own
    writes (message logs, enrichment) are each isolated in a savepoint and
    none can fail the registration itself.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.events = EventRepository(session)
        self.registrants = RegistrantRepository(session)
        self.registrations = RegistrationRepository(session)
        self.logs = MessageLogRepository(session)
        self.messaging = MessagingService(session)

    async def register(
        self,
        event_id: str,
        form: RegistrationForm,
        client_id: str = "unknown",
    ) -> RegistrationResult:
        """
        Register a student for a published event.

        Raises:
            RateLimitError: Too many attempts from this client
            NotFoundError: Event missing or not published
            ValidationError: Event closed, full, or student already registered
            ConflictError: A concurrent duplicate registration won the race
        """
        self._enforce_rate_limit(client_id)

        event = await self.events.get_by_id_or_none(event_id)
        if event is None or event.status != EventStatus.PUBLISHED:
            raise NotFoundError("Event not found or not available")
        await self._check_registration_open(event)

        existing = await self.registrations.find_in_event_by_contact(
            event.id, form.email, form.phone
        )
        if existing is not None:
            raise ValidationError("You are already registered for this event")

        registrant = await self.registrants.find_by_email_or_phone(form.email, form.phone)
        if registrant is None:
            registrant = await self.registrants.create(
                full_name=form.full_name,
                email=form.email,
                phone=form.phone,
                country=form.country,
                city=form.city,
                nationality=form.nationality,
                level_of_study=form.level_of_study,
                interested_major=form.interested_major,
                consent_accepted=form.consent,
                consent_timestamp=utc_now(),
                utm_source=form.utm_source,
                utm_medium=form.utm_medium,
                utm_campaign=form.utm_campaign,
            )

        registration = await self._execute_db_operation(
            "create_registration",
            self.registrations.create(
                event_id=event.id,
                registrant_id=registrant.id,
                qr_token=await allocate_qr_token(self.registrations),
            ),
            conflict_message="You are already registered for this event",
        )
        self._log_operation(
            "Registration created",
            registration_id=registration.id,
            event_id=event.id,
        )

        # The ticket is durable before any provider hears about it
        await self.session.commit()

        await self._run_side_effects(registration, registrant, event, form)

        return RegistrationResult(registration_id=registration.id, qr_token=registration.qr_token)

    def _enforce_rate_limit(self, client_id: str) -> None:
        config = get_app_config()
        if not config.features.registration_rate_limit_enabled:
            return

        window = config.security.rate_limiting.registration
        result = check_rate_limit(f"register:{client_id}", window.limit, window.window_seconds)
        if not result.allowed:
            raise RateLimitError(
                "Too many registration attempts. Please try again later.",
                retry_after_seconds=result.retry_after_seconds,
                remaining=result.remaining,
            )

    async def _check_registration_open(self, event: Event) -> None:
        now = utc_now()
        if event.end_date_time < now:
            raise ValidationError("This event has already ended")
        if event.registration_open_at and event.registration_open_at > now:
            raise ValidationError("Registration has not opened yet")
        if event.registration_close_at and event.registration_close_at < now:
            raise ValidationError("Registration is closed")
        if event.capacity:
            registered = await self.registrations.count_for_event(event.id)
            if registered >= event.capacity:
                raise ValidationError("Event is at full capacity")

    async def _run_side_effects(
        self,
        registration: Registration,
        registrant: Registrant,
        event: Event,
        form: RegistrationForm,
    ) -> None:
        features = get_app_config().features

        if features.notifications_enabled:
            try:
                async with self.session.begin_nested():
                    await self.messaging.send_registration_confirmations(registration, form.locale)
            except Exception as e:
                self._logger.error(
                    "Confirmation delivery failed",
                    extra={"registration_id": registration.id, "error": str(e)},
                )

        if features.crm_sync_enabled:
            try:
                result = await get_zoho_client().create_lead(
                    ZohoLead(
                        full_name=registrant.full_name,
                        email=registrant.email,
                        phone=registrant.phone,
                        country=registrant.country,
                        city=registrant.city,
                        lead_source=event.zoho_lead_source or event.title,
                        campaign_id=event.zoho_campaign_id,
                        utm_medium=form.utm_medium,
                        utm_campaign=form.utm_campaign,
                        event_title=event.title,
                    )
                )
                if not result.success:
                    self._logger.warning("Zoho lead not created", extra={"error": result.error})
            except Exception as e:
                self._logger.error("Zoho lead sync failed", extra={"error": str(e)})

        if features.ai_enrichment_enabled:
            try:
                await self._enrich(registrant, form.full_name, form.interested_major)
            except Exception as e:
                self._logger.error(
                    "AI enrichment failed",
                    extra={"registrant_id": registrant.id, "error": str(e)},
                )

    async def _enrich(
        self,
        registrant: Registrant,
        full_name: str,
        interested_major: str | None,
    ) -> None:
        enrichment = await ai.enrich_registrant(full_name, interested_major)
        values = {k: v for k, v in enrichment.model_dump().items() if v is not None}
        if values:
            async with self.session.begin_nested():
                await self.registrants.apply(registrant, **values)
            self._log_debug("Registrant enriched", registrant_id=registrant.id, **values)

    # -------------------------------------------------------------------------
    # Tickets
    # -------------------------------------------------------------------------

    async def get_ticket(self, token: str) -> TicketResponse:
        registration = await self.registrations.get_by_token(token)
        if registration is None:
            raise NotFoundError("Ticket not found")

        return TicketResponse.model_validate(
            {
                "id": registration.id,
                "qr_token": registration.qr_token,
                "status": registration.status,
                "qr_url": get_qr_url(registration.qr_token),
                "qr_image": generate_qr_data_url(registration.qr_token),
                "registrant": registration.registrant,
                "event": registration.event,
                "check_in": registration.check_in,
            }
        )

    async def resend_ticket(self, email: str) -> MessageResponse:
        """Email the newest ticket of a registrant whose event has not ended."""
        registration = await self.registrations.latest_active_for_email(email, utc_now())
        if registration is None:
            raise NotFoundError("No active event registration found for this email.")

        result = await self.messaging.send_email_confirmation(
            registration, recovery_copy("en"), template_name="resend"
        )
        self._log_operation("Ticket resent", registration_id=registration.id, sent=result.success)
        return MessageResponse(message="Ticket sent to your email")

    async def recover_ticket_kiosk(self, event_id: str, email_or_phone: str) -> KioskRecoveryResult:
        term = self._require(email_or_phone, "Email or Phone is required")

        registration = await self.registrations.find_in_event_by_contact(event_id, term, term)
        if registration is None:
            raise NotFoundError("No registration found for this event.")

        results: list[SendResult] = []
        try:
            async with self.session.begin_nested():
                results.append(
                    await self.messaging.send_email_confirmation(
                        registration, recovery_copy("en"), template_name="recovery"
                    )
                )
                results.append(
                    await self.messaging.send_whatsapp_confirmation(
                        registration, "en", template_name="recovery"
                    )
                )
        except Exception as e:
            self._logger.error("Kiosk ticket resend failed", extra={"error": str(e)})

        self._log_operation(
            "Ticket recovered at kiosk",
            registration_id=registration.id,
            delivered=[r.success for r in results],
        )
        return KioskRecoveryResult(
            qr_token=registration.qr_token,
            student_name=registration.registrant.full_name,
        )

    # -------------------------------------------------------------------------
    # Exhibitors
    # -------------------------------------------------------------------------

    async def submit_exhibitor_inquiry(self, event_id: str, inquiry: ExhibitorInquiry) -> MessageResponse:
        """Queue an exhibitor inquiry for the team as a message log entry."""
        event = await self.events.get_by_id(event_id)

        payload = {"type": "exhibitor_inquiry", "details": inquiry.model_dump(mode="json")}
        await self.logs.create(
            event_id=event.id,
            registration_id=None,
            channel=MessageChannel.EMAIL,
            template_name="exhibitor_inquiry",
            status=MessageStatus.QUEUED,
            error_text=json.dumps(payload, ensure_ascii=False),
        )
        self._log_operation(
            "Exhibitor inquiry received",
            event_id=event.id,
            institution=inquiry.institution_name,
        )
        return MessageResponse(message="Inquiry submitted successfully")
