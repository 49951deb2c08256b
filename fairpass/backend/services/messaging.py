"""
Messaging Service.

Editable message templates, the outbound message log, and the
confirmation fan-out (email plus WhatsApp) sent after a registration.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.utils import utc_now
from fairpass.backend.integrations.base import SendResult
from fairpass.backend.integrations.email import EmailCopy, confirmation_copy, get_email_client
from fairpass.backend.integrations.qr import get_qr_url
from fairpass.backend.integrations.whatsapp import get_whatsapp_client
from fairpass.backend.models.enums import MessageChannel, MessageStatus
from fairpass.backend.models.messaging import MessageLog, MessageTemplate
from fairpass.backend.models.registration import Registration
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.messaging import MessageLogRepository, MessageTemplateRepository
from fairpass.backend.repositories.registration import RegistrationRepository
from fairpass.backend.schemas.messaging import TemplatePreview, TemplateUpdate
from fairpass.backend.services.base import BaseService

PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")
REMINDER_TEMPLATE = "reminder"


@dataclass
class ReminderResult:
    events: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0


DEFAULT_TEMPLATES: list[dict[str, Any]] = [
    {
        "name": "confirmation_email",
        "channel": MessageChannel.EMAIL,
        "subject": "Registration Confirmed: {{eventTitle}}",
        "body": (
            "Dear {{studentName}},\n\n"
            "Your registration for {{eventTitle}} is confirmed!\n\n"
            "Event Details:\n"
            "- Date: {{eventDate}}\n"
            "- Venue: {{eventVenue}}\n\n"
            "Your QR code is attached. Present it at the venue entrance.\n\n"
            "See you there!"
        ),
        "description": "Email sent after successful registration",
    },
    {
        "name": "confirmation_whatsapp",
        "channel": MessageChannel.WHATSAPP,
        "subject": None,
        "body": (
            "Hi {{studentName}}! 👋\n\n"
            "Your registration for {{eventTitle}} is confirmed! ✅\n\n"
            "📅 {{eventDate}}\n"
            "📍 {{eventVenue}}\n\n"
            "Your QR code: {{qrUrl}}\n\n"
            "See you there! 🎉"
        ),
        "description": "WhatsApp confirmation message",
    },
]


def render_template(body: str, context: dict[str, Any]) -> str:
    """Replace {{name}} placeholders. Placeholders without a value are left as is."""

    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in context and context[key] is not None:
            return str(context[key])
        return match.group(0)

    return PLACEHOLDER.sub(substitute, body)


def format_event_date(value: datetime) -> str:
    """Human date for messages, e.g. 'March 15, 2026 10:00 AM'."""
    return f"{value.strftime('%B')} {value.day}, {value.year} {value.strftime('%I:%M %p').lstrip('0')}"


def event_venue(venue_name: str, city: str) -> str:
    return f"{venue_name}, {city}"


def preview_context() -> dict[str, str]:
    """Sample values for previewing a template in the admin editor."""
    return {
        "studentName": "John Doe",
        "eventTitle": "Global Education Expo 2026",
        "eventDate": format_event_date(datetime(2026, 3, 15, 10, 0)),
        "eventVenue": event_venue("International Trade Center", "Istanbul"),
        "qrUrl": get_qr_url("SAMPLE-TOKEN"),
    }


class MessagingService(BaseService):
    """Templates and message logs."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.templates = MessageTemplateRepository(session)
        self.logs = MessageLogRepository(session)
        self.events = EventRepository(session)
        self.registrations = RegistrationRepository(session)

    # -------------------------------------------------------------------------
    # Templates
    # -------------------------------------------------------------------------

    async def list_templates(self) -> list[MessageTemplate]:
        return await self.templates.list_by_name()

    async def get_template(self, template_id: str) -> MessageTemplate:
        return await self.templates.get_by_id(template_id)

    async def update_template(self, template_id: str, data: TemplateUpdate) -> MessageTemplate:
        update_data = data.model_dump(exclude_unset=True)
        if not update_data:
            return await self.templates.get_by_id(template_id)

        self._log_operation("Updating template", template_id=template_id)
        return await self._execute_db_operation(
            "update_template",
            self.templates.update(template_id, **update_data),
        )

    async def seed_default_templates(self) -> list[MessageTemplate]:
        """Create or refresh the default confirmation templates."""
        seeded = []
        for template_fields in DEFAULT_TEMPLATES:
            existing = await self.templates.get_by_name(template_fields["name"])
            if existing is None:
                template = await self.templates.create(**template_fields, is_default=True)
            else:
                template = await self.templates.apply(existing, **template_fields, is_default=True)
            seeded.append(template)

        self._log_operation("Seeded default templates", count=len(seeded))
        return seeded

    async def preview_template(self, template_id: str) -> TemplatePreview:
        """Render a stored template against sample registration values."""
        template = await self.templates.get_by_id(template_id)
        context = preview_context()
        return TemplatePreview(
            subject=render_template(template.subject, context) if template.subject else None,
            body=render_template(template.body, context),
        )

    # -------------------------------------------------------------------------
    # Message log
    # -------------------------------------------------------------------------

    async def log_message(
        self,
        event_id: str,
        registration_id: str | None,
        channel: MessageChannel,
        template_name: str,
        result: SendResult,
    ) -> MessageLog:
        """Record the outcome of one send."""
        return await self.logs.create(
            event_id=event_id,
            registration_id=registration_id,
            channel=channel,
            template_name=template_name,
            provider_message_id=result.message_id,
            status=MessageStatus.SENT if result.success else MessageStatus.FAILED,
            error_text=result.error,
            sent_at=utc_now() if result.success else None,
        )

    async def send_email_confirmation(
        self,
        registration: Registration,
        copy: EmailCopy,
        template_name: str = "confirmation",
    ) -> SendResult:
        event = registration.event
        registrant = registration.registrant
        result = await get_email_client().send_confirmation(
            to=registrant.email,
            student_name=registrant.full_name,
            event_title=event.title,
            event_date=format_event_date(event.start_date_time),
            event_venue=event_venue(event.venue_name, event.city),
            qr_token=registration.qr_token,
            copy=copy,
        )
        await self.log_message(
            event.id, registration.id, MessageChannel.EMAIL, template_name, result
        )
        return result

    async def send_whatsapp_confirmation(
        self,
        registration: Registration,
        language: str = "en",
        template_name: str = "confirmation",
    ) -> SendResult:
        event = registration.event
        registrant = registration.registrant
        result = await get_whatsapp_client().send_confirmation(
            to=registrant.phone,
            student_name=registrant.full_name,
            event_title=event.title,
            event_date=format_event_date(event.start_date_time),
            qr_token=registration.qr_token,
            language=language,
        )
        await self.log_message(
            event.id, registration.id, MessageChannel.WHATSAPP, template_name, result
        )
        return result

    async def send_registration_confirmations(
        self,
        registration: Registration,
        locale: str = "en",
        copy: EmailCopy | None = None,
    ) -> tuple[SendResult, SendResult]:
        """
        Send email and WhatsApp confirmations and log both.

        Provider failures come back as failed SendResults; they never raise.
        """
        email_result = await self.send_email_confirmation(
            registration, copy or confirmation_copy(locale)
        )
        whatsapp_result = await self.send_whatsapp_confirmation(registration, locale)

        self._log_operation(
            "Confirmations sent",
            registration_id=registration.id,
            email=email_result.success,
            whatsapp=whatsapp_result.success,
        )
        return email_result, whatsapp_result

    # -------------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------------

    async def send_event_reminders(self, window_hours: int, label: str) -> ReminderResult:
        """
        Email registrants of published events starting within the window.

        A registration that already has a SENT reminder is skipped, so the
        job can run repeatedly without sending duplicates.
        """
        now = utc_now()
        events = await self.events.list_published_starting_between(
            now, now + timedelta(hours=window_hours)
        )

        result = ReminderResult(events=len(events))
        for event in events:
            for registration in await self.registrations.list_for_event(event.id):
                if await self.logs.exists_for(registration.id, REMINDER_TEMPLATE, MessageStatus.SENT):
                    result.skipped += 1
                    continue

                registrant = registration.registrant
                send_result = await get_email_client().send_reminder(
                    to=registrant.email,
                    student_name=registrant.full_name,
                    event_title=event.title,
                    event_date=format_event_date(event.start_date_time),
                    event_venue=event_venue(event.venue_name, event.city),
                    reminder_type=label,
                    qr_token=registration.qr_token,
                )
                await self.log_message(
                    event.id, registration.id, MessageChannel.EMAIL, REMINDER_TEMPLATE, send_result
                )
                if send_result.success:
                    result.sent += 1
                else:
                    result.failed += 1

        self._log_operation(
            "Event reminders processed",
            events=result.events,
            sent=result.sent,
            skipped=result.skipped,
            failed=result.failed,
        )
        return result
