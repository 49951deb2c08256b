"""
Registrations Admin Service.

Back-office views over registrations: paginated listing, detail with the
message history, CSV export and bulk lead import.
"""

import csv
import io
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.utils import utc_now
from fairpass.backend.integrations.email import confirmation_copy
from fairpass.backend.models.registration import Registration
from fairpass.backend.repositories.event import EventRepository
from fairpass.backend.repositories.messaging import MessageLogRepository
from fairpass.backend.repositories.registration import RegistrantRepository, RegistrationRepository
from fairpass.backend.schemas.registration import (
    ImportDetail,
    ImportLead,
    ImportRequest,
    ImportResult,
    MessageLogResponse,
    RegistrationDetail,
)
from fairpass.backend.services.base import BaseService
from fairpass.backend.services.messaging import MessagingService
from fairpass.backend.services.registration import allocate_qr_token

CSV_HEADERS = [
    "Event",
    "Full Name",
    "Email",
    "Phone",
    "Country",
    "City",
    "Nationality",
    "Level of Study",
    "Interested Major",
    "Registered At",
    "Checked In",
    "Check-in Time",
    "Check-in Method",
    "UTM Source",
    "UTM Medium",
    "UTM Campaign",
]

CSV_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _csv_datetime(value: datetime | None) -> str:
    return value.strftime(CSV_DATETIME_FORMAT) if value else ""


def registration_csv_row(registration: Registration) -> list[str]:
    registrant = registration.registrant
    check_in = registration.check_in
    return [
        registration.event.title,
        registrant.full_name,
        registrant.email,
        registrant.phone,
        registrant.country,
        registrant.city,
        registrant.nationality or "",
        registrant.level_of_study or "",
        registrant.interested_major or "",
        _csv_datetime(registration.created_at),
        "Yes" if check_in else "No",
        _csv_datetime(check_in.checked_in_at if check_in else None),
        check_in.method if check_in else "",
        registrant.utm_source or "",
        registrant.utm_medium or "",
        registrant.utm_campaign or "",
    ]


def render_csv(rows: list[list[str]]) -> str:
    """
    CSV text with a header line and rows joined by newlines.

    Values containing a comma, quote or newline are quoted with inner
    quotes doubled. There is no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(CSV_HEADERS)
    writer.writerows(rows)
    return buffer.getvalue().removesuffix("\n")


def export_filename(event_id: str | None) -> str:
    today = utc_now().strftime("%Y-%m-%d")
    if event_id:
        return f"registrations-{event_id}-{today}.csv"
    return f"all-registrations-{today}.csv"


class RegistrationsAdminService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.events = EventRepository(session)
        self.registrants = RegistrantRepository(session)
        self.registrations = RegistrationRepository(session)
        self.logs = MessageLogRepository(session)
        self.messaging = MessagingService(session)

    async def list_registrations_paginated(
        self,
        event_id: str | None = None,
        search: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Registration], int]:
        registrations = await self.registrations.list_registrations(
            event_id, search, limit=limit, offset=offset
        )
        total = await self.registrations.count_registrations(event_id, search)
        return registrations, total

    async def get_registration(self, registration_id: str) -> RegistrationDetail:
        registration = await self.registrations.get_by_id(registration_id)
        logs = await self.logs.list_for_registration(registration_id)

        detail = RegistrationDetail.model_validate(registration)
        detail.message_logs = [MessageLogResponse.model_validate(log) for log in logs]
        return detail

    async def export_csv(self, event_id: str | None = None) -> tuple[str, str]:
        """
        Export registrations as CSV.

        Returns:
            Tuple of (csv text, download filename)
        """
        registrations = await self.registrations.list_for_export(event_id)
        self._log_operation("Exporting registrations", event_id=event_id, rows=len(registrations))
        content = render_csv([registration_csv_row(r) for r in registrations])
        return content, export_filename(event_id)

    async def import_leads(self, request: ImportRequest) -> ImportResult:
        """
        Register a batch of leads for an event and email each new one a ticket.

        Leads run one at a time, each in its own savepoint, so a failing
        lead is reported and the rest of the batch still commits.
        """
        event = await self.events.get_by_id(request.event_id)
        result = ImportResult(total=len(request.leads))

        for lead in request.leads:
            try:
                async with self.session.begin_nested():
                    detail = await self._import_lead(event.id, lead)
            except Exception as e:
                self._logger.error(
                    "Lead import failed",
                    extra={"email": lead.email, "error": str(e)},
                )
                result.errors += 1
                result.details.append(
                    ImportDetail(email=lead.email, status="error", message=str(e) or "Unknown error")
                )
                continue

            if detail.status == "updated":
                result.updated += 1
            else:
                result.success += 1
            result.details.append(detail)

        self._log_operation(
            "Leads imported",
            event_id=event.id,
            total=result.total,
            success=result.success,
            updated=result.updated,
            errors=result.errors,
        )
        return result

    async def _import_lead(self, event_id: str, lead: ImportLead) -> ImportDetail:
        registrant = await self.registrants.find_by_email(lead.email)
        if registrant is None:
            registrant = await self.registrants.create(
                full_name=lead.full_name,
                email=lead.email,
                phone=lead.phone,
                country=lead.country,
                city=lead.city,
                consent_accepted=True,
                consent_timestamp=utc_now(),
                utm_source=lead.source,
            )
        else:
            registrant = await self.registrants.apply(
                registrant,
                full_name=lead.full_name,
                phone=lead.phone,
                country=lead.country,
                city=lead.city,
            )

        existing = await self.registrations.get_for_event_and_registrant(event_id, registrant.id)
        if existing is not None:
            return ImportDetail(
                email=lead.email,
                status="updated",
                message="Lead details updated",
                qr_token=existing.qr_token,
            )

        registration = await self.registrations.create(
            event_id=event_id,
            registrant_id=registrant.id,
            qr_token=await allocate_qr_token(self.registrations),
            status="REGISTERED",
        )
        await self.messaging.send_email_confirmation(
            registration,
            confirmation_copy(lead.language),
            template_name="confirmation_import",
        )
        return ImportDetail(email=lead.email, status="success", qr_token=registration.qr_token)

