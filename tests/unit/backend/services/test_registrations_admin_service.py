"""
Unit Tests for RegistrationsAdminService.
"""

from datetime import datetime

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from fairpass.backend.core.exceptions import NotFoundError
from fairpass.backend.core.utils import utc_now
from fairpass.backend.integrations.base import SendResult
from fairpass.backend.models import CheckIn, Registrant
from fairpass.backend.models.enums import CheckInMethod, MessageChannel
from fairpass.backend.schemas.registration import ImportLead, ImportRequest
from fairpass.backend.services.messaging import MessagingService
from fairpass.backend.services.registrations_admin import (
    CSV_HEADERS,
    RegistrationsAdminService,
    export_filename,
    render_csv,
)


def _lead(**overrides) -> ImportLead:
    values = {"full_name": "Alan Turing", "email": "alan@example.com", "phone": "+447700900123"}
    values.update(overrides)
    return ImportLead(**values)


class TestRenderCsv:
    def test_header_only(self):
        assert render_csv([]) == ",".join(CSV_HEADERS)

    def test_quotes_special_values(self):
        """Should quote commas and double inner quotes, with no trailing newline."""
        content = render_csv([["Fair, Spring", 'Ada "Countess" Lovelace']])

        lines = content.split("\n")
        assert lines[1] == '"Fair, Spring","Ada ""Countess"" Lovelace"'
        assert not content.endswith("\n")


class TestExportFilename:
    def test_event_scoped(self):
        today = utc_now().strftime("%Y-%m-%d")
        assert export_filename("evt-1") == f"registrations-evt-1-{today}.csv"

    def test_all_events(self):
        assert export_filename(None).startswith("all-registrations-")


class TestExportCsv:
    @pytest.mark.asyncio
    async def test_rows_reflect_check_in(self, db_session, make_event, make_registration):
        event = await make_event(title="Autumn Fair")
        checked = await make_registration(event, full_name="Checked Student")
        await make_registration(event, full_name="Absent Student", utm_source="instagram")
        checked.check_in = CheckIn(method=CheckInMethod.QR)
        await db_session.flush()

        content, filename = await RegistrationsAdminService(db_session).export_csv(event.id)

        rows = {line.split(",")[1]: line.split(",") for line in content.split("\n")[1:]}
        assert filename.startswith(f"registrations-{event.id}-")
        assert rows["Checked Student"][10] == "Yes"
        assert rows["Checked Student"][12] == "QR"
        assert rows["Absent Student"][10] == "No"
        assert rows["Absent Student"][13] == "instagram"
        datetime.strptime(rows["Absent Student"][9], "%Y-%m-%d %H:%M:%S")


class TestListAndDetail:
    @pytest.mark.asyncio
    async def test_search_and_total(self, db_session, make_event, make_registration):
        event = await make_event()
        await make_registration(event, full_name="Marie Curie")
        await make_registration(event, full_name="Pierre Curie")
        await make_registration(event, full_name="Niels Bohr")

        items, total = await RegistrationsAdminService(db_session).list_registrations_paginated(
            event_id=event.id, search="curie", limit=1
        )

        assert total == 2
        assert len(items) == 1

    @pytest.mark.asyncio
    async def test_detail_includes_message_history(self, db_session, make_event, make_registration):

        registration = await make_registration(await make_event())
        await MessagingService(db_session).log_message(
            registration.event_id,
            registration.id,
            MessageChannel.EMAIL,
            "confirmation",
            SendResult.ok("msg-1"),
        )

        detail = await RegistrationsAdminService(db_session).get_registration(registration.id)

        assert [log.provider_message_id for log in detail.message_logs] == ["msg-1"]

    @pytest.mark.asyncio
    async def test_detail_missing(self, db_session):
        with pytest.raises(NotFoundError):
            await RegistrationsAdminService(db_session).get_registration("missing")


class TestImportLeads:
    @pytest.mark.asyncio
    async def test_new_and_existing_leads(self, db_session, make_event):
        event = await make_event()
        service = RegistrationsAdminService(db_session)
        await service.import_leads(ImportRequest(event_id=event.id, leads=[_lead()]))

        result = await service.import_leads(
            ImportRequest(
                event_id=event.id,
                leads=[_lead(phone="+447700900999"), _lead(email="emmy@example.com", full_name="Emmy Noether")],
            )
        )

        assert (result.total, result.success, result.updated, result.errors) == (2, 1, 1, 0)
        statuses = {d.email: d.status for d in result.details}
        assert statuses == {"alan@example.com": "updated", "emmy@example.com": "success"}
        assert all(len(d.qr_token) == 24 for d in result.details)

    @pytest.mark.asyncio
    async def test_failing_lead_does_not_abort_batch(self, db_session, make_event):
        """Should roll back only the failing lead and keep importing the rest."""
        event = await make_event()
        service = RegistrationsAdminService(db_session)
        import_lead = service._import_lead

        async def fail_after_writes(event_id, lead):
            detail = await import_lead(event_id, lead)
            if lead.email == "broken@example.com":
                raise IntegrityError("INSERT INTO registrations", {}, Exception("UNIQUE constraint failed"))
            return detail

        service._import_lead = fail_after_writes
        result = await service.import_leads(
            ImportRequest(
                event_id=event.id,
                leads=[
                    _lead(),
                    _lead(email="broken@example.com", full_name="Broken Lead"),
                    _lead(email="emmy@example.com", full_name="Emmy Noether"),
                ],
            )
        )

        assert (result.total, result.success, result.errors) == (3, 2, 1)
        assert [d.status for d in result.details] == ["success", "error", "success"]
        emails = (await db_session.execute(select(Registrant.email))).scalars().all()
        assert sorted(emails) == ["alan@example.com", "emmy@example.com"]

    @pytest.mark.asyncio
    async def test_unknown_event(self, db_session):
        with pytest.raises(NotFoundError):
            await RegistrationsAdminService(db_session).import_leads(
                ImportRequest(event_id="missing", leads=[_lead()])
            )
