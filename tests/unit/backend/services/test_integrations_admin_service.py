"""
Unit Tests for the Integrations Admin Service.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from fairpass.backend.integrations.base import SendResult
from fairpass.backend.services.integrations_admin import IntegrationsAdminService, synthetic_lead


class TestSyntheticLead:
    def test_unique_test_address(self):
        lead = synthetic_lead()

        assert lead.email.startswith("test-")
        assert lead.email.endswith("@events-app-test.com")
        assert lead.lead_source == "Test - Events App Admin"


class TestZohoTestLead:
    @pytest.mark.asyncio
    async def test_reports_created_lead(self, db_session):
        client = MagicMock()
        client.create_lead = AsyncMock(return_value=SendResult.ok("lead-42"))

        with patch("fairpass.backend.services.integrations_admin.get_zoho_client", return_value=client):
            result = await IntegrationsAdminService(db_session).zoho_test_lead()

        assert (result.success, result.lead_id, result.error) == (True, "lead-42", None)
        assert client.create_lead.await_args.args[0].event_title == "Admin Panel Test"

    @pytest.mark.asyncio
    async def test_reports_failure(self, db_session):
        client = MagicMock()
        client.create_lead = AsyncMock(return_value=SendResult.failed("invalid token"))

        with patch("fairpass.backend.services.integrations_admin.get_zoho_client", return_value=client):
            result = await IntegrationsAdminService(db_session).zoho_test_lead()

        assert result.success is False
        assert result.error == "invalid token"


class TestZohoStatus:
    @pytest.mark.asyncio
    async def test_unconfigured(self, db_session):
        result = await IntegrationsAdminService(db_session).zoho_status()

        assert result.connected is False
        assert result.missing == {"client_id": True, "client_secret": True, "refresh_token": True}
