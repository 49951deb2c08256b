"""
Integrations Admin Service.

Connection checks for the CRM from the admin panel.
"""

import time

from fairpass.backend.integrations.zoho import ZohoLead, get_zoho_client
from fairpass.backend.schemas.integrations import ZohoStatusResponse, ZohoTestResult
from fairpass.backend.services.base import BaseService


def synthetic_lead() -> ZohoLead:
    return ZohoLead(
        full_name="Test Lead (Events App)",
        email=f"test-{int(time.time() * 1000)}@events-app-test.com",
        phone="+1234567890",
        country="Test Country",
        city="Test City",
        lead_source="Test - Events App Admin",
        event_title="Admin Panel Test",
    )


class IntegrationsAdminService(BaseService):
    async def zoho_status(self) -> ZohoStatusResponse:
        status = await get_zoho_client().connection_status()
        return ZohoStatusResponse(
            connected=status.connected,
            message=status.message,
            expires_in=status.expires_in,
            error=status.error,
            missing=status.missing,
        )

    async def zoho_test_lead(self) -> ZohoTestResult:
        """Push a synthetic lead to Zoho and report what happened."""
        result = await get_zoho_client().create_lead(synthetic_lead())
        self._log_operation("Zoho test lead sent", success=result.success)
        return ZohoTestResult(success=result.success, lead_id=result.message_id, error=result.error)
