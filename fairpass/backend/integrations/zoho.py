"""
Zoho CRM Integration.

Refresh-token OAuth and lead creation. Access tokens are cached in process
until five minutes before they expire.
"""

import time
from dataclasses import dataclass, field
from typing import Any

from fairpass.backend.core.config import get_app_config, get_settings
from fairpass.backend.core.exceptions import ExternalServiceError
from fairpass.backend.core.logging import get_logger
from fairpass.backend.core.resilience import ProviderHttpClient
from fairpass.backend.integrations.base import SendResult

logger = get_logger(__name__)

TOKEN_REFRESH_MARGIN_SECONDS = 5 * 60


@dataclass
class ZohoLead:
    full_name: str
    email: str
    phone: str
    country: str
    city: str
    lead_source: str | None = None
    campaign_id: str | None = None
    utm_medium: str | None = None
    utm_campaign: str | None = None
    event_title: str | None = None


@dataclass
class ZohoStatus:
    connected: bool
    message: str
    expires_in: int | None = None
    error: str | None = None
    missing: dict[str, bool] = field(default_factory=dict)


def build_lead_record(lead: ZohoLead, default_source: str) -> dict[str, Any]:
    """Map a lead onto Zoho's Leads module fields. The last word of the name is the surname."""
    parts = lead.full_name.strip().split(" ")
    last_name = parts.pop() or lead.full_name
    first_name = " ".join(parts)

    record: dict[str, Any] = {
        "Last_Name": last_name,
        "Email": lead.email,
        "Phone": lead.phone,
        "Country": lead.country,
        "City": lead.city,
        "Lead_Source": lead.lead_source or default_source,
    }
    if first_name:
        record["First_Name"] = first_name
    if lead.event_title:
        record["Description"] = f"Registered for: {lead.event_title}"
        # UTM_Source carries the event so CRM reports group leads by fair
        record["UTM_Source"] = lead.event_title
    if lead.utm_medium:
        record["UTM_Medium"] = lead.utm_medium
    if lead.utm_campaign:
        record["UTM_Campaign"] = lead.utm_campaign
    if lead.campaign_id:
        record["Campaign_ID"] = lead.campaign_id
    return record


class ZohoClient:
    """Zoho CRM client with an in-process access token cache."""

    def __init__(self, http: ProviderHttpClient | None = None) -> None:
        self._http = http or ProviderHttpClient("zoho")
        self._config = get_app_config().integrations.zoho
        self._token: str | None = None
        self._token_expires_at: float = 0.0

    @staticmethod
    def _missing_credentials() -> dict[str, bool]:
        settings = get_settings()
        return {
            "client_id": not settings.zoho_client_id,
            "client_secret": not settings.zoho_client_secret,
            "refresh_token": not settings.zoho_refresh_token,
        }

    @property
    def configured(self) -> bool:
        return not any(self._missing_credentials().values())

    async def _refresh_token(self) -> dict[str, Any]:
        settings = get_settings()
        response = await self._http.request(
            "POST",
            f"{self._config.accounts_domain}/oauth/v2/token",
            data={
                "refresh_token": settings.zoho_refresh_token,
                "client_id": settings.zoho_client_id,
                "client_secret": settings.zoho_client_secret,
                "grant_type": "refresh_token",
            },
        )
        if not response.is_success:
            raise ExternalServiceError(f"Failed to refresh Zoho token: {response.text}")

        data = response.json()
        if "access_token" not in data:
            raise ExternalServiceError(f"Unexpected response from Zoho: {data}")
        return data

    async def get_access_token(self) -> str:
        """
        Cached access token, refreshed when within five minutes of expiry.

        Raises:
            ExternalServiceError: If credentials are missing or the refresh fails
        """
        if self._token and self._token_expires_at > time.time() + TOKEN_REFRESH_MARGIN_SECONDS:
            return self._token

        if not self.configured:
            raise ExternalServiceError("Zoho CRM credentials not configured")

        data = await self._refresh_token()
        self._token = data["access_token"]
        self._token_expires_at = time.time() + int(data.get("expires_in", 3600))
        return self._token

    async def create_lead(self, lead: ZohoLead) -> SendResult:
        """Create a lead. A duplicate lead counts as success."""
        if not self.configured:
            return SendResult.failed("Zoho CRM not configured")

        try:
            token = await self.get_access_token()
            response = await self._http.request(
                "POST",
                f"{self._config.api_domain}/crm/v2/Leads",
                json={
                    "data": [build_lead_record(lead, self._config.default_lead_source)],
                    "trigger": ["workflow"],
                },
                headers={"Authorization": f"Zoho-oauthtoken {token}"},
            )
            result = response.json()
        except Exception as e:
            logger.error("Zoho CRM integration error", extra={"error": str(e)})
            return SendResult.failed(str(e) or "Failed to create lead")

        entry = (result.get("data") or [{}])[0]
        details = entry.get("details") or {}

        if entry.get("status") == "success":
            return SendResult.ok(message_id=details.get("id"))

        if entry.get("code") == "DUPLICATE_DATA":
            return SendResult.ok(message_id=details.get("id"), error="Duplicate lead detected")

        logger.error("Zoho CRM lead creation failed", extra={"response": result})
        return SendResult.failed(entry.get("message") or "Unknown error")

    async def connection_status(self) -> ZohoStatus:
        """Report whether credentials exist and a token refresh succeeds right now."""
        missing = self._missing_credentials()
        if any(missing.values()):
            return ZohoStatus(
                connected=False,
                message="Zoho credentials not configured",
                missing=missing,
            )

        try:
            data = await self._refresh_token()
        except ExternalServiceError as e:
            return ZohoStatus(
                connected=False,
                message="Failed to authenticate with Zoho",
                error=e.message,
            )
        except Exception as e:
            return ZohoStatus(connected=False, message="Connection check failed", error=str(e))

        return ZohoStatus(
            connected=True,
            message="Successfully connected to Zoho CRM",
            expires_in=data.get("expires_in"),
        )


_zoho_client: ZohoClient | None = None


def get_zoho_client() -> ZohoClient:
    global _zoho_client
    if _zoho_client is None:
        _zoho_client = ZohoClient()
    return _zoho_client
