"""
Unit Tests for the WhatsApp Client.
"""

import json
from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs

import httpx
import pytest

from fairpass.backend.core.resilience import ProviderHttpClient
from fairpass.backend.integrations.whatsapp import (
    N8N_MESSAGE_ID,
    WhatsAppClient,
    confirmation_body,
    whatsapp_address,
)

SETTINGS = "fairpass.backend.integrations.whatsapp.get_settings"


def _settings(**overrides) -> MagicMock:
    values = {"n8n_webhook_url": "", "twilio_account_sid": "", "twilio_auth_token": ""}
    values.update(overrides)
    return MagicMock(**values)


def _client(twilio_transport=None, n8n_transport=None, from_number="+15550001111") -> WhatsAppClient:
    client = WhatsAppClient(
        http=ProviderHttpClient("twilio", transport=twilio_transport),
        n8n_http=ProviderHttpClient("n8n", transport=n8n_transport),
    )
    client._config = client._config.model_copy(update={"from_number": from_number})
    return client


async def _send(client: WhatsAppClient, language: str = "en"):
    return await client.send_confirmation(
        to="+90 (555) 123-4567",
        student_name="Ada",
        event_title="Spring Fair",
        event_date="March 15, 2026 10:00 AM",
        qr_token="tok123",
        language=language,
    )


class TestHelpers:
    def test_address_strips_formatting(self):
        assert whatsapp_address("+90 (555) 123-4567") == "whatsapp:+905551234567"
        assert whatsapp_address("whatsapp:+1555") == "whatsapp:+1555"

    def test_arabic_body(self):
        body = confirmation_body("Ada", "Spring Fair", "March 15", "https://x/r/t", "ar")

        assert "مرحباً" in body
        assert "https://x/r/t" in body


class TestWhatsAppClient:
    @pytest.mark.asyncio
    async def test_unconfigured_fails_fast(self):
        with patch(SETTINGS, return_value=_settings()):
            result = await _send(_client())

        assert result.success is False
        assert result.error == "Twilio WhatsApp not configured"

    @pytest.mark.asyncio
    async def test_n8n_takes_precedence(self, mock_transport):
        """Should relay through n8n even when Twilio is configured."""
        n8n, n8n_requests = mock_transport(lambda r: httpx.Response(200, text="ok"))
        twilio, twilio_requests = mock_transport(lambda r: httpx.Response(201, json={"sid": "SM1"}))
        settings = _settings(
            n8n_webhook_url="https://n8n.test/hook",
            twilio_account_sid="AC1",
            twilio_auth_token="tok",
        )

        with patch(SETTINGS, return_value=settings):
            result = await _send(_client(twilio, n8n))

        assert result.success is True
        assert result.message_id == N8N_MESSAGE_ID
        assert twilio_requests == []
        payload = json.loads(n8n_requests[0].content)
        assert payload["studentName"] == "Ada"
        assert payload["qrUrl"].endswith("/r/tok123")

    @pytest.mark.asyncio
    async def test_twilio_form_post(self, mock_transport):
        twilio, requests = mock_transport(lambda r: httpx.Response(201, json={"sid": "SM1"}))
        settings = _settings(twilio_account_sid="AC1", twilio_auth_token="tok")

        with patch(SETTINGS, return_value=settings):
            result = await _send(_client(twilio))

        assert result.success is True
        assert result.message_id == "SM1"
        request = requests[0]
        assert request.url.path.endswith("/Accounts/AC1/Messages.json")
        form = parse_qs(request.content.decode())
        assert form["To"] == ["whatsapp:+905551234567"]
        assert form["From"] == ["whatsapp:+15550001111"]
        assert request.headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_n8n_failure_reported(self, mock_transport):
        n8n, _ = mock_transport(lambda r: httpx.Response(500, text="workflow error"))

        with patch(SETTINGS, return_value=_settings(n8n_webhook_url="https://n8n.test/hook")):
            result = await _send(_client(n8n_transport=n8n))

        assert result.success is False
        assert result.error == "Status 500: workflow error"
