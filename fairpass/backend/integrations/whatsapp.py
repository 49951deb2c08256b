"""
WhatsApp Integration.

Ticket confirmations over WhatsApp. An n8n webhook, when configured, takes
precedence and relays the message itself. Otherwise the Twilio Messages API
is called directly.
"""

import re

from fairpass.backend.core.config import get_app_config, get_settings
from fairpass.backend.core.logging import get_logger
from fairpass.backend.core.resilience import ProviderHttpClient
from fairpass.backend.integrations.base import SendResult
from fairpass.backend.integrations.qr import get_qr_url

logger = get_logger(__name__)

N8N_MESSAGE_ID = "n8n-queued"


def confirmation_body(
    student_name: str,
    event_title: str,
    event_date: str,
    qr_url: str,
    language: str = "en",
) -> str:
    if language == "ar":
        return (
            f"مرحباً {student_name}! 👋\n\n"
            f"تم تأكيد تسجيلك في {event_title} بتاريخ {event_date}! ✅\n\n"
            f"اضغط هنا لفتح بطاقة الدخول: {qr_url}\n\n"
            "نراك هناك! 🎉"
        )
    return (
        f"Hi {student_name}! 👋\n\n"
        f"Your registration for {event_title} on {event_date} is confirmed! ✅\n\n"
        f"Access your entry pass here: {qr_url}\n\n"
        "See you there! 🎉"
    )


def whatsapp_address(number: str) -> str:
    """Twilio address for a phone number: digits and + only, whatsapp: prefix."""
    if number.startswith("whatsapp:"):
        return number
    digits = re.sub(r"[^\d+]", "", number)
    return f"whatsapp:{digits}"


class WhatsAppClient:
    """Sends confirmations through n8n or Twilio, whichever is configured."""

    def __init__(
        self,
        http: ProviderHttpClient | None = None,
        n8n_http: ProviderHttpClient | None = None,
    ) -> None:
        self._http = http or ProviderHttpClient("twilio")
        self._n8n_http = n8n_http or ProviderHttpClient("n8n")
        self._config = get_app_config().integrations.whatsapp

    async def send_confirmation(
        self,
        to: str,
        student_name: str,
        event_title: str,
        event_date: str,
        qr_token: str,
        language: str = "en",
    ) -> SendResult:
        settings = get_settings()
        qr_url = get_qr_url(qr_token)

        if settings.n8n_webhook_url:
            return await self._send_via_n8n(
                settings.n8n_webhook_url,
                {
                    "to": to,
                    "studentName": student_name,
                    "eventTitle": event_title,
                    "eventDate": event_date,
                    "qrUrl": qr_url,
                    "language": language,
                },
            )

        sid = settings.twilio_account_sid
        token = settings.twilio_auth_token
        from_number = self._config.from_number
        if not (sid and token and from_number):
            logger.warning("Twilio WhatsApp not configured, skipping send")
            return SendResult.failed("Twilio WhatsApp not configured")

        form = {
            "From": whatsapp_address(from_number),
            "To": whatsapp_address(to),
            "Body": confirmation_body(student_name, event_title, event_date, qr_url, language),
        }
        url = f"{self._config.api_base_url}/Accounts/{sid}/Messages.json"
        try:
            response = await self._http.request("POST", url, data=form, auth=(sid, token))
        except Exception as e:
            logger.error("Twilio request failed", extra={"error": str(e)})
            return SendResult.failed(str(e) or type(e).__name__)

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_success:
            logger.info("WhatsApp message sent", extra={"sid": data.get("sid")})
            return SendResult.ok(message_id=data.get("sid"))

        error = data.get("message") or f"Status {response.status_code}"
        logger.error("Twilio rejected message", extra={"error": error})
        return SendResult.failed(error)

    async def _send_via_n8n(self, url: str, payload: dict[str, str]) -> SendResult:
        try:
            response = await self._n8n_http.request("POST", url, json=payload)
        except Exception as e:
            logger.error("n8n webhook failed", extra={"error": str(e)})
            return SendResult.failed(str(e) or "n8n Webhook failed")

        if not response.is_success:
            error = f"Status {response.status_code}: {response.text}"
            logger.error("n8n webhook rejected message", extra={"error": error})
            return SendResult.failed(error)

        return SendResult.ok(message_id=N8N_MESSAGE_ID)


_whatsapp_client: WhatsAppClient | None = None


def get_whatsapp_client() -> WhatsAppClient:
    global _whatsapp_client
    if _whatsapp_client is None:
        _whatsapp_client = WhatsAppClient()
    return _whatsapp_client
