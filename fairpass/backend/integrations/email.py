"""
Email Integration (Resend).

Transactional email over the Resend REST API: ticket confirmations with the
QR code attached, event reminders, and admin notifications.

Usage:
    from fairpass.backend.integrations.email import get_email_client

    result = await get_email_client().send_confirmation(
        to="student@example.com",
        student_name="Ada",
        event_title="Spring Fair",
        event_date="March 3, 2026 10:00 AM",
        event_venue="Expo Hall, Istanbul",
        qr_token=token,
        copy=confirmation_copy("en"),
    )
"""

import base64
from dataclasses import dataclass, replace
from html import escape
from typing import Any

import httpx

from fairpass.backend.core.config import get_app_config, get_settings
from fairpass.backend.core.logging import get_logger
from fairpass.backend.core.resilience import ProviderHttpClient
from fairpass.backend.integrations.base import SendResult
from fairpass.backend.integrations.qr import generate_qr_png, get_qr_url

logger = get_logger(__name__)


@dataclass(frozen=True)
class EmailCopy:
    """Localized strings for the confirmation email. {name} and {event} are filled in."""

    subject: str
    greeting: str
    body: str
    headline: str
    entry_pass: str
    open_pass: str
    event_details: str
    date_label: str
    venue_label: str
    tip_title: str
    tip_body: str
    sign_off: str
    rtl: bool = False


CONFIRMATION_COPY: dict[str, EmailCopy] = {
    "en": EmailCopy(
        subject="Registration Confirmed: {event}",
        greeting="Hi {name},",
        body="You're registered for {event}. Your entry pass is below.",
        headline="You're in!",
        entry_pass="Your Entry Pass",
        open_pass="Open Pass",
        event_details="Event Details",
        date_label="Date",
        venue_label="Venue",
        tip_title="Pro tip",
        tip_body="Save this email or take a screenshot of the QR code for fast check-in.",
        sign_off="See you there!",
    ),
    "tr": EmailCopy(
        subject="Kayıt Onaylandı: {event}",
        greeting="Merhaba {name},",
        body="{event} etkinliğine kaydınız tamamlandı. Giriş kartınız aşağıdadır.",
        headline="Kaydınız tamam!",
        entry_pass="Giriş Kartınız",
        open_pass="Kartı Aç",
        event_details="Etkinlik Detayları",
        date_label="Tarih",
        venue_label="Mekan",
        tip_title="İpucu",
        tip_body="Hızlı giriş için bu e-postayı saklayın veya QR kodun ekran görüntüsünü alın.",
        sign_off="Görüşmek üzere!",
    ),
    "ar": EmailCopy(
        subject="تم تأكيد التسجيل: {event}",
        greeting="مرحباً {name}،",
        body="تم تسجيلك في {event}. بطاقة الدخول الخاصة بك أدناه.",
        headline="تم التسجيل!",
        entry_pass="بطاقة الدخول",
        open_pass="افتح البطاقة",
        event_details="تفاصيل الفعالية",
        date_label="التاريخ",
        venue_label="المكان",
        tip_title="نصيحة",
        tip_body="احتفظ بهذه الرسالة أو التقط صورة لرمز QR لتسجيل دخول سريع.",
        sign_off="نراك هناك!",
        rtl=True,
    ),
}


def confirmation_copy(locale: str) -> EmailCopy:
    return CONFIRMATION_COPY.get(locale, CONFIRMATION_COPY["en"])


def recovery_copy(locale: str = "en") -> EmailCopy:
    """Copy for tickets re-sent on request. Only English has recovery wording."""
    if locale != "en":
        return confirmation_copy(locale)
    return replace(
        CONFIRMATION_COPY["en"],
        subject="Your Event Ticket: {event}",
        body="Here is your requested ticket for {event}.",
        headline="Ticket Recovery",
        open_pass="Open Ticket",
        tip_title="Lost your ticket?",
        tip_body="We resent this to you because you requested it. Keep it safe!",
    )


def _render_confirmation(
    copy: EmailCopy,
    student_name: str,
    event_title: str,
    event_date: str,
    event_venue: str,
    qr_url: str,
) -> str:
    direction = "rtl" if copy.rtl else "ltr"
    name = f"<strong>{escape(student_name)}</strong>"
    event = f"<strong>{escape(event_title)}</strong>"
    return f"""<!DOCTYPE html>
<html dir="{direction}">
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>{escape(copy.headline)}</h1>
  <p>{copy.greeting.format(name=name)}</p>
  <p>{copy.body.format(event=event)}</p>
  <div style="border: 2px dashed #e2e8f0; padding: 24px; text-align: center;">
    <p><strong>{escape(copy.entry_pass)}</strong></p>
    <img src="cid:qr-code.png" alt="QR Code" style="max-width: 180px;"/>
    <p><a href="{qr_url}">{escape(copy.open_pass)}</a></p>
  </div>
  <h3>{escape(copy.event_details)}</h3>
  <table>
    <tr><td>{escape(copy.date_label)}</td><td>{escape(event_date)}</td></tr>
    <tr><td>{escape(copy.venue_label)}</td><td>{escape(event_venue)}</td></tr>
  </table>
  <h4>{escape(copy.tip_title)}</h4>
  <p>{escape(copy.tip_body)}</p>
  <p>{escape(copy.sign_off)}</p>
</body>
</html>"""


class EmailClient:
    """
    Resend API client.

    Every send returns a SendResult. Without RESEND_API_KEY nothing is sent
    and the result reports the provider as not configured.
    """

    def __init__(self, http: ProviderHttpClient | None = None) -> None:
        self._http = http or ProviderHttpClient("resend")
        self._config = get_app_config().integrations.email

    @property
    def configured(self) -> bool:
        return bool(get_settings().resend_api_key)

    async def send_confirmation(
        self,
        to: str,
        student_name: str,
        event_title: str,
        event_date: str,
        event_venue: str,
        qr_token: str,
        copy: EmailCopy,
    ) -> SendResult:
        """Confirmation email with the QR code attached as qr-code.png."""
        html = _render_confirmation(
            copy,
            student_name=student_name,
            event_title=event_title,
            event_date=event_date,
            event_venue=event_venue,
            qr_url=get_qr_url(qr_token),
        )
        attachment = {
            "filename": "qr-code.png",
            "content": base64.b64encode(generate_qr_png(qr_token)).decode("ascii"),
        }
        return await self._send(
            to=[to],
            subject=copy.subject.format(event=event_title),
            html=html,
            attachments=[attachment],
        )

    async def send_reminder(
        self,
        to: str,
        student_name: str,
        event_title: str,
        event_date: str,
        event_venue: str,
        reminder_type: str,
        qr_token: str,
    ) -> SendResult:
        html = f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1>Happening Soon!</h1>
  <p>{escape(event_title)} is in <strong>{escape(reminder_type)}</strong>.</p>
  <p>Hi <strong>{escape(student_name)}</strong>,</p>
  <p>The event you registered for is coming up very soon.</p>
  <table>
    <tr><td>Date</td><td>{escape(event_date)}</td></tr>
    <tr><td>Venue</td><td>{escape(event_venue)}</td></tr>
  </table>
  <p><a href="{get_qr_url(qr_token)}">View Your QR Pass</a></p>
  <p>Arrive a few minutes early to explore the booths!</p>
</body>
</html>"""
        return await self._send(
            to=[to],
            subject=f"{event_title} is in {reminder_type}!",
            html=html,
        )

    async def send_access_request(
        self,
        university_name: str,
        event_id: str,
        event_title: str,
    ) -> SendResult:
        """Tell the admins a university asked to join an event."""
        recipients = self._config.admin_recipients
        if not recipients:
            return SendResult.failed("No admin recipients configured")

        html = (
            f"<p>University <strong>{escape(university_name)}</strong> has requested "
            f"to participate in <strong>{escape(event_title)}</strong>.</p>"
            f"<p>Event ID: {escape(event_id)}</p>"
            "<p>Review the request in the admin panel.</p>"
        )
        return await self._send(
            to=recipients,
            subject=f"Participation Request: {university_name}",
            html=html,
        )

    async def _send(self, **payload: Any) -> SendResult:
        api_key = get_settings().resend_api_key
        if not api_key:
            logger.warning("Email provider not configured, skipping send")
            return SendResult.failed("Email provider not configured")

        body = {"from": self._config.from_address, **payload}
        try:
            response = await self._http.request(
                "POST",
                self._config.api_url,
                json=body,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except Exception as e:
            logger.error("Email send failed", extra={"error": str(e)})
            return SendResult.failed(str(e) or type(e).__name__)

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> SendResult:
        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_success:
            return SendResult.ok(message_id=data.get("id"))

        error = data.get("message") or f"Status {response.status_code}"
        logger.error(
            "Email provider rejected message",
            extra={"status_code": response.status_code, "error": error},
        )
        return SendResult.failed(error)


_email_client: EmailClient | None = None


def get_email_client() -> EmailClient:
    """Get or create the process-wide email client."""
    global _email_client
    if _email_client is None:
        _email_client = EmailClient()
    return _email_client
