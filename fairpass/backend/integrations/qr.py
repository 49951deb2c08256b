"""
QR Tickets.

Ticket tokens and the QR images that encode the public pass URL.
"""

import base64
import io
import secrets
import string

import qrcode

from fairpass.backend.core.config import get_app_config

TOKEN_ALPHABET = string.ascii_letters + string.digits
TOKEN_LENGTH = 24
QR_TARGET_PIXELS = 300
QR_BORDER = 2


def generate_qr_token() -> str:
    """Random 24-character alphanumeric ticket token."""
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def get_qr_url(token: str) -> str:
    """Public pass URL a scanned ticket opens."""
    base = get_app_config().application.public_url.rstrip("/")
    return f"{base}/r/{token}"


def generate_qr_png(token: str) -> bytes:
    """PNG of the pass URL, sized to roughly 300 pixels across."""
    qr = qrcode.QRCode(border=QR_BORDER)
    qr.add_data(get_qr_url(token))
    qr.make(fit=True)
    qr.box_size = max(1, QR_TARGET_PIXELS // (qr.modules_count + 2 * QR_BORDER))

    image = qr.make_image()
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_data_url(token: str) -> str:
    encoded = base64.b64encode(generate_qr_png(token)).decode("ascii")
    return f"data:image/png;base64,{encoded}"
