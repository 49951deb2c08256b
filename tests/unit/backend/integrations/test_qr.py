"""
Unit Tests for QR Tickets.
"""

import base64

from fairpass.backend.integrations.qr import (
    TOKEN_ALPHABET,
    generate_qr_data_url,
    generate_qr_png,
    generate_qr_token,
    get_qr_url,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class TestQrToken:
    def test_token_shape(self):
        """Should be 24 alphanumeric characters."""
        token = generate_qr_token()

        assert len(token) == 24
        assert set(token) <= set(TOKEN_ALPHABET)

    def test_tokens_are_unique(self):
        assert len({generate_qr_token() for _ in range(200)}) == 200


class TestQrUrl:
    def test_points_at_public_pass_page(self, app_config):
        base = app_config.application.public_url.rstrip("/")

        assert get_qr_url("abc123") == f"{base}/r/abc123"


class TestQrImages:
    def test_png_bytes(self):
        assert generate_qr_png("abc123").startswith(PNG_SIGNATURE)

    def test_data_url_wraps_png(self):
        data_url = generate_qr_data_url("abc123")

        prefix = "data:image/png;base64,"
        assert data_url.startswith(prefix)
        assert base64.b64decode(data_url[len(prefix):]).startswith(PNG_SIGNATURE)
