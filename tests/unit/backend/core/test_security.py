"""
Unit Tests for Security Utilities.

Password hashing and JWT handling.
"""

from datetime import timedelta

import pytest
from jose import jwt

from fairpass.backend.core.config import get_app_config, get_settings
from fairpass.backend.core.exceptions import AuthenticationError
from fairpass.backend.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt hashing."""

    def test_hash_verifies(self):
        """Should verify the password the hash was made from."""
        hashed = hash_password("my-password")

        assert hashed != "my-password"
        assert verify_password("my-password", hashed) is True

    def test_wrong_password_rejected(self):
        """Should reject a different password."""
        assert verify_password("other", hash_password("my-password")) is False

    def test_malformed_hash_never_matches(self):
        """Should return False instead of raising for a corrupt hash."""
        assert verify_password("anything", "not-a-bcrypt-hash") is False


class TestAccessTokens:
    """Tests for JWT creation and validation."""

    def test_claims_survive_decoding(self):
        """Should carry the principal claims and the audience."""
        token = create_access_token({"sub": "user-1", "type": "ADMIN", "role": "SUPER_ADMIN"})
        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["role"] == "SUPER_ADMIN"
        assert payload["aud"] == get_app_config().security.jwt.audience
        assert "exp" in payload

    def test_expired_token_rejected(self):
        """Should raise AuthenticationError for an expired token."""
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_foreign_signature_rejected(self):
        """Should reject a token signed with another secret."""
        jwt_config = get_app_config().security.jwt
        token = jwt.encode(
            {"sub": "user-1", "aud": jwt_config.audience},
            "some-other-secret-entirely-0123456789",
            algorithm=jwt_config.algorithm,
        )

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_token(token)

    def test_wrong_audience_rejected(self):
        """Should reject a token minted for another audience."""
        jwt_config = get_app_config().security.jwt
        token = jwt.encode(
            {"sub": "user-1", "aud": "another-api"},
            get_settings().jwt_secret,
            algorithm=jwt_config.algorithm,
        )

        with pytest.raises(AuthenticationError):
            decode_token(token)
