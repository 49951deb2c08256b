"""
Unit Tests for Centralized Logging.
"""

import pytest
import structlog

from fairpass.backend.core.config import find_project_root
from fairpass.backend.core.logging import (
    MASK,
    _resolve_log_path,
    bind_source,
    get_logger,
    mask_sensitive,
)


class TestMaskSensitive:
    def test_masks_top_level_keys(self):
        event = {"event": "Usher login", "access_code": "4821", "email": "usher@example.com"}

        result = mask_sensitive(None, "info", event)

        assert result["access_code"] == MASK
        assert result["email"] == "usher@example.com"

    def test_masks_inside_extra(self):
        """Should mask values passed through extra={...}."""
        event = {"event": "Ticket viewed", "extra": {"qr_token": "abc123", "event_id": "e1"}}

        result = mask_sensitive(None, "info", event)

        assert result["extra"] == {"qr_token": MASK, "event_id": "e1"}

    def test_keys_are_case_insensitive(self):
        result = mask_sensitive(None, "info", {"Authorization": "Bearer xyz"})

        assert result["Authorization"] == MASK

    def test_empty_values_left_alone(self):
        """Should keep a missing credential visible as missing."""
        result = mask_sensitive(None, "info", {"api_key": None})

        assert result["api_key"] is None


class TestBindSource:
    def test_binds_known_source(self):
        structlog.contextvars.clear_contextvars()

        bind_source("tasks")

        assert structlog.contextvars.get_contextvars()["source"] == "tasks"
        structlog.contextvars.clear_contextvars()

    def test_rejects_unknown_source(self):
        with pytest.raises(ValueError):
            bind_source("cron")


class TestLogPath:
    def test_relative_to_project_root(self):
        """Should resolve configured log paths against the project root."""
        assert _resolve_log_path("logs/system.jsonl") == find_project_root() / "logs" / "system.jsonl"


class TestGetLogger:
    def test_returns_usable_logger(self):
        logger = get_logger("fairpass.tests")

        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")
