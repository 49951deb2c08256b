"""
Unit Tests for Configuration.

Covers YAML loading, typed config access and the derived connection URLs.
"""

from unittest.mock import MagicMock, patch

import pytest
from pydantic import BaseModel

from fairpass.backend.core import config as config_module
from fairpass.backend.core.config import (
    find_project_root,
    get_app_config,
    get_database_url,
    get_redis_url,
    load_yaml_config,
)


class TestProjectRoot:
    """Tests for project root discovery."""

    def test_finds_marker_file(self):
        """Should locate the directory holding .project_root."""
        root = find_project_root()

        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()


class TestYamlLoading:
    """Tests for load_yaml_config."""

    def test_loads_application_yaml(self):
        """Should parse a settings file into a dict."""
        data = load_yaml_config("application.yaml")

        assert data["name"] == "FairPass"
        assert data["api_prefix"] == "/api/v1"

    def test_missing_file_raises(self):
        """Should fail loudly when a settings file is missing."""
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does-not-exist.yaml")

    def test_invalid_config_reports_filename(self):
        """Should name the offending file when validation fails."""

        class Strict(BaseModel):
            required_field: int

        with patch.object(config_module, "load_yaml_config", return_value={}):
            with pytest.raises(ValueError, match="broken.yaml"):
                config_module._load_validated(Strict, "broken.yaml")


class TestAppConfig:
    """Tests for typed attribute access on AppConfig."""

    def test_sections_are_typed(self):
        """Should expose each YAML file as an attribute-access model."""
        app_config = get_app_config()

        assert app_config.application.server.port == 8000
        assert app_config.security.jwt.algorithm == "HS256"
        assert app_config.security.rate_limiting.registration.limit == 5
        assert app_config.integrations.reminders.window_hours == 24
        assert app_config.features.notifications_enabled is True

    def test_config_is_cached(self):
        """Should return the same instance on repeated calls."""
        assert get_app_config() is get_app_config()


class TestConnectionUrls:
    """Tests for database and Redis URL construction."""

    def test_database_url_override_wins(self):
        """Should use DATABASE_URL when it is set."""
        settings = MagicMock(database_url="sqlite+aiosqlite:///:memory:")
        with patch.object(config_module, "get_settings", return_value=settings):
            assert get_database_url() == "sqlite+aiosqlite:///:memory:"

    def test_database_url_from_yaml(self):
        """Should build a PostgreSQL URL from YAML host settings and DB_PASSWORD."""
        settings = MagicMock(database_url="", db_password="s3cret")
        db = get_app_config().database
        with patch.object(config_module, "get_settings", return_value=settings):
            url = get_database_url()

        assert url == f"postgresql+asyncpg://{db.user}:s3cret@{db.host}:{db.port}/{db.name}"

    @pytest.mark.parametrize("scheme", ["postgres", "postgresql"])
    def test_hosted_url_uses_asyncpg(self, scheme):
        """Should switch provider-issued Postgres URLs to the async driver."""
        settings = MagicMock(database_url=f"{scheme}://fair:pw@db.example.com:5432/fairpass")
        with patch.object(config_module, "get_settings", return_value=settings):
            assert get_database_url() == "postgresql+asyncpg://fair:pw@db.example.com:5432/fairpass"

    def test_redis_url(self):
        """Should build a Redis URL from YAML and REDIS_PASSWORD."""
        settings = MagicMock(redis_password="pw")
        with patch.object(config_module, "get_settings", return_value=settings):
            assert get_redis_url() == "redis://:pw@localhost:6379/0"
