"""
Integration Tests for the cli.py command-line interface.

The seed tests run the real command against a throwaway SQLite file, so
nothing touches the configured PostgreSQL database.
"""

import asyncio
import subprocess
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from cli import main
from fairpass.backend.core import database
from fairpass.backend.core.config import get_settings
from fairpass.backend.models import AdminUser, Base, MessageTemplate

PROJECT_ROOT = Path(__file__).parent.parent.parent


async def _create_schema(url: str) -> None:
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    await engine.dispose()


async def _fetch(url: str, *columns) -> list[tuple]:
    engine = create_async_engine(url)
    async with engine.connect() as conn:
        rows = (await conn.execute(select(*columns))).all()
    await engine.dispose()
    return [tuple(row) for row in rows]


@pytest.fixture
def cli_database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[str, None, None]:
    """Point the CLI at a fresh SQLite file with every table created."""
    url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setattr(database, "_engine", None)
    monkeypatch.setattr(database, "_async_session_factory", None)
    get_settings.cache_clear()
    asyncio.run(_create_schema(url))

    yield url

    get_settings.cache_clear()


class TestCliHelp:
    def test_help_returns_zero_exit_code(self):
        """Should list the services from a real interpreter run."""
        result = subprocess.run(
            [sys.executable, "cli.py", "--help"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
        )

        assert result.returncode == 0
        assert "Usage:" in result.stdout
        assert "--service" in result.stdout


class TestConfigService:
    def test_displays_yaml_settings(self):
        result = CliRunner().invoke(main, ["--service", "config"])

        assert result.exit_code == 0, result.output
        assert "Application Settings (from YAML)" in result.output
        assert "Feature Flags (from YAML)" in result.output
        assert "notifications_enabled" in result.output

    def test_secrets_not_printed(self):
        result = CliRunner().invoke(main, ["--service", "config"])

        assert get_settings().jwt_secret not in result.output


class TestSeedService:
    def test_seeds_templates_and_super_admin(self, cli_database: str):
        result = CliRunner().invoke(
            main,
            ["--service", "seed", "--email", "root@example.com", "--password", "secret123"],
        )

        assert result.exit_code == 0, result.output
        assert "Seeded 2 message template(s)." in result.output
        assert "Created super admin root@example.com." in result.output
        assert asyncio.run(_fetch(cli_database, AdminUser.email, AdminUser.role)) == [
            ("root@example.com", "SUPER_ADMIN")
        ]
        names = asyncio.run(_fetch(cli_database, MessageTemplate.name))
        assert sorted(name for (name,) in names) == ["confirmation_email", "confirmation_whatsapp"]

    def test_templates_only_is_repeatable(self, cli_database: str):
        runner = CliRunner()

        runner.invoke(main, ["--service", "seed"])
        result = runner.invoke(main, ["--service", "seed"])

        assert result.exit_code == 0, result.output
        assert len(asyncio.run(_fetch(cli_database, MessageTemplate.name))) == 2
        assert asyncio.run(_fetch(cli_database, AdminUser.email)) == []

    def test_existing_admin_email_fails(self, cli_database: str):
        args = ["--service", "seed", "--email", "root@example.com", "--password", "secret123"]
        runner = CliRunner()

        runner.invoke(main, args)
        result = runner.invoke(main, args)

        assert result.exit_code == 1
        assert "Email already exists." in result.output

    def test_email_requires_password(self):
        result = CliRunner().invoke(main, ["--service", "seed", "--email", "root@example.com"])

        assert result.exit_code == 1
        assert "--email and --password go together." in result.output
