#!/usr/bin/env python3
"""
Fairpass CLI.

Primary entry point for all application operations.
Use --service to select what to run, --action to control lifecycle.

Usage:
    python cli.py --help
    python cli.py --service server --verbose
    python cli.py --service server --action stop
    python cli.py --service seed --email admin@example.com --password secret123
    python cli.py --service backfill --batch-size 100
    python cli.py --service reminders
    python cli.py --service config
    python cli.py --service migrate --migrate-action upgrade
"""

import asyncio
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click

PROJECT_ROOT = Path(__file__).parent

from fairpass.backend.core.logging import bind_source, get_logger, setup_logging

LONG_RUNNING_SERVICES = {"server", "worker", "scheduler"}


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _find_process_on_port(port: int) -> list[int]:
    """Find PIDs listening on a port."""
    result = subprocess.run(
        ["lsof", "-ti", f":{port}"],
        capture_output=True, text=True,
    )
    pids = result.stdout.strip().split("\n")
    return [int(p) for p in pids if p.strip()]


def _service_stop(logger, service: str, port: int) -> None:
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No {service} running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"service": service, "pid": pid, "port": port})

    click.echo(f"{service.title()} on port {port} stopped (PID: {', '.join(str(p) for p in pids)}).")


def _service_status(service: str, port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"{service.title()} is running on port {port} (PID: {', '.join(str(p) for p in pids)}).")
    else:
        click.echo(f"{service.title()} is not running on port {port}.")


def _get_service_port(port: int | None) -> int:
    if port is not None:
        return port
    from fairpass.backend.core.config import get_app_config
    return get_app_config().application.server.port


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "backfill", "seed", "reminders", "worker", "scheduler", "config", "migrate"]),
    default="config",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for long-running services (server, worker, scheduler).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option("--email", default=None, help="Super admin email (seed only).")
@click.option("--password", default=None, help="Super admin password (seed only).")
@click.option("--batch-size", default=None, type=int, help="Registrants per batch (backfill only).")
@click.option("--max-batches", default=None, type=int, help="Stop after this many batches (backfill only).")
@click.option("--workers", default=1, type=int, help="Number of worker processes.")
@click.option(
    "--migrate-action",
    type=click.Choice(["upgrade", "downgrade", "current", "history", "autogenerate"]),
    default="current",
    help="Migration action.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Migration message (for autogenerate).")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    email: str | None,
    password: str | None,
    batch_size: int | None,
    max_batches: int | None,
    workers: int,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """
    Fairpass CLI.

    Use --service to select what to run. For long-running services
    (server, worker, scheduler), use --action to control lifecycle
    (start/stop/restart/status).

    \b
    Examples:
        python cli.py --service server --verbose
        python cli.py --service server --action restart --port 8099
        python cli.py --service seed --email admin@example.com --password secret123
        python cli.py --service backfill --batch-size 100 --verbose
        python cli.py --service reminders
        python cli.py --service worker --workers 2
        python cli.py --service scheduler
        python cli.py --service migrate --migrate-action upgrade
        python cli.py --service config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    bind_source("cli")
    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "action": action, "log_level": log_level})

    if service in LONG_RUNNING_SERVICES and action != "start":
        service_port = _get_service_port(port)

        if action == "stop":
            _service_stop(logger, service, service_port)
            return
        elif action == "status":
            _service_status(service, service_port)
            return
        elif action == "restart":
            _service_stop(logger, service, service_port)
            time.sleep(2)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "backfill":
        run_backfill(logger, batch_size, max_batches)
    elif service == "seed":
        run_seed(logger, email, password)
    elif service == "reminders":
        run_reminders(logger)
    elif service == "worker":
        run_worker(logger, workers)
    elif service == "scheduler":
        run_scheduler(logger)
    elif service == "config":
        show_config(logger)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server."""
    from fairpass.backend.core.config import get_app_config

    try:
        server_config = get_app_config().application.server
    except Exception as e:
        logger.error("Failed to load configuration.", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load config/settings/application.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)

    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info("Starting server", extra={"host": server_host, "port": server_port, "reload": reload})

    cmd = [
        sys.executable, "-m", "uvicorn",
        "fairpass.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


async def _close_database() -> None:
    from fairpass.backend.core.database import dispose_engine
    await dispose_engine()


def run_backfill(logger, batch_size: int | None, max_batches: int | None) -> None:
    """Run the AI enrichment backfill inline, without the broker."""
    from fairpass.backend.tasks.enrichment import enrichment_backfill

    async def _run() -> dict:
        try:
            return await enrichment_backfill(batch_size=batch_size, max_batches=max_batches)
        finally:
            await _close_database()

    click.echo("Running enrichment backfill...")
    try:
        result = asyncio.run(_run())
    except Exception as e:
        logger.error("Backfill failed", extra={"error": str(e)})
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Enriched {result['processed']} registrant(s) in {result['batches']} batch(es).")


def run_reminders(logger) -> None:
    """Send event reminders inline, without the broker."""
    from fairpass.backend.tasks.scheduled import send_event_reminders

    async def _run() -> dict:
        try:
            return await send_event_reminders()
        finally:
            await _close_database()

    click.echo("Sending event reminders...")
    try:
        result = asyncio.run(_run())
    except Exception as e:
        logger.error("Reminders failed", extra={"error": str(e)})
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(
        f"Events: {result['events']}  Sent: {result['sent']}  "
        f"Skipped: {result['skipped']}  Failed: {result['failed']}"
    )


def run_seed(logger, email: str | None, password: str | None) -> None:
    """Seed default message templates and, optionally, a super admin."""
    from fairpass.backend.core.database import get_session_factory
    from fairpass.backend.core.exceptions import ApplicationError
    from fairpass.backend.models.enums import AdminRole
    from fairpass.backend.schemas.user import UserCreate
    from fairpass.backend.services.messaging import MessagingService
    from fairpass.backend.services.users import UserService

    if bool(email) != bool(password):
        click.echo(click.style("Error: --email and --password go together.", fg="red"), err=True)
        sys.exit(1)

    async def _run() -> tuple[int, str | None]:
        try:
            async with get_session_factory()() as session:
                templates = await MessagingService(session).seed_default_templates()
                admin_email = None
                if email:
                    user = await UserService(session).create_user(
                        UserCreate(
                            name="Super Admin",
                            email=email,
                            role=AdminRole.SUPER_ADMIN,
                            password=password,
                        )
                    )
                    admin_email = user.email
                await session.commit()
                return len(templates), admin_email
        finally:
            await _close_database()

    try:
        template_count, admin_email = asyncio.run(_run())
    except ApplicationError as e:
        logger.error("Seed failed", extra={"error": e.message})
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Seeded {template_count} message template(s).")
    if admin_email:
        click.echo(f"Created super admin {admin_email}.")
    logger.info("Seed completed", extra={"templates": template_count, "admin": admin_email})


def _check_redis(logger) -> None:
    try:
        from fairpass.backend.core.config import get_redis_url
        redis_url = get_redis_url()
        logger.debug("Redis configured", extra={"redis_url": redis_url.split("@")[-1]})
    except Exception as e:
        logger.error("Failed to load Redis configuration.", extra={"error": str(e)})
        click.echo(click.style(f"Error: Redis not configured: {e}", fg="red"), err=True)
        sys.exit(1)


def run_worker(logger, workers: int) -> None:
    """Start the Taskiq background task worker."""
    logger.info("Starting background task worker", extra={"workers": workers})
    _check_redis(logger)

    cmd = [
        sys.executable, "-m", "taskiq",
        "worker",
        "fairpass.backend.tasks.broker:broker",
        "fairpass.backend.tasks.enrichment",
        "fairpass.backend.tasks.scheduled",
        "--workers", str(workers),
    ]

    click.echo(f"Starting Taskiq worker with {workers} worker(s)")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Worker stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Worker failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def run_scheduler(logger) -> None:
    """Start the Taskiq scheduler for the cron tasks."""
    from fairpass.backend.tasks.scheduled import SCHEDULED_TASKS

    logger.info("Starting task scheduler")
    _check_redis(logger)

    click.echo("Scheduled tasks:")
    for task_name, config in SCHEDULED_TASKS.items():
        click.echo(f"  - {task_name}: {config['schedule'][0].get('cron', 'N/A')}")
    click.echo()

    cmd = [
        sys.executable, "-m", "taskiq",
        "scheduler",
        "fairpass.backend.tasks.scheduler:scheduler",
    ]

    click.echo("Starting Taskiq scheduler")
    click.echo("WARNING: Run only ONE scheduler instance to avoid duplicate task execution")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Scheduler failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _echo_section(title: str, values: dict) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"  {key}:")
            for k, v in value.items():
                click.echo(f"    {k}: {v}")
        else:
            click.echo(f"  {key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    try:
        from fairpass.backend.core.config import get_app_config

        app_config = get_app_config()
        _echo_section("Application Settings (from YAML)", app_config.application.model_dump())
        _echo_section("Database Settings (from YAML)", app_config.database.model_dump())
        _echo_section("Logging Settings (from YAML)", app_config.logging.model_dump())
        _echo_section("Feature Flags (from YAML)", app_config.features.model_dump())
        _echo_section("Integrations (from YAML)", app_config.integrations.model_dump())

        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_migrations(logger, migrate_action: str, revision: str, message: str | None) -> None:
    """Run database migrations using Alembic."""
    logger.info("Running migrations", extra={"action": migrate_action, "revision": revision})

    alembic_ini = PROJECT_ROOT / "alembic.ini"
    if not alembic_ini.exists():
        click.echo(click.style("Error: alembic.ini not found.", fg="red"), err=True)
        sys.exit(1)

    cmd = [sys.executable, "-m", "alembic", "-c", str(alembic_ini)]

    if migrate_action == "upgrade":
        cmd.extend(["upgrade", revision])
        click.echo(f"Upgrading database to revision: {revision}")
    elif migrate_action == "downgrade":
        cmd.extend(["downgrade", revision])
        click.echo(f"Downgrading database to revision: {revision}")
    elif migrate_action == "current":
        cmd.append("current")
    elif migrate_action == "history":
        cmd.extend(["history", "--verbose"])
    elif migrate_action == "autogenerate":
        if not message:
            click.echo(click.style("Error: --message/-m required for autogenerate.", fg="red"), err=True)
            sys.exit(1)
        cmd.extend(["revision", "--autogenerate", "-m", message])
        click.echo(f"Generating migration: {message}")

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    logger.info("Migration completed successfully")


if __name__ == "__main__":
    main()
