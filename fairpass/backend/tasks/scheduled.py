"""
Scheduled Background Tasks.

Tasks that run on a schedule (cron-based). They are registered with the
broker together with schedule metadata that the TaskiqScheduler reads
via LabelScheduleSource.

Schedule Format:
    schedule=[{"cron": "* * * * *", "args": [...], "kwargs": {...}}]

Examples:
    "0 * * * *"     - Every hour at minute 0
    "0 9 * * *"     - Daily at 9:00 AM UTC
"""

from typing import Any

from fairpass.backend.core.config import get_app_config
from fairpass.backend.core.database import get_session_factory
from fairpass.backend.core.logging import bind_source, get_logger
from fairpass.backend.core.utils import utc_now
from fairpass.backend.services.messaging import MessagingService
from fairpass.backend.tasks.enrichment import enrichment_backfill

logger = get_logger(__name__)


# =============================================================================
# Scheduled Task Functions
# =============================================================================


async def send_event_reminders() -> dict[str, Any]:
    """
    Remind registrants of events starting within the configured window.

    Runs daily. Each registration is reminded at most once.
    """
    bind_source("tasks")
    config = get_app_config().integrations.reminders
    logger.info("Starting event reminders", extra={"window_hours": config.window_hours})

    async with get_session_factory()() as session:
        result = await MessagingService(session).send_event_reminders(
            config.window_hours, config.label
        )
        await session.commit()

    summary = {
        "status": "completed",
        "events": result.events,
        "sent": result.sent,
        "skipped": result.skipped,
        "failed": result.failed,
        "completed_at": utc_now().isoformat(),
    }
    logger.info("Event reminders completed", extra=summary)
    return summary


async def hourly_enrichment_backfill() -> dict[str, Any]:
    """Backfill AI enrichment with the configured batch settings."""
    return await enrichment_backfill()


# =============================================================================
# Schedule Configuration
# =============================================================================

SCHEDULED_TASKS = {
    "hourly_enrichment_backfill": {
        "function": hourly_enrichment_backfill,
        "schedule": [{"cron": "0 * * * *"}],
        "retry_on_error": False,
        "description": "Enrich registrants missing AI fields every hour",
    },
    "send_event_reminders": {
        "function": send_event_reminders,
        "schedule": [{"cron": "0 9 * * *"}],
        "retry_on_error": False,
        "description": "Email reminders for events starting within the window, daily at 9:00 UTC",
    },
}


def register_scheduled_tasks() -> dict[str, Any]:
    """
    Register scheduled task functions with the Taskiq broker.

    Returns:
        Dict mapping task names to registered task objects
    """
    from fairpass.backend.tasks.broker import get_broker

    broker = get_broker()
    registered = {}

    for task_name, config in SCHEDULED_TASKS.items():
        registered[task_name] = broker.task(
            task_name=task_name,
            schedule=config["schedule"],
            retry_on_error=config["retry_on_error"],
        )(config["function"])

    logger.info(
        "Scheduled tasks registered",
        extra={"task_count": len(registered), "tasks": list(registered.keys())},
    )
    return registered
