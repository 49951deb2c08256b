"""
Background Tasks Package.

Taskiq-based background processing with a Redis broker.

Two types of tasks:
1. On-demand tasks (fairpass.backend.tasks.enrichment) - triggered by code
2. Scheduled tasks (fairpass.backend.tasks.scheduled) - triggered by cron

Usage (with Redis):
    from fairpass.backend.tasks import register_tasks

    tasks = register_tasks()
    await tasks["enrichment_backfill"].kiq(batch_size=100)

Usage (without Redis, e.g. tests and the CLI):
    from fairpass.backend.tasks import enrichment_backfill, send_event_reminders

    result = await send_event_reminders()

Workers:
    taskiq worker fairpass.backend.tasks.broker:broker fairpass.backend.tasks.enrichment
    taskiq scheduler fairpass.backend.tasks.scheduler:scheduler

Important:
    Run only ONE scheduler instance to avoid duplicate task execution.
"""

from fairpass.backend.tasks.broker import get_broker
from fairpass.backend.tasks.enrichment import TASK_CONFIG, enrichment_backfill, register_tasks
from fairpass.backend.tasks.scheduled import (
    SCHEDULED_TASKS,
    hourly_enrichment_backfill,
    register_scheduled_tasks,
    send_event_reminders,
)
from fairpass.backend.tasks.scheduler import get_scheduler

__all__ = [
    "get_broker",
    "get_scheduler",
    "register_tasks",
    "register_scheduled_tasks",
    "TASK_CONFIG",
    "SCHEDULED_TASKS",
    "enrichment_backfill",
    "hourly_enrichment_backfill",
    "send_event_reminders",
]


def __getattr__(name: str):
    """Lazy attribute access for broker and scheduler."""
    if name == "broker":
        return get_broker()
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
