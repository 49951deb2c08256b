"""
Task Scheduler Configuration.

Configures the Taskiq scheduler for time-based task execution.
Uses LabelScheduleSource for static schedules attached at registration.

Usage:
    python cli.py --service scheduler

    # Or directly with taskiq
    taskiq scheduler fairpass.backend.tasks.scheduler:scheduler

Important:
    Run only ONE scheduler instance. Multiple instances will cause
    duplicate task execution.
"""

from typing import TYPE_CHECKING

from fairpass.backend.core.logging import get_logger

logger = get_logger(__name__)

if TYPE_CHECKING:
    from taskiq import TaskiqScheduler


def create_scheduler() -> "TaskiqScheduler":
    """
    Create and configure the Taskiq scheduler.

    Scheduled tasks are registered first so their labels are visible to
    the schedule source.
    """
    from taskiq import TaskiqScheduler
    from taskiq.schedule_sources import LabelScheduleSource

    from fairpass.backend.tasks.broker import get_broker
    from fairpass.backend.tasks.scheduled import register_scheduled_tasks

    broker = get_broker()
    register_scheduled_tasks()

    scheduler = TaskiqScheduler(
        broker=broker,
        sources=[LabelScheduleSource(broker)],
    )

    logger.info("Taskiq scheduler configured with LabelScheduleSource")
    return scheduler


# Lazy scheduler initialization
_scheduler: "TaskiqScheduler | None" = None


def get_scheduler() -> "TaskiqScheduler":
    global _scheduler
    if _scheduler is None:
        _scheduler = create_scheduler()
    return _scheduler


# For direct access (e.g., taskiq scheduler command)
def __getattr__(name: str):
    """Lazy attribute access for scheduler."""
    if name == "scheduler":
        return get_scheduler()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
