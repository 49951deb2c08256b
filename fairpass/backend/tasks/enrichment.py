"""
On-demand Enrichment Tasks.

Task functions are plain async functions so they can be called directly
(CLI, tests) or dispatched through the broker once registered.

Usage:
    from fairpass.backend.tasks import register_tasks

    tasks = register_tasks()
    await tasks["enrichment_backfill"].kiq(batch_size=100)
"""

from typing import Any

from fairpass.backend.core.database import get_session_factory
from fairpass.backend.core.logging import bind_source, get_logger
from fairpass.backend.core.utils import utc_now
from fairpass.backend.services.enrichment import EnrichmentService

logger = get_logger(__name__)


async def enrichment_backfill(
    batch_size: int | None = None,
    delay_seconds: float | None = None,
    max_batches: int | None = None,
) -> dict[str, Any]:
    """
    Enrich every registrant still missing gender or standardized major.

    Runs in its own session and commits once the backfill finishes.
    """
    bind_source("tasks")
    logger.info("Starting enrichment backfill", extra={"batch_size": batch_size})

    async with get_session_factory()() as session:
        result = await EnrichmentService(session).backfill(
            batch_size=batch_size,
            delay_seconds=delay_seconds,
            max_batches=max_batches,
        )
        await session.commit()

    summary = {
        "status": "completed",
        "processed": result.processed,
        "batches": result.batches,
        "completed_at": utc_now().isoformat(),
    }
    logger.info("Enrichment backfill completed", extra=summary)
    return summary


TASK_CONFIG = {
    "enrichment_backfill": {
        "function": enrichment_backfill,
        "retry_on_error": False,
        "description": "Enrich registrants missing AI fields",
    },
}


def register_tasks() -> dict[str, Any]:
    """
    Register on-demand task functions with the Taskiq broker.

    Returns:
        Dict mapping task names to registered task objects
    """
    from fairpass.backend.tasks.broker import get_broker

    broker = get_broker()
    registered = {
        name: broker.task(task_name=name, retry_on_error=config["retry_on_error"])(
            config["function"]
        )
        for name, config in TASK_CONFIG.items()
    }
    logger.info("Tasks registered", extra={"tasks": list(registered)})
    return registered
