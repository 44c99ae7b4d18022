"""ARQ worker configuration.

Defines the worker settings including registered jobs and
startup/shutdown hooks.
"""

from typing import Any, ClassVar

import structlog
from arq import func

from staffdesk.config import settings
from staffdesk.core.constants import JOB_MAX_TRIES
from staffdesk.core.database.session import build_engine, build_session_factory
from staffdesk.core.jobs.tasks.notifications import send_welcome_notification
from staffdesk.core.jobs.utils import get_redis_settings


async def startup(ctx: dict[str, Any]) -> None:
    """Initialize resources for the worker.

    Called once when the worker starts. Sets up database
    connections and other resources needed by jobs.

    Args:
        ctx: Worker context dict (shared across all jobs)
    """
    log = structlog.get_logger()
    log.info("worker_startup", environment=settings.environment)

    pool_options: dict[str, Any] = {}
    if not settings.is_sqlite:
        pool_options = {"pool_size": 5, "max_overflow": 10}
    engine = build_engine(**pool_options)

    # Store in context for job access
    ctx["db_engine"] = engine
    ctx["db_session_factory"] = build_session_factory(engine)

    log.info("worker_startup_complete")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Cleanup resources when the worker stops.

    Args:
        ctx: Worker context dict
    """
    log = structlog.get_logger()
    log.info("worker_shutdown")

    engine = ctx.get("db_engine")
    if engine:
        await engine.dispose()
        log.info("database_engine_disposed")

    log.info("worker_shutdown_complete")


class WorkerSettings:
    """ARQ worker settings.

    Run the worker with:
        arq staffdesk.core.jobs.worker.WorkerSettings
    """

    # Registered job functions
    functions: ClassVar[list[Any]] = [
        func(send_welcome_notification, max_tries=JOB_MAX_TRIES),
    ]

    # Worker lifecycle hooks
    on_startup = startup
    on_shutdown = shutdown

    # Redis connection
    redis_settings = get_redis_settings()

    # Worker configuration
    max_jobs = 10  # Maximum concurrent jobs
    job_timeout = 300  # 5 minutes per job
    keep_result = 3600  # Keep results for 1 hour
    retry_jobs = True  # Retry failed jobs
    max_tries = JOB_MAX_TRIES  # Maximum attempts per job
