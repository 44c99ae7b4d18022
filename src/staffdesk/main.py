"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from staffdesk import __version__
from staffdesk.api.router import api_router
from staffdesk.config import settings
from staffdesk.core.auth import AuthContextMiddleware, RequestIdMiddleware
from staffdesk.core.cache import close_redis_pool
from staffdesk.core.database import async_engine
from staffdesk.core.errors import register_exception_handlers
from staffdesk.core.jobs import close_arq_pool, init_arq_pool
from staffdesk.core.logging import RequestLoggingMiddleware
from staffdesk.core.observability import setup_tracing, shutdown_tracing


structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        (
            structlog.processors.JSONRenderer()
            if settings.is_production
            else structlog.dev.ConsoleRenderer()
        ),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelNamesMapping().get(settings.log_level.upper(), logging.INFO)
    ),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    The job queue is optional at startup: without it user creation still
    works and the welcome notification is logged as not queued.
    """
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        environment=settings.environment,
    )

    try:
        await init_arq_pool()
        logger.info("arq_pool_initialized")
    except (RedisError, OSError) as e:
        logger.warning("arq_pool_init_failed", error=str(e))

    yield

    logger.info("application_shutdown")
    shutdown_tracing()
    await close_arq_pool()
    await close_redis_pool()
    await async_engine.dispose()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    docs_enabled = not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        description="Admin API for staff accounts, roles and permissions",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
        expose_headers=[
            "X-Request-ID",
            "Retry-After",
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
        ],
    )

    # Added innermost first: request id, then subject, then logging
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(AuthContextMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(api_router)

    setup_tracing(app, engine=async_engine.sync_engine)

    return app


app = create_app()
