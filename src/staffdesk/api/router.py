"""Root API router with health endpoints and module mounting."""

from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from staffdesk import __version__
from staffdesk.api.dependencies import DBSession
from staffdesk.config import settings
from staffdesk.core.auth.routes import router as auth_router
from staffdesk.core.cache import redis_client
from staffdesk.modules import discover_modules


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    checks: dict[str, str]


# Health check endpoints (no /api/v1 prefix)
health_router = APIRouter(tags=["health"])


@health_router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def liveness() -> HealthResponse:
    return HealthResponse(status="alive")


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks the database and, when it backs the rate limiter, Redis.",
)
async def readiness(db: DBSession) -> JSONResponse:
    """Readiness probe endpoint."""
    checks: dict[str, str] = {}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        checks["database"] = type(e).__name__

    if settings.rate_limit_storage == "redis":
        try:
            async with redis_client() as client:
                await client.ping()
            checks["redis"] = "ok"
        except (RedisError, OSError) as e:
            checks["redis"] = type(e).__name__

    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if all_ok else "degraded",
            "checks": checks,
        },
    )


@health_router.get("/info", summary="Application info")
async def info() -> dict[str, Any]:
    return {
        "app": settings.app_name,
        "version": __version__,
        "environment": settings.environment,
        "debug": settings.debug,
    }


# Versioned API: authentication plus every discovered module
v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(auth_router)
for module_router in discover_modules():
    v1_router.include_router(module_router)

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(v1_router)
