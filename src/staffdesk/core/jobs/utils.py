"""Shared utilities for job infrastructure.

Provides common functionality used by both the worker and registry modules.
"""

from arq.connections import RedisSettings

from staffdesk.config import settings


def get_redis_settings() -> RedisSettings:
    """Get Redis settings for ARQ from app configuration.

    Returns:
        ARQ RedisSettings built from ``settings.redis_url`` (host, port,
        password and database index)
    """
    return RedisSettings.from_dsn(str(settings.redis_url))
