"""Redis client configuration and connection management.

Provides an async Redis client with connection pooling, shared by the
rate limiter and the readiness probe.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as redis
from redis.asyncio.connection import ConnectionPool

from staffdesk.config import settings


# Connection pool for efficient connection reuse
_pool: ConnectionPool | None = None


def _get_pool() -> ConnectionPool:
    """Get or create the Redis connection pool."""
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            str(settings.redis_url),
            max_connections=50,
            decode_responses=True,
        )
    return _pool


@asynccontextmanager
async def redis_client() -> AsyncGenerator[redis.Redis, None]:  # type: ignore[type-arg]
    """Context manager for Redis client.

    Usage:
        async with redis_client() as client:
            await client.incr("key")
    """
    client = redis.Redis(connection_pool=_get_pool())
    try:
        yield client
    finally:
        await client.aclose()


async def close_redis_pool() -> None:
    """Close the Redis connection pool.

    Call this during application shutdown.
    """
    global _pool
    if _pool is not None:
        await _pool.disconnect()
        _pool = None
