"""Fixed window rate limiting backed by Redis or process memory."""

from staffdesk.core.rate_limit.backend import (
    FixedWindowRateLimiter,
    Limit,
    MemoryWindowStore,
    RateLimitResult,
    RedisWindowStore,
    rate_limiter,
)
from staffdesk.core.rate_limit.dependencies import throttle


__all__ = [
    "FixedWindowRateLimiter",
    "Limit",
    "MemoryWindowStore",
    "RateLimitResult",
    "RedisWindowStore",
    "rate_limiter",
    "throttle",
]
