"""Fixed window rate limiter implementation.

Each limit owns a counter that lives for one window. The first hit creates
the counter with an expiry; later hits only increment it, so the window
resets on a fixed cadence rather than sliding.

Counters live in Redis (shared by every worker) or in process memory
(single-process deployments and tests), selected by
``settings.rate_limit_storage``.
"""

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from staffdesk.config import settings
from staffdesk.core.cache.redis import redis_client


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    allowed: bool
    limit: int
    remaining: int
    reset_time: int
    retry_after: int | None = None


@dataclass(frozen=True)
class Limit:
    """A single window: at most ``max_attempts`` hits per ``window`` seconds."""

    key: str
    max_attempts: int
    window: int


class WindowStore(Protocol):
    """Storage for fixed window counters."""

    async def attempts(self, key: str) -> tuple[int, int]:
        """Return ``(count, seconds_until_reset)`` without hitting."""
        ...

    async def hit(self, key: str, window: int) -> tuple[int, int]:
        """Increment the counter, starting a window if none is open."""
        ...

    async def clear(self, key: str) -> None:
        """Forget the counter for ``key``."""
        ...


class RedisWindowStore:
    """Redis-backed counters using ``SET NX EX`` + ``INCR``."""

    async def attempts(self, key: str) -> tuple[int, int]:
        async with redis_client() as client, client.pipeline(transaction=True) as pipe:
            pipe.get(key)
            pipe.ttl(key)
            count, ttl = await pipe.execute()
        return int(count or 0), max(int(ttl), 0)

    async def hit(self, key: str, window: int) -> tuple[int, int]:
        async with redis_client() as client, client.pipeline(transaction=True) as pipe:
            # Opens the window only if no counter exists yet
            pipe.set(key, 0, ex=window, nx=True)
            pipe.incr(key)
            pipe.ttl(key)
            _, count, ttl = await pipe.execute()
        return int(count), max(int(ttl), 0)

    async def clear(self, key: str) -> None:
        async with redis_client() as client:
            await client.delete(key)


class MemoryWindowStore:
    """In-process counters keyed by name, expiring on a monotonic clock."""

    def __init__(self) -> None:
        self._windows: dict[str, tuple[int, float]] = {}

    def _live(self, key: str) -> tuple[int, float] | None:
        entry = self._windows.get(key)
        if entry is not None and entry[1] <= time.monotonic():
            del self._windows[key]
            return None
        return entry

    def _seconds_left(self, expires_at: float) -> int:
        return max(math.ceil(expires_at - time.monotonic()), 0)

    async def attempts(self, key: str) -> tuple[int, int]:
        entry = self._live(key)
        if entry is None:
            return 0, 0
        count, expires_at = entry
        return count, self._seconds_left(expires_at)

    async def hit(self, key: str, window: int) -> tuple[int, int]:
        entry = self._live(key)
        if entry is None:
            entry = (0, time.monotonic() + window)
        count, expires_at = entry[0] + 1, entry[1]
        self._windows[key] = (count, expires_at)
        return count, self._seconds_left(expires_at)

    async def clear(self, key: str) -> None:
        self._windows.pop(key, None)

    def reset(self) -> None:
        """Drop every counter."""
        self._windows.clear()


class FixedWindowRateLimiter:
    """Rate limiter enforcing several fixed windows at once.

    Every window is checked before any is hit, so a rejected request does
    not consume budget in the other windows.
    """

    def __init__(self, store: WindowStore, prefix: str = "ratelimit") -> None:
        """Initialize the rate limiter.

        Args:
            store: Counter storage
            prefix: Key prefix for stored counters
        """
        self.store = store
        self.prefix = prefix

    def _build_key(self, key: str) -> str:
        return f"{self.prefix}:{key}"

    async def attempt(self, limits: Sequence[Limit]) -> RateLimitResult:
        """Record one request against every limit, unless one is exhausted.

        Args:
            limits: Windows to enforce

        Returns:
            The rejecting window's result, or the tightest window after hitting
        """
        now = int(time.time())

        for limit in limits:
            count, ttl = await self.store.attempts(self._build_key(limit.key))
            if count >= limit.max_attempts:
                retry_after = ttl or limit.window
                return RateLimitResult(
                    allowed=False,
                    limit=limit.max_attempts,
                    remaining=0,
                    reset_time=now + retry_after,
                    retry_after=retry_after,
                )

        tightest: RateLimitResult | None = None
        for limit in limits:
            count, ttl = await self.store.hit(self._build_key(limit.key), limit.window)
            result = RateLimitResult(
                allowed=True,
                limit=limit.max_attempts,
                remaining=max(0, limit.max_attempts - count),
                reset_time=now + (ttl or limit.window),
            )
            if tightest is None or result.remaining < tightest.remaining:
                tightest = result

        if tightest is None:
            return RateLimitResult(allowed=True, limit=0, remaining=0, reset_time=now)
        return tightest

    async def reset(self, limits: Sequence[Limit]) -> None:
        """Clear the counters for ``limits``."""
        for limit in limits:
            await self.store.clear(self._build_key(limit.key))


def build_store(kind: str) -> WindowStore:
    """Create the configured counter store."""
    if kind == "memory":
        return MemoryWindowStore()
    return RedisWindowStore()


# Global rate limiter instance
rate_limiter = FixedWindowRateLimiter(build_store(settings.rate_limit_storage))
