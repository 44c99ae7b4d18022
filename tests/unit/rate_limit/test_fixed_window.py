"""Tests for the fixed window rate limiter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from staffdesk.core.rate_limit.backend import (
    FixedWindowRateLimiter,
    Limit,
    MemoryWindowStore,
    RedisWindowStore,
    build_store,
)


pytestmark = pytest.mark.unit


def _limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(MemoryWindowStore())


class TestFixedWindowRateLimiter:
    """Tests for FixedWindowRateLimiter with the memory store."""

    async def test_counts_down_then_rejects(self):
        limiter = _limiter()
        limits = [Limit(key="user:1", max_attempts=3, window=60)]

        remaining = [(await limiter.attempt(limits)).remaining for _ in range(3)]
        rejected = await limiter.attempt(limits)

        assert remaining == [2, 1, 0]
        assert rejected.allowed is False
        assert rejected.remaining == 0
        assert 0 < rejected.retry_after <= 60

    async def test_reports_tightest_window(self):
        limiter = _limiter()
        limits = [
            Limit(key="user:1", max_attempts=60, window=60),
            Limit(key="ip:10.0.0.1", max_attempts=240, window=60),
        ]

        result = await limiter.attempt(limits)

        assert result.allowed is True
        assert result.limit == 60
        assert result.remaining == 59

    async def test_rejection_does_not_consume_other_windows(self):
        limiter = _limiter()
        user = Limit(key="user:1", max_attempts=1, window=60)
        ip = Limit(key="ip:10.0.0.1", max_attempts=10, window=60)

        await limiter.attempt([user, ip])
        await limiter.attempt([user, ip])
        await limiter.attempt([user, ip])

        count, _ = await limiter.store.attempts("ratelimit:ip:10.0.0.1")
        assert count == 1

    async def test_windows_are_independent_per_key(self):
        limiter = _limiter()

        await limiter.attempt([Limit(key="user:1", max_attempts=1, window=60)])
        other = await limiter.attempt([Limit(key="user:2", max_attempts=1, window=60)])

        assert other.allowed is True

    async def test_reset_clears_counters(self):
        limiter = _limiter()
        limits = [Limit(key="user:1", max_attempts=1, window=60)]
        await limiter.attempt(limits)

        await limiter.reset(limits)

        assert (await limiter.attempt(limits)).allowed is True


class TestMemoryWindowStore:
    """Tests for window expiry in the memory store."""

    async def test_window_expires(self):
        store = MemoryWindowStore()

        with patch("staffdesk.core.rate_limit.backend.time") as clock:
            clock.monotonic.return_value = 100.0
            await store.hit("k", 60)
            await store.hit("k", 60)
            assert await store.attempts("k") == (2, 60)

            clock.monotonic.return_value = 160.0
            assert await store.attempts("k") == (0, 0)
            assert await store.hit("k", 60) == (1, 60)


class TestRedisWindowStore:
    """Tests for the Redis store's command pipeline."""

    def _patched_client(self, results: list) -> tuple[MagicMock, MagicMock]:
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=results)
        pipe.__aenter__ = AsyncMock(return_value=pipe)
        pipe.__aexit__ = AsyncMock(return_value=None)

        client = MagicMock()
        client.pipeline = MagicMock(return_value=pipe)
        return client, pipe

    async def test_hit_opens_window_then_increments(self):
        client, pipe = self._patched_client([True, 1, 60])

        with patch("staffdesk.core.rate_limit.backend.redis_client") as mock_redis:
            mock_redis.return_value.__aenter__ = AsyncMock(return_value=client)
            mock_redis.return_value.__aexit__ = AsyncMock(return_value=None)

            result = await RedisWindowStore().hit("ratelimit:user:1", 60)

        assert result == (1, 60)
        pipe.set.assert_called_once_with("ratelimit:user:1", 0, ex=60, nx=True)
        pipe.incr.assert_called_once_with("ratelimit:user:1")

    async def test_attempts_reads_missing_counter_as_zero(self):
        client, _ = self._patched_client([None, -2])

        with patch("staffdesk.core.rate_limit.backend.redis_client") as mock_redis:
            mock_redis.return_value.__aenter__ = AsyncMock(return_value=client)
            mock_redis.return_value.__aexit__ = AsyncMock(return_value=None)

            assert await RedisWindowStore().attempts("ratelimit:user:1") == (0, 0)


def test_build_store_selects_backend():
    assert isinstance(build_store("memory"), MemoryWindowStore)
    assert isinstance(build_store("redis"), RedisWindowStore)
