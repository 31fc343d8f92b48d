from __future__ import annotations

import pytest

from archive.services.cache_store import InMemoryCacheStore
from archive.services.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_ceiling_then_window_reset():
    clock = FakeClock()
    store = InMemoryCacheStore(clock=clock)
    limiter = RateLimiter(store, "nytimes:ratelimit", max_requests=10, window_seconds=60)

    granted = [await limiter.try_acquire() for _ in range(10)]
    assert all(granted)
    assert await limiter.try_acquire() is False
    assert await limiter.current() == 10

    clock.now += 61
    assert await limiter.try_acquire() is True
    assert await limiter.current() == 1


@pytest.mark.asyncio
async def test_denied_call_does_not_mutate_counter():
    store = InMemoryCacheStore()
    await store.set("rl", 3, 60)
    limiter = RateLimiter(store, "rl", max_requests=3, window_seconds=60)

    assert await limiter.try_acquire() is False
    assert await store.get("rl") == 3


@pytest.mark.asyncio
async def test_each_grant_refreshes_ttl():
    clock = FakeClock()
    store = InMemoryCacheStore(clock=clock)
    limiter = RateLimiter(store, "rl", max_requests=5, window_seconds=60)

    assert await limiter.try_acquire()
    clock.now += 50
    assert await limiter.try_acquire()
    clock.now += 50
    # 100s after the first grant, but only 50s after the last one
    assert await limiter.current() == 2


def test_rejects_non_positive_configuration():
    store = InMemoryCacheStore()
    with pytest.raises(ValueError):
        RateLimiter(store, "rl", max_requests=0)
    with pytest.raises(ValueError):
        RateLimiter(store, "rl", window_seconds=0)


def test_retry_after_is_window_length():
    limiter = RateLimiter(InMemoryCacheStore(), "rl", window_seconds=45)
    assert limiter.retry_after == 45
