"""Upstream call counter kept in the shared cache store."""

from __future__ import annotations


from archive.services.cache_store import CacheStore
from archive.utils.logging import get_logger


class RateLimiter:
    """Fixed-ceiling counter over a rolling window.

    The counter lives in the cache store, not in process memory, so every
    stateless worker sees the same budget. Each grant rewrites the counter and
    refreshes its TTL, which means the window restarts on every granted call.

    The read and the write are separate store calls. Concurrent callers can all
    read a value under the ceiling and all be granted, so the ceiling is a soft
    bound that can be overshot by the number of racers.
    """

    def __init__(
        self,
        store: CacheStore,
        key: str,
        *,
        max_requests: int = 10,
        window_seconds: int = 60,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._store = store
        self._key = key
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.logger = get_logger(__name__)

    @property
    def retry_after(self) -> int:
        return self.window_seconds

    async def current(self) -> int:
        value = await self._store.get(self._key)
        return int(value or 0)

    async def try_acquire(self) -> bool:
        """Grant one upstream call if the window still has budget."""
        used = await self.current()
        if used >= self.max_requests:
            self.logger.info("ratelimit.denied", extra={"used": used, "limit": self.max_requests})
            return False
        await self._store.set(self._key, used + 1, self.window_seconds)
        return True
