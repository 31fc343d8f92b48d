"""JSON value cache with per-key expiration (Redis or in-memory)."""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from redis.exceptions import RedisError

from archive.errors import CachePayloadError, CacheStoreError

# message returned by hosted Redis when a single request exceeds its size cap
_MAX_REQUEST_SIZE_MARKER = "max request size exceeded"


class CacheStore(Protocol):
    async def get(self, key: str) -> Any: ...  # noqa: D401
    async def set(self, key: str, value: Any, ttl_seconds: int) -> None: ...  # noqa: D401


def _encode(key: str, value: Any, max_payload_bytes: Optional[int]) -> str:
    data = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    size = len(data.encode("utf-8"))
    if max_payload_bytes is not None and size > max_payload_bytes:
        raise CachePayloadError(key, size)
    return data


class InMemoryCacheStore:
    """Process-local store for tests/local runs. Values go through JSON like in Redis."""

    def __init__(
        self,
        *,
        max_payload_bytes: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._data: Dict[str, Tuple[str, float]] = {}
        self._max_payload_bytes = max_payload_bytes
        self._clock = clock

    async def get(self, key: str) -> Any:
        entry = self._data.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        data = _encode(key, value, self._max_payload_bytes)
        now = self._clock()
        self._purge_expired(now)
        self._data[key] = (data, now + ttl_seconds)

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self._data.items() if expires_at <= now]
        for k in expired:
            del self._data[k]

    def keys(self) -> list[str]:
        now = self._clock()
        return [key for key, (_, expires_at) in self._data.items() if expires_at > now]


class _AsyncRedisLikeClient(Protocol):
    async def get(self, name: str) -> Optional[str]: ...
    async def set(self, name: str, value: str, *, ex: int | None = None) -> bool | None: ...


class RedisCacheStore:
    """Redis 기반 CacheStore 구현.

    - 조회: `GET key` → JSON 디코딩, 없으면 None
    - 저장: `SET key value EX <ttl>`

    redis.asyncio 클라이언트(decode_responses=True)를 기대하며, 테스트에서는 fake
    클라이언트를 주입한다. 크기 초과는 CachePayloadError, 나머지 Redis 오류는
    CacheStoreError 로 변환해 그대로 올린다.
    """

    def __init__(self, client: _AsyncRedisLikeClient, *, max_payload_bytes: Optional[int] = None) -> None:
        self._client = client
        self._max_payload_bytes = max_payload_bytes

    @classmethod
    def from_url(cls, redis_url: str, *, max_payload_bytes: Optional[int] = None) -> "RedisCacheStore":
        import redis.asyncio as aioredis

        client = aioredis.Redis.from_url(redis_url, decode_responses=True)
        return cls(client, max_payload_bytes=max_payload_bytes)

    async def get(self, key: str) -> Any:
        try:
            data = await self._client.get(key)
        except RedisError as exc:
            raise CacheStoreError(f"Redis GET 실패: {exc}") from exc
        if data is None:
            return None
        try:
            return json.loads(data)
        except json.JSONDecodeError as exc:
            raise CacheStoreError(f"캐시 값 JSON 파싱 실패: {key}") from exc

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        data = _encode(key, value, self._max_payload_bytes)
        try:
            await self._client.set(key, data, ex=ttl_seconds)
        except RedisError as exc:
            if _MAX_REQUEST_SIZE_MARKER in str(exc):
                raise CachePayloadError(key, len(data.encode("utf-8"))) from exc
            raise CacheStoreError(f"Redis SET 실패: {exc}") from exc

    async def close(self) -> None:
        close = getattr(self._client, "aclose", None) or getattr(self._client, "close", None)
        if close is not None:
            await close()
