"""Error taxonomy for the archive proxy.

Every error knows the HTTP status and JSON body it maps to, so the API layer
can turn any of them into a terminal response with a single handler.
"""

from __future__ import annotations

from typing import Any, Dict


DEFAULT_RETRY_AFTER_SECONDS = 60


class ArchiveError(Exception):
    """Base archive proxy error."""

    status_code: int = 500
    error: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.error)
        self.detail = detail or self.error

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error}


class InvalidRequestError(ArchiveError):
    """Missing or malformed request parameters; raised before any I/O."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.error = detail


class OutOfRangeError(ArchiveError):
    """Requested page is past the last known page."""

    status_code = 400
    error = "Page number exceeds maximum available pages"

    def __init__(self, max_page: int) -> None:
        super().__init__(f"{self.error}: {max_page}")
        self.max_page = max_page

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "maxPage": self.max_page}


class RateLimitedError(ArchiveError):
    """Local upstream-call ceiling reached and no degraded cache entry."""

    status_code = 429
    error = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after: int = DEFAULT_RETRY_AFTER_SECONDS) -> None:
        super().__init__()
        self.retry_after = retry_after

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "retryAfter": self.retry_after}


class UpstreamError(ArchiveError):
    """Generic upstream failure (network, 5xx, unexpected 4xx, bad payload)."""

    status_code = 500
    error = "Failed to fetch data from NY Times API"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.detail}


class UpstreamRateLimitedError(UpstreamError):
    """The archive API itself answered 429."""

    status_code = 429
    error = "Rate limit exceeded for NY Times API"

    def __init__(self, retry_after: int = DEFAULT_RETRY_AFTER_SECONDS) -> None:
        super().__init__("Too many requests. Please try again later.")
        self.retry_after = retry_after

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.detail, "retryAfter": self.retry_after}


class CacheStoreError(ArchiveError):
    """Cache backend failure."""

    status_code = 500
    error = "Redis cache error"

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.detail}


class CachePayloadError(CacheStoreError):
    """The store rejected (or would reject) an oversized write."""

    def __init__(self, key: str, size: int | None = None) -> None:
        super().__init__("The data is too large to be cached. Try reducing the page size.")
        self.key = key
        self.size = size
