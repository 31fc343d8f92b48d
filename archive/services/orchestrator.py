"""Cache/rate-limit/pagination decisions for one page request.

Flow per request::

    exact cache ──hit──▶ source=cache
        │miss
    rate limiter ──granted──▶ upstream fetch ▶ totals ▶ range check ▶ page batch ▶ exact entry ▶ source=api
        │denied
    totals + page slice ──both──▶ source=cache-page
        │missing
    RateLimitedError

Writes happen only on the upstream path. Totals go first, before the range
check, so later degraded reads can answer out-of-range pages without a fetch.
"""

from __future__ import annotations

import uuid
from typing import Dict, List, Optional, Tuple

from archive.connectors.base import BaseArchiveConnector
from archive.connectors.nytimes import NYTimesArchiveClient
from archive.errors import OutOfRangeError, RateLimitedError
from archive.models.domain import Document, PageRequest, PageResponse, PageResult, Pagination, RawDocument
from archive.services.cache_keys import CacheKeys
from archive.services.cache_store import CacheStore, InMemoryCacheStore, RedisCacheStore
from archive.services.normalizer import normalize_documents
from archive.services.paginator import batch_range, paginate, total_pages_for
from archive.services.rate_limiter import RateLimiter
from archive.services.sections import filter_by_section, sort_by_date_descending
from archive.settings import Settings, get_settings
from archive.utils.logging import get_logger


class ArchiveService:
    """Serves archive pages from cache, degraded cache, or a batched upstream fetch."""

    def __init__(
        self,
        connector: BaseArchiveConnector,
        store: CacheStore,
        *,
        keys: Optional[CacheKeys] = None,
        rate_limiter: Optional[RateLimiter] = None,
        cache_ttl_seconds: int = 60 * 60 * 12,
        batch_pages: int = 10,
    ) -> None:
        self.connector = connector
        self.store = store
        self.keys = keys or CacheKeys()
        self.rate_limiter = rate_limiter or RateLimiter(store, self.keys.rate_limit())
        self.cache_ttl_seconds = cache_ttl_seconds
        self.batch_pages = batch_pages
        self.logger = get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        connector: Optional[BaseArchiveConnector] = None,
        store: Optional[CacheStore] = None,
    ) -> "ArchiveService":
        cfg = settings or get_settings()
        if store is None:
            if cfg.cache_backend == "memory":
                store = InMemoryCacheStore(max_payload_bytes=cfg.cache_max_payload_bytes)
            else:
                store = RedisCacheStore.from_url(cfg.redis_url, max_payload_bytes=cfg.cache_max_payload_bytes)
        keys = CacheKeys(scope=cfg.cache_key_scope)
        limiter = RateLimiter(
            store,
            keys.rate_limit(),
            max_requests=cfg.rate_limit_max_requests,
            window_seconds=cfg.rate_limit_window_seconds,
        )
        return cls(
            connector or NYTimesArchiveClient(settings=cfg),
            store,
            keys=keys,
            rate_limiter=limiter,
            cache_ttl_seconds=cfg.cache_ttl_seconds,
            batch_pages=cfg.cache_batch_pages,
        )

    async def get_page(self, req: PageRequest) -> PageResponse:
        trace_id = uuid.uuid4().hex
        log_ctx = {
            "trace_id": trace_id,
            "year": req.year,
            "month": req.month,
            "section": req.section,
            "page": req.page,
            "page_size": req.page_size,
        }
        exact_key = self.keys.exact(req)
        cached = await self.store.get(exact_key)
        if cached is not None:
            self.logger.info("archive.cache.hit", extra=log_ctx)
            return PageResponse.model_validate({**cached, "source": "cache"})

        self.logger.info("archive.cache.miss", extra=log_ctx)
        if not await self.rate_limiter.try_acquire():
            self.logger.info("archive.rate.denied", extra=log_ctx)
            return await self._serve_degraded(req, log_ctx)
        return await self._fetch_and_populate(req, log_ctx)

    async def _read_totals(self, req: PageRequest) -> Optional[Tuple[int, int]]:
        total_results = await self.store.get(self.keys.total_results(req))
        max_page = await self.store.get(self.keys.max_page(req))
        # half a pair is treated as no pair
        if total_results is None or max_page is None:
            return None
        return int(total_results), int(max_page)

    async def _serve_degraded(self, req: PageRequest, log_ctx: dict) -> PageResponse:
        totals = await self._read_totals(req)
        if totals is not None:
            total_results, total_pages = totals
            if req.page > total_pages:
                raise OutOfRangeError(total_pages)
            cached_slice = await self.store.get(self.keys.page_slice(req))
            if cached_slice is not None:
                self.logger.info("archive.degraded.hit", extra=log_ctx)
                return PageResponse(
                    items=[Document.model_validate(item) for item in cached_slice],
                    pagination=Pagination.build(req.page, req.page_size, total_pages, total_results),
                    source="cache-page",
                )
        self.logger.warning("archive.rate.rejected", extra=log_ctx)
        raise RateLimitedError(self.rate_limiter.retry_after)

    async def _fetch_and_populate(self, req: PageRequest, log_ctx: dict) -> PageResponse:
        raws = await self.connector.fetch_month(req.year, req.month)
        ordered = sort_by_date_descending(filter_by_section(raws, req.section))
        total_results = len(ordered)
        total_pages = total_pages_for(total_results, req.page_size)
        self.logger.info(
            "archive.upstream.fetched",
            extra={**log_ctx, "fetched": len(raws), "total_results": total_results, "total_pages": total_pages},
        )

        ttl = self.cache_ttl_seconds
        await self.store.set(self.keys.total_results(req), total_results, ttl)
        await self.store.set(self.keys.max_page(req), total_pages, ttl)

        if req.page > total_pages:
            raise OutOfRangeError(total_pages)

        start, end = batch_range(req.page, total_pages, self.batch_pages)
        pages = self._normalize_pages(ordered, req.page_size, start, end)
        for number, docs in pages.items():
            await self.store.set(self.keys.page_slice(req, number), [doc.to_cache() for doc in docs], ttl)
        self.logger.info("archive.batch.cached", extra={**log_ctx, "batch_start": start, "batch_end": end})

        result = PageResult(
            items=pages[req.page],
            pagination=Pagination.build(req.page, req.page_size, total_pages, total_results),
        )
        await self.store.set(self.keys.exact(req), result.to_cache(), ttl)
        return PageResponse(items=result.items, pagination=result.pagination, source="api")

    @staticmethod
    def _normalize_pages(
        ordered: List[RawDocument], page_size: int, start: int, end: int
    ) -> Dict[int, List[Document]]:
        return {
            number: normalize_documents(paginate(ordered, number, page_size).items)
            for number in range(start, end + 1)
        }
