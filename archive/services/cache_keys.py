"""Cache key namespace.

Keys are shared with already-populated caches, so the layout must not change.
"""

from __future__ import annotations

from dataclasses import dataclass

from archive.models.domain import PageRequest


@dataclass(frozen=True)
class CacheKeys:
    scope: str = "nytimes"

    def _section_prefix(self, req: PageRequest) -> str:
        return f"{self.scope}:{req.year}:{req.month}:{req.section}"

    def exact(self, req: PageRequest) -> str:
        return f"{self._section_prefix(req)}:{req.page}:{req.page_size}"

    def total_results(self, req: PageRequest) -> str:
        return f"{self._section_prefix(req)}:totalresults"

    def max_page(self, req: PageRequest) -> str:
        return f"{self._section_prefix(req)}:maxpage"

    def page_slice(self, req: PageRequest, page: int | None = None) -> str:
        number = req.page if page is None else page
        return f"{self._section_prefix(req)}:page:{number}:{req.page_size}"

    def rate_limit(self) -> str:
        return f"{self.scope}:ratelimit"
