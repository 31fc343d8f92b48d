"""Fixed-size page slicing."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total_results: int
    total_pages: int


def total_pages_for(total_results: int, page_size: int) -> int:
    return math.ceil(total_results / page_size) if total_results else 0


def page_bounds(page: int, page_size: int, total_results: int) -> Tuple[int, int]:
    start = (page - 1) * page_size
    return start, min(start + page_size, total_results)


def paginate(docs: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice one page; pages past the end come back empty rather than failing."""
    total_results = len(docs)
    start, end = page_bounds(page, page_size, total_results)
    return Page(
        items=list(docs[start:end]),
        total_results=total_results,
        total_pages=total_pages_for(total_results, page_size),
    )


def batch_range(page: int, total_pages: int, batch_size: int) -> Tuple[int, int]:
    """Inclusive page window of up to ``batch_size`` pages around ``page``."""
    start = max(1, page - batch_size // 2)
    end = min(total_pages, start + batch_size - 1)
    return start, end
