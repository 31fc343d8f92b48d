from __future__ import annotations

import pytest

from archive.services.paginator import batch_range, paginate, total_pages_for


def test_paginate_first_and_last_pages():
    docs = list(range(40))

    first = paginate(docs, 1, 15)
    last = paginate(docs, 3, 15)

    assert first.items == list(range(15))
    assert first.total_results == 40
    assert first.total_pages == 3
    assert last.items == list(range(30, 40))


def test_paginate_past_end_is_empty_not_error():
    page = paginate(list(range(5)), 4, 5)
    assert page.items == []
    assert page.total_pages == 1


def test_paginate_empty_collection_has_zero_pages():
    page = paginate([], 1, 15)
    assert page.items == []
    assert page.total_results == 0
    assert page.total_pages == 0


@pytest.mark.parametrize(
    ("total", "size", "expected"),
    [(0, 15, 0), (1, 15, 1), (15, 15, 1), (16, 15, 2), (100, 1, 100)],
)
def test_total_pages_for(total, size, expected):
    assert total_pages_for(total, size) == expected


@pytest.mark.parametrize(
    ("page", "total_pages", "expected"),
    [
        (1, 3, (1, 3)),
        (1, 50, (1, 10)),
        (6, 50, (1, 10)),
        (20, 50, (15, 24)),
        (49, 50, (44, 50)),
        (2, 2, (1, 2)),
    ],
)
def test_batch_range_centers_and_clamps(page, total_pages, expected):
    assert batch_range(page, total_pages, 10) == expected


def test_batch_range_always_contains_requested_page():
    for total_pages in range(1, 30):
        for page in range(1, total_pages + 1):
            start, end = batch_range(page, total_pages, 10)
            assert start <= page <= end
            assert end - start + 1 <= 10
