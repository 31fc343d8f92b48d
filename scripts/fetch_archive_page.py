"""Quick archive proxy smoke test.

Usage:
  uv run -- python scripts/fetch_archive_page.py -y 2024 -m 1 --section SCIENCE -n 5

Reads configuration from .env via pydantic settings. Requires NYT_API_KEY.
Runs one request through the full cache/rate-limit path (in-memory cache unless
CACHE_BACKEND=redis is set) and prints the pagination plus the top headlines.
"""

from __future__ import annotations

import argparse
import asyncio
import os
from typing import List

from archive.errors import ArchiveError, UpstreamError
from archive.models.domain import PageRequest
from archive.services.orchestrator import ArchiveService
from archive.settings import get_settings


async def _run(req: PageRequest, top: int) -> int:
    service = ArchiveService.from_settings(get_settings())
    try:
        resp = await service.get_page(req)
    except UpstreamError as exc:
        print(f"Upstream error: {exc.to_payload()}")
        return 2
    except ArchiveError as exc:
        print(f"Request rejected ({exc.status_code}): {exc.to_payload()}")
        return 3

    print(f"source={resp.source} pagination={resp.pagination.model_dump(by_alias=True)}")
    for idx, item in enumerate(resp.items[:top], start=1):
        title = item.headline.main if item.headline and item.headline.main else "(no headline)"
        print(f"{idx}. [{item.section_name}] {title[:120]}\n   {item.web_url}")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="NY Times archive proxy smoke test")
    parser.add_argument("-y", "--year", required=True, help="Archive year (e.g. 2024)")
    parser.add_argument("-m", "--month", required=True, help="Archive month 1-12")
    parser.add_argument("-p", "--page", default="1", help="Page number (default: 1)")
    parser.add_argument("-s", "--page-size", default="15", help="Page size (default: 15)")
    parser.add_argument("--section", default="GENERAL", help="Logical section (default: GENERAL)")
    parser.add_argument("-n", "--top", type=int, default=5, help="Print top N items (default: 5)")
    args = parser.parse_args(argv)

    os.environ.setdefault("CACHE_BACKEND", "memory")

    try:
        req = PageRequest.from_query(args.year, args.month, args.page, args.page_size, args.section)
    except ArchiveError as exc:
        print(f"Invalid request: {exc.to_payload()}")
        return 1
    return asyncio.run(_run(req, args.top))


if __name__ == "__main__":
    raise SystemExit(main())
