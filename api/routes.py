from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from archive.errors import ArchiveError
from archive.models.domain import LogicalSection, PageRequest, PageResponse
from archive.services.orchestrator import ArchiveService
from archive.settings import get_settings
from archive.utils.logging import get_logger

from .models import ErrorResponse, HelloResponse

router = APIRouter(prefix="/api")

logger = get_logger(__name__)


@lru_cache()
def get_archive_service() -> ArchiveService:
    return ArchiveService.from_settings(get_settings())


ServiceDep = Annotated[ArchiveService, Depends(get_archive_service)]


async def archive_error_handler(request: Request, exc: ArchiveError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("archive.request.failed", extra={"path": request.url.path, "detail": exc.detail})
    else:
        logger.info("archive.request.rejected", extra={"path": request.url.path, "status": exc.status_code})
    headers = None
    retry_after = getattr(exc, "retry_after", None)
    if retry_after is not None:
        headers = {"Retry-After": str(retry_after)}
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload(), headers=headers)


@router.get(
    "/nytimes",
    response_model=PageResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def archive_page_route(
    service: ServiceDep,
    year: str | None = Query(default=None),
    month: str | None = Query(default=None),
    page: str = Query(default="1"),
    page_size: str | None = Query(default=None, alias="pageSize"),
    section: str = Query(default=LogicalSection.GENERAL.value),
) -> PageResponse:
    settings = get_settings()
    req = PageRequest.from_query(
        year,
        month,
        page,
        page_size if page_size is not None else str(settings.default_page_size),
        section,
        max_page_size=settings.max_page_size,
    )
    return await service.get_page(req)


@router.get("/hello", response_model=HelloResponse)
async def hello_route() -> HelloResponse:
    return HelloResponse(
        message="Hello from the NY Times archive proxy!",
        timestamp=datetime.now(timezone.utc),
    )
