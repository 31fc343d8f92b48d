"""Domain DTOs for the archive proxy."""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from archive.errors import InvalidRequestError

Source = Literal["cache", "cache-page", "api"]

MISSING_PARAMS_MESSAGE = "Missing required parameters: year and month are required"
INVALID_PAGINATION_MESSAGE = (
    "Invalid pagination parameters: page must be >= 1 and pageSize must be between 1 and 100"
)
INVALID_DATE_MESSAGE = "Invalid date parameters: year must be numeric and month must be between 1 and 12"


def _is_ascii_number(value: str) -> bool:
    return value.isascii() and value.isdecimal()


class LogicalSection(str, Enum):
    """Caller-facing categories; any other string is accepted as a literal section."""

    GENERAL = "GENERAL"
    SCIENCE = "SCIENCE"
    ENTERTAINMENT = "ENTERTAINMENT"
    TECHNOLOGY = "TECHNOLOGY"
    BUSINESS = "BUSINESS"
    HEALTH = "HEALTH"
    SPORTS = "SPORTS"


class Headline(BaseModel):
    """Upstream headline object, kept whole (content_kicker, name, seo, sub ride along as extras)."""

    model_config = ConfigDict(extra="allow", frozen=True)

    main: Optional[str] = None
    kicker: Optional[str] = None
    print_headline: Optional[str] = None


class MediaItem(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    url: Optional[str] = None


class RawDocument(BaseModel):
    """Upstream archive document; fields outside this set are dropped at parse time."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(..., alias="_id")
    headline: Optional[Headline] = None
    abstract: Optional[str] = None
    web_url: Optional[str] = None
    pub_date: Optional[str] = None
    section_name: Optional[str] = None
    multimedia: Optional[List[MediaItem]] = None

    @field_validator("headline", mode="before")
    @classmethod
    def _coerce_headline(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"main": value}
        return value

    @field_validator("multimedia", mode="before")
    @classmethod
    def _coerce_multimedia(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return [value]
        return value


class Document(BaseModel):
    """Normalized document as stored in page caches and returned to callers."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    headline: Optional[Headline] = None
    abstract: Optional[str] = None
    web_url: Optional[str] = None
    pub_date: Optional[str] = None
    section_name: Optional[str] = None
    multimedia: Optional[MediaItem] = None

    def to_cache(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PageRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: str
    month: str
    section: str = LogicalSection.GENERAL.value
    page: int = Field(1, ge=1)
    page_size: int = Field(15, ge=1, le=100)

    @classmethod
    def from_query(
        cls,
        year: Optional[str],
        month: Optional[str],
        page: Optional[str] = "1",
        page_size: Optional[str] = "15",
        section: Optional[str] = LogicalSection.GENERAL.value,
        *,
        max_page_size: int = 100,
    ) -> "PageRequest":
        """Parse raw query-string values, raising ``InvalidRequestError`` on anything off."""
        if not year or not month:
            raise InvalidRequestError(MISSING_PARAMS_MESSAGE)
        if not _is_ascii_number(year) or not _is_ascii_number(month) or not 1 <= int(month) <= 12:
            raise InvalidRequestError(INVALID_DATE_MESSAGE)
        try:
            page_num = int(page if page is not None else "1")
            page_size_num = int(page_size if page_size is not None else "15")
        except ValueError as exc:
            raise InvalidRequestError(INVALID_PAGINATION_MESSAGE) from exc
        if page_num < 1 or not 1 <= page_size_num <= min(max_page_size, 100):
            raise InvalidRequestError(INVALID_PAGINATION_MESSAGE)
        return cls(
            year=year,
            month=month,
            section=section if section is not None else LogicalSection.GENERAL.value,
            page=page_num,
            page_size=page_size_num,
        )


class Pagination(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    current_page: int
    page_size: int
    total_pages: int
    total_results: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, page_size: int, total_pages: int, total_results: int) -> "Pagination":
        return cls(
            current_page=page,
            page_size=page_size,
            total_pages=total_pages,
            total_results=total_results,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class PageResult(BaseModel):
    """Ready-to-return page; this is what the exact-result cache entry holds."""

    model_config = ConfigDict(frozen=True)

    items: List[Document]
    pagination: Pagination

    def to_cache(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class PageResponse(PageResult):
    source: Source
