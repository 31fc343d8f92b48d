"""Configuration models for the archive proxy."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, PositiveInt, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Archive 프록시 환경 설정."""

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    nyt_api_key: Optional[SecretStr] = Field(None, alias="NYT_API_KEY", description="NY Times API 인증 키.")
    nyt_archive_endpoint: str = Field(
        "https://api.nytimes.com/svc/archive/v1",
        alias="NYT_ARCHIVE_ENDPOINT",
        description="Archive API 베이스 URL ({year}/{month}.json 이 뒤에 붙는다).",
    )
    nyt_timeout_seconds: PositiveInt = Field(30, alias="NYT_TIMEOUT_SECONDS", description="Archive API 타임아웃(초)")
    redis_url: str = Field("redis://localhost:6379/0", alias="ARCHIVE_REDIS_URL", description="캐시 Redis DSN.")
    cache_backend: Literal["redis", "memory"] = Field(
        "redis",
        alias="CACHE_BACKEND",
        description="캐시 저장소 종류 (redis | memory).",
    )
    cache_key_scope: str = Field("nytimes", alias="CACHE_KEY_SCOPE", description="캐시 키 접두사.")
    cache_ttl_seconds: PositiveInt = Field(60 * 60 * 12, alias="CACHE_TTL_SECONDS", description="결과/페이지 캐시 TTL.")
    cache_max_payload_bytes: PositiveInt = Field(
        1_000_000,
        alias="CACHE_MAX_PAYLOAD_BYTES",
        description="캐시 저장 1회 최대 크기(바이트).",
    )
    cache_batch_pages: PositiveInt = Field(10, alias="CACHE_BATCH_PAGES", description="업스트림 1회 호출당 미리 캐싱할 페이지 수.")
    rate_limit_max_requests: PositiveInt = Field(
        10,
        alias="RATE_LIMIT_MAX_REQUESTS",
        description="윈도우당 업스트림 호출 상한.",
    )
    rate_limit_window_seconds: PositiveInt = Field(
        60,
        alias="RATE_LIMIT_WINDOW_SECONDS",
        description="업스트림 호출 카운터 윈도우(초).",
    )
    default_page_size: PositiveInt = Field(15, alias="DEFAULT_PAGE_SIZE", description="pageSize 기본값.")
    max_page_size: PositiveInt = Field(100, alias="MAX_PAGE_SIZE", description="pageSize 상한.")
    cors_allow_origins: str = Field(
        "*",
        alias="CORS_ALLOW_ORIGINS",
        description="쉼표 구분 CORS 허용 origin 목록.",
    )
    structlog_level: str = Field("INFO", alias="STRUCTLOG_LEVEL", description="구조화 로그 레벨.")
    log_json: bool = Field(False, alias="LOG_JSON", description="로그를 JSON 형식으로 출력할지 여부.")

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]

    @field_validator("cache_key_scope")
    @classmethod
    def _validate_scope(cls, value: str) -> str:
        scope = value.strip()
        if not scope:
            raise ValueError("CACHE_KEY_SCOPE는 공백일 수 없습니다.")
        if ":" in scope:
            raise ValueError("CACHE_KEY_SCOPE에는 ':' 를 쓸 수 없습니다.")
        return scope

    @field_validator("nyt_archive_endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        if "://" not in value:
            raise ValueError("NYT_ARCHIVE_ENDPOINT는 유효한 URL이어야 합니다.")
        return value.rstrip("/")

    @model_validator(mode="after")
    def _validate_page_sizes(self) -> "Settings":
        if self.max_page_size > 100:
            raise ValueError("MAX_PAGE_SIZE는 100 이하여야 합니다.")
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE는 MAX_PAGE_SIZE 이하여야 합니다.")
        return self


@lru_cache()
def get_settings() -> Settings:
    """환경 변수를 기준으로 Settings 인스턴스를 반환한다."""
    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"환경 변수 검증에 실패했습니다: {exc}") from exc


def reset_settings_cache() -> None:
    """Settings LRU 캐시를 초기화한다 (테스트 용도)."""
    get_settings.cache_clear()  # type: ignore[attr-defined]
