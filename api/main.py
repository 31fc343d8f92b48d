from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# 프로젝트 루트의 .env 파일 명시적 로딩
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"

if env_path.exists():
    load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from archive.errors import ArchiveError
from archive.services.cache_store import RedisCacheStore
from archive.settings import get_settings
from archive.utils.logging import configure_logging

from .models import HealthResponse
from .routes import archive_error_handler, get_archive_service, router


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    # only close a service that was actually built
    if get_archive_service.cache_info().currsize:
        service = get_archive_service()
        if isinstance(service.store, RedisCacheStore):
            await service.store.close()
        get_archive_service.cache_clear()


settings = get_settings()
configure_logging(settings.structlog_level, json_enabled=settings.log_json)

app = FastAPI(title="NY Times Archive Proxy", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(ArchiveError, archive_error_handler)  # type: ignore[arg-type]
app.include_router(router)


@app.get("/healthz", response_model=HealthResponse, tags=["system"])
async def healthcheck() -> HealthResponse:
    return HealthResponse(status="ok")
