"""NY Times Archive API connector (provider-injected for tests/offline)."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from archive.errors import DEFAULT_RETRY_AFTER_SECONDS, UpstreamError, UpstreamRateLimitedError
from archive.settings import Settings, get_settings

from .base import BaseArchiveConnector, ProviderFn, RawItems, call_provider


def _retry_after(headers: httpx.Headers) -> int:
    value = (headers.get("retry-after") or "").strip()
    return int(value) if value.isdigit() else DEFAULT_RETRY_AFTER_SECONDS


class NYTimesArchiveClient(BaseArchiveConnector):
    """Connector for `/svc/archive/v1/{year}/{month}.json`.

    - provider 주입 시: 오프라인 모드, HTTP 호출 없음
    - provider 미주입 시: 실제 HTTP 호출 (client 주입 가능)
    """

    source = "nytimes_archive"

    def __init__(
        self,
        provider: Optional[ProviderFn] = None,
        *,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._provider = provider
        self._settings = settings
        self._client = client

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    def month_url(self, year: str, month: str) -> str:
        return f"{self.settings.nyt_archive_endpoint}/{year}/{month}.json"

    async def _fetch_raw(self, year: str, month: str) -> RawItems:
        if self._provider is not None:
            return await call_provider(self._provider, year, month)

        cfg = self.settings
        if cfg.nyt_api_key is None or not cfg.nyt_api_key.get_secret_value().strip():
            raise UpstreamError("NYT_API_KEY가 설정되지 않았습니다.")

        url = self.month_url(year, month)
        params = {"api-key": cfg.nyt_api_key.get_secret_value()}
        try:
            if self._client is not None:
                resp = await self._client.get(url, params=params, timeout=float(cfg.nyt_timeout_seconds))
            else:
                async with httpx.AsyncClient(timeout=float(cfg.nyt_timeout_seconds)) as client:
                    resp = await client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise UpstreamError("NY Times API 타임아웃") from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"NY Times API 호출 오류: {exc}") from exc

        if resp.status_code == 429:
            raise UpstreamRateLimitedError(_retry_after(resp.headers))
        if resp.status_code >= 400:
            raise UpstreamError(f"Request failed with status code {resp.status_code}")

        try:
            data: Dict[str, Any] = resp.json()
        except ValueError as exc:
            raise UpstreamError("NY Times API 응답 JSON 파싱 실패") from exc
        body = data.get("response") if isinstance(data, dict) else None
        docs = body.get("docs") if isinstance(body, dict) else None
        return [doc for doc in docs or [] if isinstance(doc, dict)]

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
