import pytest

from archive.settings import get_settings, reset_settings_cache


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    reset_settings_cache()
    yield
    reset_settings_cache()


def test_defaults_match_reference_behaviour(monkeypatch):
    for name in ("CACHE_TTL_SECONDS", "RATE_LIMIT_MAX_REQUESTS", "RATE_LIMIT_WINDOW_SECONDS", "CACHE_BATCH_PAGES"):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.cache_ttl_seconds == 43200
    assert settings.rate_limit_max_requests == 10
    assert settings.rate_limit_window_seconds == 60
    assert settings.cache_batch_pages == 10
    assert settings.cache_key_scope == "nytimes"


def test_get_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("NYT_API_KEY", "secret-key")
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("RATE_LIMIT_MAX_REQUESTS", "3")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000, https://example.com")

    settings = get_settings()

    assert settings.nyt_api_key and settings.nyt_api_key.get_secret_value() == "secret-key"
    assert settings.cache_backend == "memory"
    assert settings.rate_limit_max_requests == 3
    assert settings.cors_origins == ["http://localhost:3000", "https://example.com"]


def test_reset_settings_cache_reloads(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "30")
    assert get_settings().rate_limit_window_seconds == 30

    monkeypatch.setenv("RATE_LIMIT_WINDOW_SECONDS", "90")
    assert get_settings().rate_limit_window_seconds == 30

    reset_settings_cache()
    assert get_settings().rate_limit_window_seconds == 90


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("CACHE_KEY_SCOPE", "bad:scope"),
        ("MAX_PAGE_SIZE", "150"),
        ("NYT_ARCHIVE_ENDPOINT", "api.nytimes.com"),
        ("CACHE_BACKEND", "memcached"),
    ],
)
def test_invalid_values_raise_runtime_error(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(RuntimeError) as exc:
        get_settings()

    assert "환경 변수 검증에 실패했습니다" in str(exc.value)
