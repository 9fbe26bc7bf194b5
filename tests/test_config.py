"""Tests for configuration module."""

from __future__ import annotations

import pytest

from swimcoach.config import DEFAULT_POLISH_URL, Settings, _ENV_PROFILES, build_settings, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "APP_ENV", "LOG_LEVEL", "POLISH_API_URL", "POLISH_TIMEOUT_SECONDS",
        "POLISH_ENABLED", "CORS_ORIGINS", "REQUEST_ID_HEADER",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_dataclass():
    s = Settings()
    assert s.app_env == "dev"
    assert s.polish_api_url == DEFAULT_POLISH_URL
    assert s.polish_enabled is True
    assert s.request_id_header_name == "X-Request-ID"


def test_settings_frozen():
    s = Settings()
    try:
        s.polish_api_url = "y"
        assert False, "Should raise"
    except AttributeError:
        pass


def test_settings_is_production():
    s = Settings(app_env="production")
    assert s.is_production is True
    assert s.is_dev is False


def test_settings_is_dev():
    s = Settings(app_env="dev")
    assert s.is_dev is True
    assert s.is_production is False


def test_env_profiles_exist():
    assert set(_ENV_PROFILES) == {"dev", "staging", "production"}


def test_dev_profile_defaults():
    s = build_settings()
    assert s.log_level == "DEBUG"
    assert s.polish_timeout_seconds == 30.0
    assert s.cors_origins == ("http://localhost:3000", "http://localhost:5173")


def test_production_profile_is_tighter(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    s = build_settings()
    assert s.log_level == "WARNING"
    assert s.polish_timeout_seconds == 8.0
    assert s.cors_origins == ()


def test_unknown_env_uses_dev_profile(monkeypatch):
    monkeypatch.setenv("APP_ENV", "qa")
    s = build_settings()
    assert s.app_env == "qa"
    assert s.log_level == "DEBUG"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("POLISH_API_URL", "http://coach.internal/api/coach")
    monkeypatch.setenv("POLISH_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("POLISH_ENABLED", "false")
    monkeypatch.setenv("CORS_ORIGINS", " https://a.example , ,https://b.example")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    s = get_settings()
    assert s.app_env == "staging"
    assert s.polish_api_url == "http://coach.internal/api/coach"
    assert s.polish_timeout_seconds == 2.5
    assert s.polish_enabled is False
    assert s.cors_origins == ("https://a.example", "https://b.example")
    assert s.log_level == "ERROR"


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("APP_ENV", "production")
    assert get_settings() is first
    get_settings.cache_clear()
    assert get_settings().is_production
