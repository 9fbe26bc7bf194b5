"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_POLISH_URL = "http://localhost:3000/api/coach"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Polish collaborator
    polish_api_url: str = DEFAULT_POLISH_URL
    polish_timeout_seconds: float = 10.0
    polish_enabled: bool = True

    # HTTP host
    cors_origins: tuple[str, ...] = ()
    request_id_header_name: str = "X-Request-ID"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "polish_timeout_seconds": 30.0,
        "cors_origins": "http://localhost:3000,http://localhost:5173",
    },
    "staging": {
        "log_level": "INFO",
        "polish_timeout_seconds": 10.0,
    },
    "production": {
        "log_level": "WARNING",
        "polish_timeout_seconds": 8.0,
    },
}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


def build_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        polish_api_url=os.getenv("POLISH_API_URL", DEFAULT_POLISH_URL),
        polish_timeout_seconds=float(
            os.getenv("POLISH_TIMEOUT_SECONDS", str(profile.get("polish_timeout_seconds", 10.0)))
        ),
        polish_enabled=_env_bool("POLISH_ENABLED", True),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", profile.get("cors_origins", ""))),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings. Call `get_settings.cache_clear()` after changing env."""
    return build_settings()
