from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    db_path: str
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int
    jwt_secret: str
    jwt_algorithm: str
    access_token_ttl_days: int
    extension_token_ttl_days: int
    credential_secret: str
    max_upload_bytes: int
    admin_api_key: str | None


settings = Settings(
    rate_limit=_get_env("RATE_LIMIT", "20/minute") or "20/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX", r"^chrome-extension://[a-p]{32}$"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", True),
    db_path=_get_env("DB_PATH", "data/skillgap.db") or "data/skillgap.db",
    analytics_enabled=_get_env_bool("ANALYTICS_ENABLED", True),
    analytics_db_path=_get_env("ANALYTICS_DB_PATH", "data/analytics.db") or "data/analytics.db",
    analytics_retention_days=_get_env_int("ANALYTICS_RETENTION_DAYS", 90),
    jwt_secret=_get_env("JWT_SECRET", "dev-only-jwt-secret") or "dev-only-jwt-secret",
    jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256") or "HS256",
    access_token_ttl_days=_get_env_int("ACCESS_TOKEN_TTL_DAYS", 7),
    extension_token_ttl_days=_get_env_int("EXTENSION_TOKEN_TTL_DAYS", 30),
    credential_secret=_get_env("CREDENTIAL_SECRET", "dev-only-credential-secret") or "dev-only-credential-secret",
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    admin_api_key=_get_env("ADMIN_API_KEY"),
)

if settings.jwt_algorithm not in {"HS256", "HS384", "HS512"}:
    raise RuntimeError("JWT_ALGORITHM must be one of HS256, HS384, HS512.")

__all__ = ["Settings", "settings"]
