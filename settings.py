from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_log_level(name: str, default: str) -> str:
    raw = os.getenv(name, default).strip().upper()
    # getLevelName returns an int only for registered level names.
    if isinstance(logging.getLevelName(raw), int):
        return raw
    return default


def _env_list(name: str, default: str) -> tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    # Deployment / URLs
    public_base_url: str

    # Logging
    log_level: str
    debug_log_requests: bool

    # HTTP
    cors_allow_origins: tuple[str, ...]

    # Documents
    random_attribute_key: str


def get_settings() -> Settings:
    public_base_url = (os.getenv("PUBLIC_BASE_URL", "")).rstrip("/")

    log_level = _env_log_level("LOG_LEVEL", "INFO")
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)

    cors_allow_origins = _env_list("CORS_ALLOW_ORIGINS", "*")

    random_attribute_key = os.getenv("RANDOM_ATTRIBUTE_KEY", "dummy-data").strip() or "dummy-data"

    return Settings(
        public_base_url=public_base_url,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
        cors_allow_origins=cors_allow_origins,
        random_attribute_key=random_attribute_key,
    )
