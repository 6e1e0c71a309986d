"""Server configuration — reads settings from environment variables.

All settings have sensible defaults for local development.  In production
the values are typically overridden via env vars or a ``.env`` file.
"""

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class ServerSettings:
    """Immutable server configuration read from environment at startup."""

    # Network
    host: str = "0.0.0.0"
    port: int = 8080

    # CORS: comma-separated origins, or "*" for wide-open dev mode
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    # Survey definition directory (None → SurveyStore default, surveys/ from repo root)
    survey_dir: str | None = None

    # Media directory for DirectoryMediaStore (None → empty in-memory store)
    media_dir: str | None = None

    # Logging
    log_level: str = "INFO"

    # Default driver policy when a request does not say otherwise
    fail_fast: bool = True


def load_settings() -> ServerSettings:
    """Build settings from ``SERVER_*`` environment variables."""
    raw_origins = os.getenv("SERVER_CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]

    return ServerSettings(
        host=os.getenv("SERVER_HOST", "0.0.0.0"),
        port=int(os.getenv("SERVER_PORT", "8080")),
        cors_origins=origins,
        survey_dir=os.getenv("SERVER_SURVEY_DIR") or None,
        media_dir=os.getenv("SERVER_MEDIA_DIR") or None,
        log_level=os.getenv("SERVER_LOG_LEVEL", "INFO").upper(),
        fail_fast=_env_flag("SERVER_FAIL_FAST", "true"),
    )
