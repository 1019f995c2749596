"""Runtime settings read from environment variables (and an optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./tasks.db"

# Environment variable keys
_ENV_DATABASE_URL = "TASKTRACKER_DATABASE_URL"
_ENV_HOST = "TASKTRACKER_HOST"
_ENV_PORT = "TASKTRACKER_PORT"
_ENV_ENV = "TASKTRACKER_ENV"
_ENV_CORS_ORIGINS = "TASKTRACKER_CORS_ORIGINS"
_ENV_LOG_LEVEL = "TASKTRACKER_LOG_LEVEL"
_ENV_LOG_FORMAT = "TASKTRACKER_LOG_FORMAT"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    host: str = "localhost"
    port: int = 3000
    env: str = "development"
    cors_origins: tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    log_format: str = "console"


def get_settings(env_file: str | Path | None = ".env") -> Settings:
    """Build :class:`Settings` from the process environment.

    Values already present in the environment win over the ``.env`` file.
    Raises ``ValueError`` if ``TASKTRACKER_PORT`` is not an integer.
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)

    raw_port = os.environ.get(_ENV_PORT, "3000")
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PORT} must be an integer, got {raw_port!r}") from exc

    cors = os.environ.get(_ENV_CORS_ORIGINS, "*")
    return Settings(
        database_url=os.environ.get(_ENV_DATABASE_URL, DEFAULT_DATABASE_URL),
        host=os.environ.get(_ENV_HOST, "localhost"),
        port=port,
        env=os.environ.get(_ENV_ENV, "development"),
        cors_origins=tuple(o.strip() for o in cors.split(",") if o.strip()),
        log_level=os.environ.get(_ENV_LOG_LEVEL, "INFO"),
        log_format=os.environ.get(_ENV_LOG_FORMAT, "console"),
    )
