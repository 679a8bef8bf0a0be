"""Environment-driven settings.

Values come from the process environment, optionally seeded from
``symptom_journal/.env``. The store endpoint, the store key and the Gemini key
are required; everything else has a default.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from symptom_journal.utils.exceptions import ConfigError

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_DEMO_USER_ID = "demo-user"
DEFAULT_ANALYZE_RATE_LIMIT = "20/minute"

REQUIRED_VARS = ("DATABASE_URL", "DATABASE_KEY", "GEMINI_API_KEY")

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name, default) or default).strip()


def _env_flag(name: str) -> bool:
    return _env(name, "false").lower() in _TRUTHY


def _env_float(name: str) -> Optional[float]:
    raw = _env(name)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


class Settings(BaseModel):
    database_url: str
    database_key: str
    gemini_api_key: str
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    # None means no client-side timeout
    gemini_timeout_s: Optional[float] = None
    demo_user_id: str = DEFAULT_DEMO_USER_ID
    sql_echo: bool = False
    analysis_strict: bool = False
    # slowapi limit string, per client, for the AI endpoints
    analyze_rate_limit: str = DEFAULT_ANALYZE_RATE_LIMIT
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    @classmethod
    def from_env(cls, env_path: Optional[Path] = ENV_PATH) -> "Settings":
        """Build settings from the environment; raise ConfigError when required values are absent."""
        if env_path is not None and env_path.exists():
            load_dotenv(env_path, override=False)

        missing = [name for name in REQUIRED_VARS if not _env(name)]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

        origins = [o.strip() for o in _env("CORS_ORIGINS").split(",") if o.strip()]
        values = dict(
            database_url=_env("DATABASE_URL"),
            database_key=_env("DATABASE_KEY"),
            gemini_api_key=_env("GEMINI_API_KEY"),
            gemini_model=_env("GEMINI_MODEL", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL,
            gemini_base_url=_env("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL).rstrip("/"),
            gemini_timeout_s=_env_float("GEMINI_TIMEOUT_S"),
            demo_user_id=_env("DEMO_USER_ID", DEFAULT_DEMO_USER_ID) or DEFAULT_DEMO_USER_ID,
            sql_echo=_env_flag("SQL_ECHO"),
            analysis_strict=_env_flag("ANALYSIS_STRICT"),
            analyze_rate_limit=_env("ANALYZE_RATE_LIMIT", DEFAULT_ANALYZE_RATE_LIMIT) or DEFAULT_ANALYZE_RATE_LIMIT,
        )
        if origins:
            values["cors_origins"] = origins
        return cls(**values)
