"""Application settings.

Values come from `JSONLD_CLI_*` environment variables, a project `.env` and
the per-user `.env`. Command line options always take precedence; settings
only provide the defaults the options fall back to.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "jsonld-cli"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "jsonld-cli"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "jsonld-cli"
    return Path.home() / ".config" / "jsonld-cli"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central configuration for the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="JSONLD_CLI_",
        extra="ignore",
        case_sensitive=False,
        # Project first, then the user-wide file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout per HTTP request (seconds).",
    )
    user_agent: str = Field(
        default="jsonld-cli/0.1 (+https://github.com/digitalbazaar/jsonld-cli)",
        min_length=1,
        description="User-Agent sent with HTTP requests.",
    )
    default_indent: int = Field(
        default=2,
        ge=0,
        le=16,
        description="Spaces to indent JSON output when -i/--indent is not given.",
    )
    default_allow: str = Field(
        default="http,https",
        description="Secondary loaders allowed when -a/--allow is not given.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level for stderr diagnostics (overridden by -v).",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper()
