"""Server configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from n9e_mcp.client.client import DEFAULT_BASE_URL
from n9e_mcp.toolset import DEFAULT_TOOLSETS

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class ConfigError(ValueError):
    """Startup configuration is unusable."""


class Settings(BaseSettings):
    """Central settings pulled from .env / ``N9E_*`` environment."""

    model_config = SettingsConfigDict(
        env_prefix="N9E_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Nightingale
    token: str = ""
    base_url: str = DEFAULT_BASE_URL

    # Toolsets
    toolsets: str = ",".join(DEFAULT_TOOLSETS)
    """Comma-separated toolset names, or ``all``."""

    read_only: bool = False

    # Logging
    log_file: str = ""
    """Rotating log file path. Empty logs to stderr."""

    mcp_log_level: str = "info"
    """debug, info, warn or error (``N9E_MCP_LOG_LEVEL``)."""

    # SSE transport
    sse_host: str = "127.0.0.1"
    sse_port: int = 8000

    # MCP
    mcp_server_name: str = "n9e-mcp-server"

    @field_validator("mcp_log_level")
    @classmethod
    def _lower(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def toolset_names(self) -> list[str]:
        names = [name.strip() for name in self.toolsets.split(",") if name.strip()]
        return names or list(DEFAULT_TOOLSETS)

    @property
    def log_level(self) -> int:
        """Unknown level names fall back to INFO."""
        return LOG_LEVELS.get(self.mcp_log_level, logging.INFO)

    def require_token(self) -> None:
        if not self.token:
            raise ConfigError(
                "N9E_TOKEN is required. Set it via --token flag or N9E_TOKEN environment variable"
            )
