"""Notes engine configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_KEY = "notes_app_data"
THEME_KEY = "notes_app_theme"


class Settings(BaseSettings):
    """Application settings loaded from .env file and ``NOTES_*`` variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NOTES_",
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["file", "redis", "memory"] = "file"
    storage_path: Path = Path("notes_data.json")
    notes_key: str = STORAGE_KEY
    theme_key: str = THEME_KEY

    # Redis
    redis_url: str = "redis://localhost:6379"
    redis_prefix: str = "notes:"

    # MCP server
    mcp_host: str = "0.0.0.0"
    mcp_port: int = 8001

    log_level: str = "INFO"


settings = Settings()
