"""Process settings loaded from environment variables and .env files."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    # Environment and deployment
    environment: Literal["development", "production", "test"] = Field(
        default="development"
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["plain", "json"] = Field(default="plain")
    log_file: str | None = Field(default=None)
    log_max_size_mb: int = Field(default=10, ge=1)
    log_backup_count: int = Field(default=5, ge=0)

    # Storage
    storage_backend: Literal["memory", "sql"] = Field(default="memory")
    database_url: str = Field(default="sqlite:///./users.db")
    database_echo: bool = Field(default=False)

    # HTTP server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080)


@lru_cache
def get_settings() -> Settings:
    return Settings()
