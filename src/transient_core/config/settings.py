"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from transient_core.constants import (
    DEFAULT_MAX_KEY_LENGTH,
    DEFAULT_TTL_SECONDS,
    KEY_LENGTH_LIMIT,
)


class Settings(BaseSettings):
    """Central configuration for transient-cache."""

    model_config = SettingsConfigDict(env_prefix="TC_", env_file=".env")

    # --- Store ---
    store_backend: Literal["memory", "disk", "redis", "db"] = Field(
        default="disk",
        description="Backing store: 'disk' for zero-infra, 'redis', 'db', or in-process 'memory'",
    )
    max_key_length: int = Field(
        default=DEFAULT_MAX_KEY_LENGTH,
        gt=1,
        le=KEY_LENGTH_LIMIT,
        description="Longest physical key (namespace + separator + key) the store accepts",
    )
    cache_dir: Path = Field(
        default=Path("./.cache/transient"),
        description="Directory for the diskcache store",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./transient_cache.db",
        description="SQLAlchemy database URL for the db store",
    )

    # --- Cache ---
    default_ttl_seconds: int = Field(
        default=DEFAULT_TTL_SECONDS,
        ge=0,
        description="Default entry lifetime in seconds (0 = no expiry)",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Root log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer: human-readable console or JSON lines",
    )
