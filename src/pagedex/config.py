from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagedex.exceptions import ConfigError


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "Pagedex"
    port: int = 8000
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"


class IndexConfig(BaseModel):
    """Search index location and tuning values."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".pagedex")
    file_name: str = "search_index.json"
    default_limit: int = Field(default=10, ge=1)
    snippet_chars: int = Field(default=200, ge=1)
    max_id_probes: int = Field(default=1024, ge=1)
    # When False, mutations stay in memory until flush()/close() or a checkpoint
    flush_on_mutation: bool = True
    checkpoint_seconds: int = Field(default=30, ge=1)

    @property
    def path(self) -> Path:
        return self.data_dir.expanduser() / self.file_name


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="PAGEDEX_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    index: IndexConfig = IndexConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    try:
        return Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        raise ConfigError(f"Invalid pagedex settings: {exc}") from exc
