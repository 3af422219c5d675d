"""Configuration management for MiniQLite."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Storage and persistence configuration."""

    default_file: Path = Field(
        default=Path("miniqlite.db"), description="Database file loaded at start and saved on exit"
    )
    layout: Literal["row", "column"] = Field(
        default="row", description="Physical layout used for newly created tables"
    )
    persistence_format: Literal["text", "binary"] = Field(
        default="text", description="Format used by save and load"
    )
    enforce_types: bool = Field(
        default=True, description="Reject values that do not match the declared column type"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="console", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="miniqlite", description="Service name for tracing")
    otel_console_export: bool = Field(
        default=False, description="Print finished spans to stderr"
    )
    metrics_port: int | None = Field(
        default=None, ge=1, le=65535, description="Prometheus metrics port (disabled if unset)"
    )


class Config(BaseSettings):
    """Main configuration for MiniQLite."""

    model_config = SettingsConfigDict(
        env_prefix="MINIQLITE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
