"""
Configuration models for logship using Pydantic v2 Settings.

Values may come from keyword arguments or ``LOGSHIP_``-prefixed environment
variables (nested groups use ``__``, e.g. ``LOGSHIP_CLIENT__REGION_NAME``).
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (  # type: ignore[import-not-found]
    BaseSettings,
    SettingsConfigDict,
)

from ..sinks.cloudwatch import CloudWatchClientConfig
from .errors import ConfigurationError

DEFAULT_FLUSH_INTERVAL_MS = 3000


class DiagnosticsSettings(BaseSettings):
    """Settings read by the diagnostics module before any transport exists."""

    internal_logging_enabled: bool = Field(
        default=True,
        description="Emit structured WARN/DEBUG diagnostics for internal errors",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOGSHIP_",
        extra="ignore",
        case_sensitive=False,
    )


class TransportSettings(BaseSettings):
    """Top-level configuration for a CloudWatch Logs transport."""

    log_group_name: str = Field(
        description="Target CloudWatch Logs group; must already exist",
    )
    log_stream_name_prefix: str = Field(
        default="",
        description="Prefix for the hourly log stream names",
    )
    flush_interval_ms: int = Field(
        default=DEFAULT_FLUSH_INTERVAL_MS,
        gt=0,
        description="Milliseconds between scheduled flush cycles",
    )
    batch_size: int | None = Field(
        default=None,
        ge=1,
        description=(
            "Accepted for compatibility and ignored; batches are always bounded "
            "by the PutLogEvents byte and count limits"
        ),
    )
    client: CloudWatchClientConfig = Field(default_factory=CloudWatchClientConfig)
    internal_logging_enabled: bool = Field(
        default=True,
        description="Emit structured diagnostics for flush failures",
    )
    enable_metrics: bool = Field(
        default=False,
        description="Enable Prometheus-compatible metrics",
    )
    atexit_drain_enabled: bool = Field(
        default=True,
        description="Flush and close live transports at interpreter exit",
    )
    atexit_drain_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Upper bound for each transport's exit-time drain",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOGSHIP_",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("log_group_name")
    @classmethod
    def _ensure_group_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("log_group_name must not be empty")
        return value

    @property
    def flush_interval_seconds(self) -> float:
        return self.flush_interval_ms / 1000.0


def load_settings(**overrides: Any) -> TransportSettings:
    """Build ``TransportSettings``, reporting problems as ``ConfigurationError``."""
    try:
        return TransportSettings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid transport settings: {exc}") from exc


# Mark Pydantic validators as used for vulture
_VULTURE_USED: tuple[object, ...] = (TransportSettings._ensure_group_non_empty,)

__all__ = [
    "DEFAULT_FLUSH_INTERVAL_MS",
    "DiagnosticsSettings",
    "TransportSettings",
    "load_settings",
]
