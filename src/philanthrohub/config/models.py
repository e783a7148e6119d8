"""Configuration models describing PhilanthroHub settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class HubBaseModel(BaseModel):
    """Shared configuration for PhilanthroHub settings models."""

    model_config = ConfigDict(extra="forbid")


class ApiSettings(HubBaseModel):
    """Connection settings for the directory service.

    Attributes:
        base_url: Root URL of the directory service.
        timeout_seconds: Request timeout applied to every call.
        max_retries: Retry budget for idempotent requests on transient statuses.
    """

    base_url: str = "http://127.0.0.1:8000"
    timeout_seconds: float = 10.0
    max_retries: int = 3


class CacheSettings(HubBaseModel):
    """Polling and freshness windows for the organization list.

    Attributes:
        refetch_interval_seconds: Interval between background refreshes.
        stale_time_seconds: Age after which a cached list is refreshed on read.
    """

    refetch_interval_seconds: float = 30.0
    stale_time_seconds: float = 60.0


class ServerSettings(HubBaseModel):
    """Settings for the directory HTTP service.

    Attributes:
        host: Interface the service binds to.
        port: TCP port the service listens on.
        simulated_latency_seconds: Artificial delay added to list responses.
        seed: Whether the store is populated with the bundled organizations.
    """

    host: str = "127.0.0.1"
    port: int = 8000
    simulated_latency_seconds: float = 0.0
    seed: bool = True


class LoggingSettings(HubBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class CLIOptions(HubBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
    """

    quiet_default: bool = False


class HubConfig(HubBaseModel):
    """Top-level configuration struct for PhilanthroHub.

    Attributes:
        api: Directory service connection settings.
        cache: Organization list polling settings.
        server: Directory service settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    api: ApiSettings = Field(default_factory=ApiSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "HubBaseModel",
    "ApiSettings",
    "CacheSettings",
    "ServerSettings",
    "LoggingSettings",
    "CLIOptions",
    "HubConfig",
]
