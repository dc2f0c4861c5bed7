"""Monitor configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class MonitorProviderType(Enum):
    """Supported bar provider backends."""

    ALPHAVANTAGE = "alphavantage"
    POLYGON = "polygon"
    MOCK = "mock"


DEFAULT_SYMBOL = "RKLB"
DEFAULT_INTERVAL = "5min"
DEFAULT_REFRESH_SECONDS = 300


@dataclass
class MonitorConfig:
    """Configuration for the feed manager and refresh loop.

    Attributes:
        symbol: Ticker to monitor.
        interval: Bar size requested from providers.
        providers: Provider backends ordered by priority.
        refresh_seconds: Polling interval of the scheduler.
        cache_ttl_seconds: TTL of the in-memory bar cache; 0 disables it.
        validate: Whether to run quality checks on fetched bars.
        request_timeout: HTTP timeout (seconds) for provider calls.
        alphavantage_api_key: Alpha Vantage API key.
        polygon_api_key: Polygon.io API key.
        log_level: Logging level name used by the CLI and dashboard.
    """

    symbol: str = DEFAULT_SYMBOL
    interval: str = DEFAULT_INTERVAL
    providers: list[MonitorProviderType] = field(
        default_factory=lambda: [MonitorProviderType.ALPHAVANTAGE]
    )
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    cache_ttl_seconds: int = 60
    validate: bool = True
    request_timeout: float = 10.0

    alphavantage_api_key: str | None = None
    polygon_api_key: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MonitorConfig":
        """Build a config from environment variables.

        Environment variables:
            STOCKWATCH_SYMBOL: Ticker to monitor (default: "RKLB").
            STOCKWATCH_PROVIDERS: Comma-separated provider list (default: "alphavantage").
            STOCKWATCH_REFRESH_SECONDS: Polling interval (default: 300).
            STOCKWATCH_CACHE_TTL: Bar cache TTL in seconds (default: 60).
            STOCKWATCH_VALIDATE: "false"/"0"/"no" disables quality checks.
            STOCKWATCH_LOG_LEVEL: Logging level (default: "INFO").
            ALPHA_VANTAGE_API_KEY: Alpha Vantage API key.
            POLYGON_API_KEY: Polygon.io API key.
        """
        env = os.environ if environ is None else environ

        provider_str = env.get("STOCKWATCH_PROVIDERS", "alphavantage")
        providers = [
            MonitorProviderType(name.strip().lower())
            for name in provider_str.split(",")
            if name.strip()
        ]

        return cls(
            symbol=env.get("STOCKWATCH_SYMBOL", DEFAULT_SYMBOL).strip().upper(),
            providers=providers or [MonitorProviderType.ALPHAVANTAGE],
            refresh_seconds=int(env.get("STOCKWATCH_REFRESH_SECONDS", str(DEFAULT_REFRESH_SECONDS))),
            cache_ttl_seconds=int(env.get("STOCKWATCH_CACHE_TTL", "60")),
            validate=env.get("STOCKWATCH_VALIDATE", "true").strip().lower() not in ("0", "false", "no"),
            alphavantage_api_key=env.get("ALPHA_VANTAGE_API_KEY") or None,
            polygon_api_key=env.get("POLYGON_API_KEY") or None,
            log_level=env.get("STOCKWATCH_LOG_LEVEL", "INFO"),
        )
