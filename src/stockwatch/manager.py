"""FeedManager: cache, provider fallback and quality gate for bar series."""

from __future__ import annotations

import logging
from typing import Any

from stockwatch.cache import CacheBackend, MemoryCache, NoCache
from stockwatch.config import MonitorConfig, MonitorProviderType
from stockwatch.errors import StockWatchError, StockWatchErrorCode
from stockwatch.models.bar import Bar
from stockwatch.providers import create_provider
from stockwatch.providers.base import BaseBarProvider
from stockwatch.quality import validate_bars

logger = logging.getLogger(__name__)


class FeedManager:
    """Central fetch orchestrator: cache -> provider -> validate -> fallback.

    Usage::

        from stockwatch import MonitorConfig, FeedManager
        feed = FeedManager(MonitorConfig.from_env())
        bars = feed.get_bars("RKLB")
    """

    def __init__(
        self,
        config: MonitorConfig,
        providers: list[BaseBarProvider] | None = None,
    ) -> None:
        self.config = config

        if providers is not None:
            self.providers = list(providers)
        else:
            self.providers = [self._build_provider(pt) for pt in config.providers]

        self.cache: CacheBackend
        if config.cache_ttl_seconds > 0:
            self.cache = MemoryCache(ttl_seconds=config.cache_ttl_seconds)
        else:
            self.cache = NoCache()

    def _build_provider(self, provider_type: MonitorProviderType) -> BaseBarProvider:
        kwargs: dict[str, Any] = {}
        if provider_type is MonitorProviderType.ALPHAVANTAGE:
            kwargs["timeout"] = self.config.request_timeout
            if self.config.alphavantage_api_key:
                kwargs["api_key"] = self.config.alphavantage_api_key
        elif provider_type is MonitorProviderType.POLYGON:
            kwargs["timeout"] = self.config.request_timeout
            if self.config.polygon_api_key:
                kwargs["api_key"] = self.config.polygon_api_key
        return create_provider(provider_type, **kwargs)

    def get_bars(self, symbol: str, interval: str | None = None) -> list[Bar]:
        """Get the latest intraday bars for ``symbol``.

        Tries each provider in order. Retryable errors fall through to
        the next provider; non-retryable errors are raised immediately.
        """
        interval = interval or self.config.interval

        cached = self.cache.get_bars(symbol, interval)
        if cached is not None:
            logger.debug("cache hit for %s %s", symbol.upper(), interval)
            return cached

        last_error: StockWatchError | None = None
        for provider in self.providers:
            if "intraday" not in provider.capabilities():
                continue
            try:
                bars = provider.get_intraday_bars(symbol, interval)
                if self.config.validate:
                    self._quality_gate(provider, bars)
                self.cache.store_bars(symbol, interval, bars)
                logger.info(
                    "fetched %d %s bars for %s from %s",
                    len(bars), interval, symbol.upper(), provider.name,
                )
                return bars

            except StockWatchError as e:
                if not e.retryable:
                    raise
                logger.warning("%s failed for %s (%s): %s", provider.name, symbol.upper(), e.code.value, e)
                last_error = e
                continue

        raise last_error or StockWatchError(
            "All providers failed",
            code=StockWatchErrorCode.NO_DATA,
        )

    def _quality_gate(self, provider: BaseBarProvider, bars: list[Bar]) -> None:
        result = validate_bars(bars)
        if result.passed:
            return
        fatal = result.fatal_checks
        if fatal:
            msgs = "; ".join(c.message for c in fatal)
            raise StockWatchError(
                f"Validation failed: {msgs}",
                code=StockWatchErrorCode.VALIDATION_FAILED,
                retryable=True,
            )
        for check in result.failed_checks:
            logger.warning("%s quality check %s: %s", provider.name, check.name, check.message)

    def clear_cache(self, symbol: str) -> None:
        self.cache.clear(symbol)

    def close(self) -> None:
        for provider in self.providers:
            provider.close()
