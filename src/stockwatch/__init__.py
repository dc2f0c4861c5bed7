"""stockwatch: intraday signal monitor for a single stock.

Fetches 5-minute bars from Alpha Vantage (or Polygon / a mock source),
derives VWAP, SMA-20 and RSI-14, and maps them to a BUY / SELL / HOLD
recommendation.

Quick start::

    from stockwatch import create_monitor_from_env
    monitor = create_monitor_from_env()
    snapshot = monitor.refresh()
    print(snapshot.analysis.signal)

The engine alone needs no network::

    from stockwatch import analyze
    result = analyze(bars)
"""

from __future__ import annotations

from stockwatch.config import MonitorConfig, MonitorProviderType
from stockwatch.engine import analyze, signal_for
from stockwatch.errors import StockWatchError, StockWatchErrorCode
from stockwatch.log import configure_logging
from stockwatch.manager import FeedManager
from stockwatch.models.analysis import AnalysisResult, Indicators, Signal
from stockwatch.models.bar import Bar
from stockwatch.models.snapshot import RefreshSnapshot
from stockwatch.monitor import Monitor, RefreshScheduler

__version__ = "0.1.0"

__all__ = [
    # Engine
    "analyze",
    "signal_for",
    # Monitor
    "Monitor",
    "RefreshScheduler",
    "FeedManager",
    "create_monitor_from_env",
    # Config
    "MonitorConfig",
    "MonitorProviderType",
    "configure_logging",
    # Errors
    "StockWatchError",
    "StockWatchErrorCode",
    # Models
    "Bar",
    "Signal",
    "Indicators",
    "AnalysisResult",
    "RefreshSnapshot",
]


def create_monitor_from_env() -> Monitor:
    """Zero-config factory that reads symbol, providers and API keys from env vars.

    See ``MonitorConfig.from_env`` for the variables consulted.
    """
    config = MonitorConfig.from_env()
    return Monitor(FeedManager(config), config.symbol, config.interval)
