"""Refresh cycle and scheduled polling for one monitored symbol."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from stockwatch.config import DEFAULT_INTERVAL, DEFAULT_REFRESH_SECONDS
from stockwatch.engine import analyze
from stockwatch.errors import StockWatchError
from stockwatch.manager import FeedManager
from stockwatch.models.snapshot import RefreshSnapshot

logger = logging.getLogger(__name__)


class Monitor:
    """Fetches the bar series and runs the engine once per refresh.

    A failed refresh keeps the previous bars and analysis on the snapshot
    and only records the error message. Refreshes are serialized: a call
    made while another is in flight returns the current snapshot untouched.
    """

    def __init__(
        self,
        feed: FeedManager,
        symbol: str,
        interval: str = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.feed = feed
        self.symbol = symbol.upper()
        self.interval = interval
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._snapshot = RefreshSnapshot(symbol=self.symbol)

    @property
    def snapshot(self) -> RefreshSnapshot:
        return self._snapshot

    def refresh(self, force: bool = False) -> RefreshSnapshot:
        """Run one fetch + analyze cycle.

        Args:
            force: Drop cached bars first (manual refresh).
        """
        if not self._lock.acquire(blocking=False):
            logger.info("refresh for %s already in flight; skipping", self.symbol)
            return self._snapshot
        try:
            if force:
                self.feed.clear_cache(self.symbol)
            try:
                bars = self.feed.get_bars(self.symbol, self.interval)
            except StockWatchError as exc:
                logger.error("refresh for %s failed (%s): %s", self.symbol, exc.code.value, exc)
                self._snapshot = replace(self._snapshot, error=exc.message)
                return self._snapshot

            analysis = analyze(bars)
            self._snapshot = RefreshSnapshot(
                symbol=self.symbol,
                bars=tuple(bars),
                analysis=analysis,
                updated_at=self._clock(),
                error=None,
            )
            if analysis is None:
                logger.info("no bars for %s yet", self.symbol)
            else:
                logger.info(
                    "%s %s price=%.2f confidence=%d",
                    self.symbol,
                    analysis.signal.value,
                    analysis.current_price,
                    analysis.indicators.confidence,
                )
            return self._snapshot
        finally:
            self._lock.release()


class RefreshScheduler:
    """Polls a monitor on a fixed interval from a daemon thread.

    The scheduler owns its cancellation event: ``stop()`` wakes the thread
    immediately instead of waiting out the interval.

    Usage::

        with RefreshScheduler(monitor, interval_seconds=300, on_refresh=print):
            ...
    """

    def __init__(
        self,
        monitor: Monitor,
        interval_seconds: float = DEFAULT_REFRESH_SECONDS,
        on_refresh: Optional[Callable[[RefreshSnapshot], None]] = None,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.monitor = monitor
        self.interval_seconds = interval_seconds
        self.on_refresh = on_refresh
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name=f"stockwatch-refresh-{self.monitor.symbol}",
            daemon=True,
        )
        self._thread.start()
        logger.info("polling %s every %ss", self.monitor.symbol, self.interval_seconds)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            # keep the handle so start() cannot launch a second loop
            logger.warning("refresh for %s still running after stop", self.monitor.symbol)
        else:
            self._thread = None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the scheduler stops; True if it did within ``timeout``."""
        return self._stop.wait(timeout)

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                snapshot = self.monitor.refresh()
                if self.on_refresh is not None:
                    self.on_refresh(snapshot)
            except Exception:
                logger.exception("refresh loop error for %s", self.monitor.symbol)
            self._stop.wait(self.interval_seconds)

    def __enter__(self) -> "RefreshScheduler":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
