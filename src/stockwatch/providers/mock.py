"""Mock provider for demos and tests; needs no API keys."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

from stockwatch.models.bar import Bar
from stockwatch.providers.base import BaseBarProvider


class MockProvider(BaseBarProvider):
    """In-memory provider returning pre-loaded or synthetic bars.

    Use ``set_bars`` to pre-load a series, or leave the default for a
    deterministic synthetic session.
    """

    name = "mock"

    def __init__(self, session_date: date | None = None) -> None:
        self.session_date = session_date or datetime.now(timezone.utc).date()
        self._bars: dict[str, list[Bar]] = {}

    def set_bars(self, symbol: str, bars: list[Bar]) -> None:
        self._bars[symbol.upper()] = list(bars)

    def get_intraday_bars(self, symbol: str, interval: str = "5min") -> list[Bar]:
        key = symbol.upper()
        if key in self._bars:
            return list(self._bars[key])
        return self._generate_bars(interval)

    def _generate_bars(self, interval: str) -> list[Bar]:
        """One 6.5-hour session of synthetic bars."""
        minutes = self._interval_minutes(interval)
        market_open = datetime.combine(
            self.session_date, time(14, 30), tzinfo=timezone.utc,
        )
        base_price = 20.0

        bars: list[Bar] = []
        for i in range(390 // minutes):
            o = base_price + (i % 5) * 0.10 + i * 0.01
            h = o + 0.25
            l = o - 0.15
            c = o + 0.05
            bars.append(Bar(
                timestamp=market_open + timedelta(minutes=i * minutes),
                open=round(o, 2),
                high=round(h, 2),
                low=round(l, 2),
                close=round(c, 2),
                volume=10000.0 + (i % 7) * 250,
            ))
        return bars

    @staticmethod
    def _interval_minutes(interval: str) -> int:
        mapping = {"1min": 1, "5min": 5, "15min": 15, "30min": 30, "60min": 60}
        return mapping.get(interval, 5)
