"""Bar (OHLCV) data model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Bar:
    """Single intraday price bar.

    Attributes:
        timestamp: Bar timestamp (start of period).
        open: Opening price.
        high: High price.
        low: Low price.
        close: Closing price.
        volume: Traded volume over the interval.
    """

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
