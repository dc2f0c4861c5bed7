"""Technical indicators over plain close/volume sequences.

All functions are pure: they never mutate their inputs and return plain
floats (or ``None`` for windows that are not yet filled).
"""

from __future__ import annotations

import math
from typing import Sequence

SMA_PERIOD = 20
RSI_PERIOD = 14


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; an empty sequence averages to 0.0."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def vwap(closes: Sequence[float], volumes: Sequence[float]) -> float:
    """Volume-weighted average close over the whole series.

    Returns NaN when total volume is zero.
    """
    total_volume = sum(volumes)
    if total_volume == 0:
        return math.nan
    return sum(c * v for c, v in zip(closes, volumes)) / total_volume


def sma_series(closes: Sequence[float], period: int = SMA_PERIOD) -> list[float | None]:
    """Simple moving average aligned with ``closes``.

    ``result[i]`` is the mean of ``closes[i - period + 1 .. i]`` and None
    while fewer than ``period`` values are available.
    """
    result: list[float | None] = []
    for i in range(len(closes)):
        if i < period - 1:
            result.append(None)
        else:
            result.append(mean(closes[i - period + 1 : i + 1]))
    return result


def rsi(closes: Sequence[float], period: int = RSI_PERIOD) -> float:
    """Relative Strength Index from the first ``period`` price changes.

    The averages cover the earliest window of changes, not a trailing one.
    Short series average whatever changes exist; with no losses at all the
    result is 100.
    """
    changes = [closes[i] - closes[i - 1] for i in range(1, len(closes))]
    gains = [c if c > 0 else 0.0 for c in changes]
    losses = [-c if c < 0 else 0.0 for c in changes]

    avg_gain = mean(gains[:period])
    avg_loss = mean(losses[:period])

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


__all__ = ["SMA_PERIOD", "RSI_PERIOD", "mean", "vwap", "sma_series", "rsi"]
