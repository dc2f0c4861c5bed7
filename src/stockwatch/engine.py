"""Indicator engine: bar series in, signal recommendation out."""

from __future__ import annotations

import math
from typing import Any, Sequence

from stockwatch.indicators import RSI_PERIOD, SMA_PERIOD, mean, rsi, sma_series, vwap
from stockwatch.models.analysis import AnalysisResult, Indicators, Signal
from stockwatch.models.bar import Bar

RSI_OVERBOUGHT = 70.0
RSI_OVERSOLD = 30.0
HIGH_VOLUME_MULTIPLIER = 1.5
BUY_THRESHOLD = 2
SELL_THRESHOLD = -2


def analyze(bars: Sequence[Bar]) -> AnalysisResult | None:
    """Derive indicators and a BUY/SELL/HOLD signal from ``bars``.

    ``bars`` must be ascending by timestamp. Returns None for an empty
    series. Rules are evaluated in a fixed order, each contributing one
    reasoning line:

        1. price vs VWAP            (+1 / -1, skipped when VWAP is NaN)
        2. last volume vs 1.5x mean (+1, high side only)
        3. RSI band                 (-2 above 70, +2 below 30)
        4. price vs SMA-20          (+1 / -1, skipped under 20 bars)

    Confidence ``>= 2`` maps to BUY, ``<= -2`` to SELL, anything else to HOLD.
    """
    if not bars:
        return None

    closes = [_as_float(b.close) for b in bars]
    volumes = [_as_float(b.volume) for b in bars]

    current_vwap = vwap(closes, volumes)
    current_sma = sma_series(closes, period=SMA_PERIOD)[-1]
    current_rsi = rsi(closes, period=RSI_PERIOD)

    current_price = closes[-1]
    current_volume = volumes[-1]
    avg_volume = mean(volumes)

    confidence = 0
    reasoning: list[str] = []

    # NaN VWAP compares false, so zero volume counts as below
    if current_price > current_vwap:
        confidence += 1
        reasoning.append("Price is trading above VWAP")
    else:
        confidence -= 1
        reasoning.append("Price is trading below VWAP")

    if current_volume > avg_volume * HIGH_VOLUME_MULTIPLIER:
        confidence += 1
        reasoning.append("Unusually high volume detected")

    if current_rsi > RSI_OVERBOUGHT:
        confidence -= 2
        reasoning.append("RSI indicates overbought conditions")
    elif current_rsi < RSI_OVERSOLD:
        confidence += 2
        reasoning.append("RSI indicates oversold conditions")

    if _defined(current_sma):
        if current_price > current_sma:
            confidence += 1
            reasoning.append("Price is above 20-period moving average")
        else:
            confidence -= 1
            reasoning.append("Price is below 20-period moving average")

    return AnalysisResult(
        signal=signal_for(confidence),
        reasoning=tuple(reasoning),
        indicators=Indicators(
            sma20=current_sma,
            rsi=current_rsi,
            vwap=current_vwap,
            confidence=confidence,
        ),
        current_price=current_price,
    )


def signal_for(confidence: int) -> Signal:
    """Map a confidence score onto a signal."""
    if confidence >= BUY_THRESHOLD:
        return Signal.BUY
    if confidence <= SELL_THRESHOLD:
        return Signal.SELL
    return Signal.HOLD


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _defined(value: float | None) -> bool:
    return value is not None and not math.isnan(value)
