"""Analysis result models produced by the indicator engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Signal(Enum):
    """Discrete recommendation derived from the confidence score."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class Indicators:
    """Indicator values for the latest bar.

    Attributes:
        sma20: 20-period simple moving average, None under 20 bars.
        rsi: 14-period RSI over the first window of changes.
        vwap: Full-series VWAP; NaN when total volume is zero.
        confidence: Accumulated rule score.
    """

    sma20: float | None
    rsi: float
    vwap: float
    confidence: int


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one ``analyze`` call."""

    signal: Signal
    reasoning: tuple[str, ...]
    indicators: Indicators
    current_price: float

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase payload consumed by presentation."""
        return {
            "signal": self.signal.value,
            "reasoning": list(self.reasoning),
            "indicators": {
                "sma20": self.indicators.sma20,
                "rsi": self.indicators.rsi,
                "vwap": self.indicators.vwap,
                "confidence": self.indicators.confidence,
            },
            "currentPrice": self.current_price,
        }
