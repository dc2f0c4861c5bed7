"""Refresh snapshot model: what one polling cycle produced."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from stockwatch.models.analysis import AnalysisResult
from stockwatch.models.bar import Bar


@dataclass(frozen=True)
class RefreshSnapshot:
    """Bars and analysis visible after a refresh.

    Attributes:
        symbol: Ticker being monitored.
        bars: Series the analysis was computed from (ascending).
        analysis: Engine output, or None when there is nothing to show yet.
        updated_at: When ``bars`` were last fetched successfully.
        error: Message of the most recent failed refresh, if any.
    """

    symbol: str
    bars: tuple[Bar, ...] = field(default_factory=tuple)
    analysis: AnalysisResult | None = None
    updated_at: datetime | None = None
    error: str | None = None

    @property
    def has_data(self) -> bool:
        return bool(self.bars)
