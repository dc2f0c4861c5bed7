"""Abstract base class for intraday bar providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockwatch.models.bar import Bar


class BaseBarProvider(ABC):
    """Abstract base for all bar providers.

    Providers turn a remote response into an ascending list of bars and map
    every failure onto ``StockWatchError`` so the feed manager can decide
    whether to fall back to the next provider.
    """

    name: str = "base"

    @abstractmethod
    def get_intraday_bars(self, symbol: str, interval: str = "5min") -> list[Bar]:
        """Fetch the most recent intraday bars.

        Args:
            symbol: Ticker symbol.
            interval: Bar size: "1min", "5min", "15min", "30min", "60min".

        Returns:
            List of Bar objects ordered by timestamp ascending.
        """
        ...

    def capabilities(self) -> set[str]:
        """Return the set of supported features."""
        return {"intraday"}

    def close(self) -> None:
        """Release any held resources (HTTP sessions)."""
