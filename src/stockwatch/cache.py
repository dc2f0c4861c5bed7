"""Short-lived in-memory cache for fetched bar series.

Refreshes that land inside the TTL reuse the stored series instead of
spending another provider call.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import NamedTuple

from stockwatch.models.bar import Bar


class CacheBackend(ABC):
    """Where the feed manager keeps series between refreshes."""

    @abstractmethod
    def get_bars(self, symbol: str, interval: str) -> list[Bar] | None:
        """Return cached bars, or None on miss."""

    @abstractmethod
    def store_bars(self, symbol: str, interval: str, bars: list[Bar]) -> None:
        ...

    @abstractmethod
    def clear(self, symbol: str) -> None:
        ...

    @abstractmethod
    def clear_all(self) -> None:
        ...


class NoCache(CacheBackend):
    """Always misses."""

    def get_bars(self, symbol, interval):  # type: ignore[override]
        return None

    def store_bars(self, symbol, interval, bars):  # type: ignore[override]
        pass

    def clear(self, symbol):  # type: ignore[override]
        pass

    def clear_all(self):
        pass


class _Entry(NamedTuple):
    stored_at: float
    bars: tuple[Bar, ...]


class MemoryCache(CacheBackend):
    """TTL cache keyed by ``(SYMBOL, interval)`` with LRU eviction."""

    def __init__(self, ttl_seconds: int = 60, max_entries: int = 16) -> None:
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], _Entry] = OrderedDict()

    def get_bars(self, symbol: str, interval: str) -> list[Bar] | None:
        key = (symbol.upper(), interval)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if time.monotonic() - entry.stored_at > self.ttl:
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return list(entry.bars)

    def store_bars(self, symbol: str, interval: str, bars: list[Bar]) -> None:
        key = (symbol.upper(), interval)
        self._entries[key] = _Entry(time.monotonic(), tuple(bars))
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self, symbol: str) -> None:
        for key in [k for k in self._entries if k[0] == symbol.upper()]:
            del self._entries[key]

    def clear_all(self) -> None:
        self._entries.clear()
