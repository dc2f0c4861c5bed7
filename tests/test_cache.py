"""Tests for the in-memory bar cache."""

from stockwatch import cache as cache_module
from stockwatch.cache import MemoryCache, NoCache


class TestMemoryCache:
    def test_roundtrip(self, sample_bars):
        c = MemoryCache(ttl_seconds=60)
        c.store_bars("rklb", "5min", sample_bars)
        assert c.get_bars("RKLB", "5min") == sample_bars
        assert c.get_bars("RKLB", "1min") is None

    def test_expiry(self, sample_bars, monkeypatch):
        now = [1000.0]
        monkeypatch.setattr(cache_module.time, "monotonic", lambda: now[0])
        c = MemoryCache(ttl_seconds=60)
        c.store_bars("RKLB", "5min", sample_bars)
        now[0] += 61
        assert c.get_bars("RKLB", "5min") is None

    def test_lru_eviction(self, sample_bars):
        c = MemoryCache(ttl_seconds=60, max_entries=2)
        c.store_bars("A", "5min", sample_bars)
        c.store_bars("B", "5min", sample_bars)
        c.get_bars("A", "5min")
        c.store_bars("C", "5min", sample_bars)
        assert c.get_bars("B", "5min") is None
        assert c.get_bars("A", "5min") is not None

    def test_returned_list_is_a_copy(self, sample_bars):
        c = MemoryCache()
        c.store_bars("RKLB", "5min", sample_bars)
        c.get_bars("RKLB", "5min").clear()
        assert len(c.get_bars("RKLB", "5min")) == len(sample_bars)

    def test_clear(self, sample_bars):
        c = MemoryCache()
        c.store_bars("RKLB", "5min", sample_bars)
        c.store_bars("AAPL", "5min", sample_bars)
        c.clear("rklb")
        assert c.get_bars("RKLB", "5min") is None
        assert c.get_bars("AAPL", "5min") is not None
        c.clear_all()
        assert c.get_bars("AAPL", "5min") is None


class TestNoCache:
    def test_always_misses(self, sample_bars):
        c = NoCache()
        c.store_bars("RKLB", "5min", sample_bars)
        assert c.get_bars("RKLB", "5min") is None
