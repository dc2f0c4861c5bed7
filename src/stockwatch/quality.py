"""Sanity checks run on a fetched series before it reaches the engine.

Each check counts offending bars. Only failures that make the series
unusable for analysis (nothing to analyze, NaN prices, broken ordering)
are fatal; the rest are reported so the feed manager can log them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Sequence

from stockwatch.models.bar import Bar

FATAL_CHECKS = frozenset({"not_empty", "no_nulls", "timestamp_order"})


@dataclass
class ValidationCheck:
    """Single validation check result."""

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """Aggregate validation result."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]

    @property
    def fatal_checks(self) -> list[ValidationCheck]:
        return [c for c in self.failed_checks if c.name in FATAL_CHECKS]


def _non_finite(bars: Sequence[Bar]) -> int:
    return sum(
        1 for b in bars
        if not all(math.isfinite(v) for v in (b.open, b.high, b.low, b.close, b.volume))
    )


def _negative_volume(bars: Sequence[Bar]) -> int:
    return sum(1 for b in bars if b.volume < 0)


def _not_ascending(bars: Sequence[Bar]) -> int:
    return sum(1 for prev, cur in zip(bars, bars[1:]) if cur.timestamp <= prev.timestamp)


def _bad_range(bars: Sequence[Bar]) -> int:
    return sum(
        1 for b in bars
        if b.high < b.low or not (b.low <= b.open <= b.high and b.low <= b.close <= b.high)
    )


_COUNTERS: tuple[tuple[str, Callable[[Sequence[Bar]], int], str], ...] = (
    ("no_nulls", _non_finite, "{n} bars with NaN/Inf values"),
    ("volume_sanity", _negative_volume, "{n} bars with negative volume"),
    ("timestamp_order", _not_ascending, "{n} bars out of order or duplicated"),
    ("ohlc_consistency", _bad_range, "{n} bars outside their high/low range"),
)


def validate_bars(bars: Sequence[Bar]) -> ValidationResult:
    """Run every check on ``bars``; an empty series stops after ``not_empty``."""
    result = ValidationResult()
    if not bars:
        result.checks.append(ValidationCheck("not_empty", False, "No bars provided"))
        return result
    result.checks.append(ValidationCheck("not_empty", True, f"{len(bars)} bars"))

    for name, counter, template in _COUNTERS:
        n = counter(bars)
        result.checks.append(ValidationCheck(name, n == 0, template.format(n=n) if n else ""))
    return result
