"""Shared fixtures for stockwatch tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Sequence

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from stockwatch.models.bar import Bar

BASE_TS = datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc)


def make_series(
    closes: Sequence[float],
    volumes: Sequence[float] | None = None,
) -> list[Bar]:
    """5-minute bars with the given closes; open/high/low hug the close."""
    if volumes is None:
        volumes = [1000.0] * len(closes)
    bars = []
    for i, (close, volume) in enumerate(zip(closes, volumes)):
        bars.append(Bar(
            timestamp=BASE_TS + timedelta(minutes=5 * i),
            open=close,
            high=close + 0.5,
            low=close - 0.5,
            close=close,
            volume=volume,
        ))
    return bars


@pytest.fixture
def sample_bars() -> list[Bar]:
    """25 contiguous 5-min bars drifting upward."""
    return make_series(
        [20.0 + i * 0.1 for i in range(25)],
        [10000.0 + i * 100 for i in range(25)],
    )
