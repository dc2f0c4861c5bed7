"""Stockwatch models."""

from stockwatch.models.analysis import AnalysisResult, Indicators, Signal
from stockwatch.models.bar import Bar
from stockwatch.models.snapshot import RefreshSnapshot

__all__ = [
    "Bar",
    "Signal",
    "Indicators",
    "AnalysisResult",
    "RefreshSnapshot",
]
