"""Chart and display helpers shared by the dashboard and CLI."""

from __future__ import annotations

import math
from typing import Sequence

import pandas as pd
import plotly.graph_objects as go

from stockwatch.models.analysis import AnalysisResult, Signal
from stockwatch.models.bar import Bar

FRAME_COLUMNS = ["date", "open", "high", "low", "close", "volume"]

PRICE_COLOR = "#8884d8"
VWAP_COLOR = "#f59e0b"
SMA_COLOR = "#10b981"

SIGNAL_COLORS = {
    Signal.BUY: "#16a34a",
    Signal.SELL: "#dc2626",
    Signal.HOLD: "#ca8a04",
}


def bars_to_frame(bars: Sequence[Bar]) -> pd.DataFrame:
    """Tabulate bars for plotting, one row per bar in input order."""
    records = [
        {
            "date": b.timestamp,
            "open": b.open,
            "high": b.high,
            "low": b.low,
            "close": b.close,
            "volume": b.volume,
        }
        for b in bars
    ]
    return pd.DataFrame(records, columns=FRAME_COLUMNS)


def price_figure(
    bars: Sequence[Bar],
    analysis: AnalysisResult | None = None,
    height: int = 320,
) -> go.Figure:
    """Close-price line chart with VWAP / SMA-20 reference lines."""
    frame = bars_to_frame(bars)

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=frame["date"], y=frame["close"], name="Price", mode="lines",
        line=dict(color=PRICE_COLOR),
    ))

    if analysis is not None:
        vwap = analysis.indicators.vwap
        sma20 = analysis.indicators.sma20
        if _defined(vwap):
            fig.add_hline(y=vwap, line_dash="dot", line_color=VWAP_COLOR,
                          annotation_text="VWAP", annotation_position="top left")
        if _defined(sma20):
            fig.add_hline(y=sma20, line_dash="dash", line_color=SMA_COLOR,
                          annotation_text="SMA 20", annotation_position="bottom left")

    fig.update_layout(
        height=height,
        margin=dict(l=20, r=20, t=30, b=20),
        yaxis=dict(autorange=True),
        showlegend=True,
    )
    return fig


def format_price(value: float | None) -> str:
    if not _defined(value):
        return "—"
    return f"${value:,.2f}"


def format_number(value: float | None) -> str:
    if not _defined(value):
        return "—"
    return f"{value:.2f}"


def signal_color(signal: Signal) -> str:
    return SIGNAL_COLORS[signal]


def _defined(value: float | None) -> bool:
    return value is not None and not math.isnan(value)
