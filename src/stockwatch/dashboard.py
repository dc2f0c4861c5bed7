"""Streamlit dashboard for one monitored symbol.

Run with::

    streamlit run src/stockwatch/dashboard.py
    # or, once installed
    stockwatch-dashboard
"""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import Any, MutableMapping

import streamlit as st
from dotenv import load_dotenv

from stockwatch.charts import format_number, format_price, price_figure, signal_color
from stockwatch.config import MonitorConfig
from stockwatch.errors import StockWatchError
from stockwatch.log import configure_logging
from stockwatch.manager import FeedManager
from stockwatch.models.snapshot import RefreshSnapshot
from stockwatch.monitor import Monitor

_JUST_REFRESHED = "stockwatch_just_refreshed"


@st.cache_resource
def _get_monitor() -> tuple[MonitorConfig, Monitor]:
    load_dotenv()
    config = MonitorConfig.from_env()
    configure_logging(level=config.log_level)
    feed = FeedManager(config)
    return config, Monitor(feed, config.symbol, config.interval)


def live_snapshot(monitor: Monitor, state: MutableMapping[str, Any]) -> RefreshSnapshot:
    """Snapshot for one fragment run.

    A Refresh click has already fetched during this rerun, so the first
    fragment run after it shows that result instead of fetching again.
    """
    if state.pop(_JUST_REFRESHED, False):
        return monitor.snapshot
    return monitor.refresh()


def render(snapshot: RefreshSnapshot) -> None:
    if snapshot.error:
        st.error(snapshot.error)

    if snapshot.updated_at is not None:
        st.caption(f"Last updated: {snapshot.updated_at.astimezone().strftime('%H:%M:%S')}")

    analysis = snapshot.analysis
    if analysis is not None:
        st.markdown(
            f"<span style='font-size:2rem;font-weight:700;color:{signal_color(analysis.signal)}'>"
            f"{analysis.signal.value}</span>",
            unsafe_allow_html=True,
        )
        st.subheader(f"Current Price: {format_price(analysis.current_price)}")

        st.markdown("**Analysis Reasoning:**")
        st.markdown("\n".join(f"- {reason}" for reason in analysis.reasoning))

        c1, c2, c3, c4 = st.columns(4)
        c1.metric("20-period SMA", format_price(analysis.indicators.sma20))
        c2.metric("RSI", format_number(analysis.indicators.rsi))
        c3.metric("VWAP", format_price(analysis.indicators.vwap))
        c4.metric("Signal Confidence", analysis.indicators.confidence)

    if snapshot.has_data:
        st.plotly_chart(price_figure(snapshot.bars, analysis), use_container_width=True)


def main() -> None:
    st.set_page_config(page_title="Stockwatch",
                       page_icon=":chart_with_upwards_trend:",
                       layout="wide")
    try:
        config, monitor = _get_monitor()
    except StockWatchError as exc:
        st.error(exc.message)
        st.stop()

    head, button = st.columns([0.85, 0.15])
    head.title(f"{monitor.symbol} Real-Time Analysis")
    if button.button("Refresh", use_container_width=True):
        with st.spinner("Refreshing..."):
            monitor.refresh(force=True)
        # this rerun already fetched; the fragment just shows the result
        st.session_state[_JUST_REFRESHED] = True

    @st.fragment(run_every=timedelta(seconds=config.refresh_seconds))
    def live() -> None:
        render(live_snapshot(monitor, st.session_state))

    live()


def run() -> None:
    """Console entry point: launch this module under ``streamlit run``."""
    from streamlit.web import cli as stcli

    sys.argv = ["streamlit", "run", __file__]
    sys.exit(stcli.main())


if __name__ == "__main__":
    main()
