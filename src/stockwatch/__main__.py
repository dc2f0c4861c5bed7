"""CLI entrypoint for monitoring one symbol from the terminal.

Usage:
    python -m stockwatch [SYMBOL] [--provider alphavantage,mock] [--watch]
                         [--interval 300] [--json] [--log-level INFO] [--json-logs]
"""

from __future__ import annotations

import argparse
import json
import math
import sys

from dotenv import load_dotenv

from stockwatch.charts import format_number, format_price
from stockwatch.config import MonitorConfig, MonitorProviderType
from stockwatch.errors import StockWatchError
from stockwatch.log import configure_logging
from stockwatch.manager import FeedManager
from stockwatch.models.snapshot import RefreshSnapshot
from stockwatch.monitor import Monitor, RefreshScheduler


def format_report(snapshot: RefreshSnapshot, as_json: bool = False) -> str:
    """Render a snapshot as a text block or a JSON line."""
    analysis = snapshot.analysis
    if as_json:
        payload = {
            "symbol": snapshot.symbol,
            "updatedAt": snapshot.updated_at.isoformat() if snapshot.updated_at else None,
            "error": snapshot.error,
            "analysis": _json_safe(analysis.to_dict()) if analysis else None,
        }
        return json.dumps(payload)

    lines = [f"{snapshot.symbol} Real-Time Analysis"]
    if snapshot.updated_at is not None:
        lines.append(f"Last updated: {snapshot.updated_at.astimezone().strftime('%H:%M:%S')}")
    if snapshot.error:
        lines.append(f"Error: {snapshot.error}")
    if analysis is not None:
        ind = analysis.indicators
        lines.append(f"Signal: {analysis.signal.value}")
        lines.append(f"Current Price: {format_price(analysis.current_price)}")
        lines.append("Analysis Reasoning:")
        lines.extend(f"  • {reason}" for reason in analysis.reasoning)
        lines.append(
            f"SMA20 {format_price(ind.sma20)} | RSI {format_number(ind.rsi)} | "
            f"VWAP {format_price(ind.vwap)} | Confidence {ind.confidence}"
        )
    return "\n".join(lines)


def _json_safe(value):
    # JSON has no NaN; a degenerate VWAP goes out as null
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _parse_providers(raw: str) -> list[MonitorProviderType]:
    try:
        return [MonitorProviderType(p.strip().lower()) for p in raw.split(",") if p.strip()]
    except ValueError as exc:
        valid = ", ".join(t.value for t in MonitorProviderType)
        raise argparse.ArgumentTypeError(f"unknown provider in {raw!r} (valid: {valid})") from exc


def _positive_seconds(raw: str) -> int:
    try:
        seconds = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a whole number of seconds: {raw!r}") from exc
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"interval must be positive, got {seconds}")
    return seconds


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Intraday signal monitor for one stock.")
    parser.add_argument("symbol", nargs="?", help="Ticker symbol (default: STOCKWATCH_SYMBOL or RKLB)")
    parser.add_argument("--provider", type=_parse_providers, help="Comma-separated provider order")
    parser.add_argument("--watch", action="store_true", help="Keep polling until interrupted")
    parser.add_argument("--interval", type=_positive_seconds, help="Polling interval in seconds (default: 300)")
    parser.add_argument("--json", action="store_true", help="Print JSON lines instead of text")
    parser.add_argument("--log-level", help="Logging level (default: STOCKWATCH_LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    args = parser.parse_args(argv)

    load_dotenv()
    config = MonitorConfig.from_env()
    if args.symbol:
        config.symbol = args.symbol.upper()
    if args.provider:
        config.providers = args.provider
    if args.interval is not None:
        config.refresh_seconds = args.interval

    configure_logging(level=args.log_level or config.log_level, json_format=args.json_logs)

    try:
        feed = FeedManager(config)
    except StockWatchError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return 1

    monitor = Monitor(feed, config.symbol, config.interval)
    try:
        if not args.watch:
            snapshot = monitor.refresh()
            print(format_report(snapshot, as_json=args.json))
            return 1 if snapshot.error else 0

        scheduler = RefreshScheduler(
            monitor,
            interval_seconds=config.refresh_seconds,
            on_refresh=lambda s: print(format_report(s, as_json=args.json), flush=True),
        )
        scheduler.start()
        try:
            scheduler.wait()
        except KeyboardInterrupt:
            pass
        finally:
            scheduler.stop()
        return 0
    finally:
        feed.close()


if __name__ == "__main__":
    sys.exit(main())
