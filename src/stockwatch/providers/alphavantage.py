"""Alpha Vantage intraday provider (``TIME_SERIES_INTRADAY``).

The free tier answers HTTP 200 even for throttled or invalid requests, so
failures are detected from the JSON body: ``Error Message`` for bad symbols,
``Note``/``Information`` for call-frequency limits.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests

from stockwatch.errors import StockWatchError, StockWatchErrorCode
from stockwatch.models.bar import Bar
from stockwatch.providers.base import BaseBarProvider

logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co/query"

RATE_LIMIT_MESSAGE = "API call frequency exceeded. Please wait a minute before trying again."
NO_DATA_MESSAGE = "No data received. Please check if the market is open."

_VALID_INTERVALS = ("1min", "5min", "15min", "30min", "60min")


class AlphaVantageProvider(BaseBarProvider):
    """Fetch intraday bars from alphavantage.co."""

    name = "alphavantage"

    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key or os.getenv("ALPHA_VANTAGE_API_KEY")
        if not self.api_key:
            raise StockWatchError(
                "Alpha Vantage API key required. Set ALPHA_VANTAGE_API_KEY env var or pass api_key.",
                code=StockWatchErrorCode.AUTH_FAILED,
            )
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_intraday_bars(self, symbol: str, interval: str = "5min") -> list[Bar]:
        if interval not in _VALID_INTERVALS:
            raise StockWatchError(
                f"Invalid interval: {interval}. Valid: {list(_VALID_INTERVALS)}",
                code=StockWatchErrorCode.PROVIDER_ERROR,
            )

        params = {
            "function": "TIME_SERIES_INTRADAY",
            "symbol": symbol.upper(),
            "interval": interval,
            "apikey": self.api_key,
        }
        try:
            resp = self.session.get(BASE_URL, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise StockWatchError(
                f"Alpha Vantage request timed out: {exc}",
                code=StockWatchErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except requests.RequestException as exc:
            raise StockWatchError(
                f"Failed to fetch data: {exc}",
                code=StockWatchErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        self._check_response(resp)
        try:
            data = resp.json()
        except ValueError as exc:
            raise StockWatchError(
                "Alpha Vantage returned a non-JSON response",
                code=StockWatchErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        bars = self.parse_intraday(data, interval)
        logger.debug("alphavantage returned %d %s bars for %s", len(bars), interval, symbol.upper())
        return bars

    @classmethod
    def parse_intraday(cls, data: dict[str, Any], interval: str = "5min") -> list[Bar]:
        """Turn a ``TIME_SERIES_INTRADAY`` payload into ascending bars."""
        if not isinstance(data, dict):
            raise StockWatchError(
                f"Unexpected Alpha Vantage payload: {type(data).__name__}",
                code=StockWatchErrorCode.PROVIDER_ERROR,
                retryable=True,
            )
        if "Error Message" in data:
            raise StockWatchError(
                str(data["Error Message"]),
                code=StockWatchErrorCode.NOT_FOUND,
            )
        if "Note" in data or "Information" in data:
            raise StockWatchError(
                RATE_LIMIT_MESSAGE,
                code=StockWatchErrorCode.RATE_LIMITED,
                retryable=True,
            )

        series = data.get(f"Time Series ({interval})")
        if not series:
            raise StockWatchError(
                NO_DATA_MESSAGE,
                code=StockWatchErrorCode.NO_DATA,
                retryable=True,
            )

        if not isinstance(series, dict):
            raise StockWatchError(
                f"Malformed Alpha Vantage series: expected an object, got {type(series).__name__}",
                code=StockWatchErrorCode.VALIDATION_FAILED,
                retryable=True,
            )

        meta = data.get("Meta Data")
        tz = cls._timezone(meta if isinstance(meta, dict) else {})
        bars: list[Bar] = []
        try:
            for stamp, values in series.items():
                ts = datetime.strptime(stamp, "%Y-%m-%d %H:%M:%S")
                bars.append(Bar(
                    timestamp=ts.replace(tzinfo=tz) if tz else ts,
                    open=float(values["1. open"]),
                    high=float(values["2. high"]),
                    low=float(values["3. low"]),
                    close=float(values["4. close"]),
                    volume=float(values["5. volume"]),
                ))
        except (KeyError, TypeError, ValueError) as exc:
            raise StockWatchError(
                f"Malformed Alpha Vantage bar: {exc}",
                code=StockWatchErrorCode.VALIDATION_FAILED,
                retryable=True,
            ) from exc

        # Alpha Vantage lists the newest bar first
        bars.sort(key=lambda b: b.timestamp)
        return bars

    @staticmethod
    def _timezone(meta: dict[str, Any]) -> ZoneInfo | None:
        name = meta.get("6. Time Zone")
        if not name:
            return None
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, TypeError, ValueError):
            logger.warning("Unknown Alpha Vantage time zone %r; keeping naive timestamps", name)
            return None

    @staticmethod
    def _check_response(resp: Any) -> None:
        if resp.status_code == 429:
            raise StockWatchError(
                RATE_LIMIT_MESSAGE,
                code=StockWatchErrorCode.RATE_LIMITED,
                retryable=True,
            )
        if resp.status_code in (401, 403):
            raise StockWatchError(
                "Alpha Vantage authentication failed",
                code=StockWatchErrorCode.AUTH_FAILED,
            )
        if resp.status_code >= 400:
            raise StockWatchError(
                f"Failed to fetch data (HTTP {resp.status_code})",
                code=StockWatchErrorCode.PROVIDER_ERROR,
                retryable=True,
            )

    def close(self) -> None:
        self.session.close()
