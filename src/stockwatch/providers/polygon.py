"""Polygon.io intraday provider (REST aggregates endpoint)."""

from __future__ import annotations

import logging
import os
import time
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator

import requests

from stockwatch.errors import StockWatchError, StockWatchErrorCode
from stockwatch.models.bar import Bar
from stockwatch.providers.base import BaseBarProvider

logger = logging.getLogger(__name__)

API_ROOT = "https://api.polygon.io/v2/aggs/ticker"

# interval -> (multiplier, timespan)
SPANS: dict[str, tuple[int, str]] = {
    "1min": (1, "minute"),
    "5min": (5, "minute"),
    "15min": (15, "minute"),
    "30min": (30, "minute"),
    "60min": (1, "hour"),
}

# status -> (message, code, retryable)
_STATUS_ERRORS: dict[int, tuple[str, StockWatchErrorCode, bool]] = {
    429: ("rate limit hit", StockWatchErrorCode.RATE_LIMITED, True),
    401: ("key rejected", StockWatchErrorCode.AUTH_FAILED, False),
    403: ("key rejected", StockWatchErrorCode.AUTH_FAILED, False),
    404: ("unknown ticker", StockWatchErrorCode.NOT_FOUND, False),
}

_PAGE_PAUSE = 0.25


class PolygonProvider(BaseBarProvider):
    """Fetch intraday aggregates from Polygon.io.

    Requests a short calendar lookback so weekends and holidays still
    return the latest session, then keeps the newest ``max_bars`` bars.
    """

    name = "polygon"

    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 10.0,
        lookback_days: int = 5,
        max_bars: int = 100,
    ) -> None:
        key = api_key or os.getenv("POLYGON_API_KEY")
        if not key:
            raise StockWatchError(
                "no Polygon key configured (POLYGON_API_KEY)",
                code=StockWatchErrorCode.AUTH_FAILED,
            )
        self.api_key = key
        self.session = session or requests.Session()
        self.timeout = timeout
        self.lookback_days = lookback_days
        self.max_bars = max_bars

    def get_intraday_bars(
        self,
        symbol: str,
        interval: str = "5min",
        end: date | None = None,
    ) -> list[Bar]:
        try:
            mult, span = SPANS[interval]
        except KeyError:
            raise StockWatchError(
                f"unsupported interval {interval!r}, expected one of {sorted(SPANS)}",
                code=StockWatchErrorCode.PROVIDER_ERROR,
            ) from None

        ticker = symbol.upper()
        last_day = end or datetime.now(timezone.utc).date()
        first_day = last_day - timedelta(days=self.lookback_days)
        url = f"{API_ROOT}/{ticker}/range/{mult}/{span}/{first_day}/{last_day}"

        try:
            bars = [_to_bar(row) for row in self._rows(url)]
        except StockWatchError:
            raise
        except requests.Timeout as exc:
            raise StockWatchError(
                f"Polygon timed out for {ticker}: {exc}",
                code=StockWatchErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
            raise StockWatchError(
                f"Polygon aggregates for {ticker} failed: {exc}",
                code=StockWatchErrorCode.PROVIDER_ERROR,
                retryable=True,
            ) from exc

        if not bars:
            raise StockWatchError(
                f"Polygon has no {interval} bars for {ticker}",
                code=StockWatchErrorCode.NO_DATA,
                retryable=True,
            )
        logger.debug("polygon: %s %s -> %d bars", ticker, interval, len(bars))
        return bars[-self.max_bars:]

    def _rows(self, url: str) -> Iterator[dict[str, Any]]:
        """Yield result rows, following ``next_url`` until exhausted."""
        params: dict[str, Any] = {
            "apiKey": self.api_key,
            "adjusted": "true",
            "sort": "asc",
            "limit": 50000,
        }
        page: str | None = url
        while page:
            resp = self.session.get(page, params=params, timeout=self.timeout)
            _raise_for_status(resp)
            body = resp.json()
            if not isinstance(body, dict):
                raise StockWatchError(
                    f"Polygon returned {type(body).__name__} instead of an aggregates object",
                    code=StockWatchErrorCode.PROVIDER_ERROR,
                    retryable=True,
                )
            yield from body.get("results") or []
            page = body.get("next_url")
            if page:
                # next_url already carries the query apart from the key
                params = {"apiKey": self.api_key}
                time.sleep(_PAGE_PAUSE)

    def close(self) -> None:
        self.session.close()


def _to_bar(row: dict[str, Any]) -> Bar:
    return Bar(
        timestamp=datetime.fromtimestamp(row["t"] / 1000, tz=timezone.utc),
        open=float(row["o"]),
        high=float(row["h"]),
        low=float(row["l"]),
        close=float(row["c"]),
        volume=float(row["v"]),
    )


def _raise_for_status(resp: Any) -> None:
    known = _STATUS_ERRORS.get(resp.status_code)
    if known:
        message, code, retryable = known
        raise StockWatchError(f"Polygon: {message}", code=code, retryable=retryable)
    resp.raise_for_status()
