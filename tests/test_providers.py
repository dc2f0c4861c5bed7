"""Tests for the bar providers; HTTP is faked, no network."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
import requests

from stockwatch.config import MonitorProviderType
from stockwatch.errors import StockWatchError, StockWatchErrorCode
from stockwatch.models.bar import Bar
from stockwatch.providers import create_provider
from stockwatch.providers.alphavantage import (
    NO_DATA_MESSAGE,
    RATE_LIMIT_MESSAGE,
    AlphaVantageProvider,
)
from stockwatch.providers.mock import MockProvider
from stockwatch.providers.polygon import PolygonProvider


class _FakeResponse:
    def __init__(self, payload=None, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class _FakeSession:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        result = self.responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def close(self) -> None:
        self.closed = True


def _av_payload() -> dict:
    # Alpha Vantage lists newest first
    return {
        "Meta Data": {"2. Symbol": "RKLB", "4. Interval": "5min"},
        "Time Series (5min)": {
            "2024-01-15 10:05:00": {
                "1. open": "5.10", "2. high": "5.20", "3. low": "5.05",
                "4. close": "5.15", "5. volume": "12000",
            },
            "2024-01-15 10:00:00": {
                "1. open": "5.00", "2. high": "5.12", "3. low": "4.98",
                "4. close": "5.10", "5. volume": "9000",
            },
        },
    }


def _av(*responses) -> AlphaVantageProvider:
    return AlphaVantageProvider(api_key="demo", session=_FakeSession(*responses))


class TestAlphaVantage:
    def test_parses_and_sorts_ascending(self):
        provider = _av(_FakeResponse(_av_payload()))
        bars = provider.get_intraday_bars("rklb")
        assert len(bars) == 2
        assert all(isinstance(b, Bar) for b in bars)
        assert bars[0].timestamp < bars[1].timestamp
        assert bars[0].close == 5.10
        assert bars[1].close == 5.15
        assert bars[1].volume == 12000.0

    def test_request_params(self):
        provider = _av(_FakeResponse(_av_payload()))
        provider.get_intraday_bars("rklb", "5min")
        url, params = provider.session.calls[0]
        assert url == "https://www.alphavantage.co/query"
        assert params["function"] == "TIME_SERIES_INTRADAY"
        assert params["symbol"] == "RKLB"
        assert params["interval"] == "5min"
        assert params["apikey"] == "demo"

    def test_error_message_is_not_found(self):
        provider = _av(_FakeResponse({"Error Message": "Invalid API call."}))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("NOPE")
        assert exc_info.value.code == StockWatchErrorCode.NOT_FOUND
        assert not exc_info.value.retryable
        assert "Invalid API call" in str(exc_info.value)

    @pytest.mark.parametrize("key", ["Note", "Information"])
    def test_frequency_note_is_rate_limited(self, key):
        provider = _av(_FakeResponse({key: "Thank you for using Alpha Vantage!"}))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.RATE_LIMITED
        assert exc_info.value.retryable
        assert exc_info.value.message == RATE_LIMIT_MESSAGE

    def test_missing_series_is_no_data(self):
        provider = _av(_FakeResponse({"Meta Data": {}}))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.NO_DATA
        assert exc_info.value.message == NO_DATA_MESSAGE

    def test_malformed_row(self):
        payload = _av_payload()
        payload["Time Series (5min)"]["2024-01-15 10:05:00"]["4. close"] = "abc"
        provider = _av(_FakeResponse(payload))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.VALIDATION_FAILED

    @pytest.mark.parametrize("series", [["oops"], "oops", 42])
    def test_series_not_an_object(self, series):
        with pytest.raises(StockWatchError) as exc_info:
            AlphaVantageProvider.parse_intraday({"Time Series (5min)": series})
        assert exc_info.value.code == StockWatchErrorCode.VALIDATION_FAILED
        assert exc_info.value.retryable

    def test_payload_not_an_object(self):
        provider = _av(_FakeResponse(["unexpected"]))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.PROVIDER_ERROR

    def test_http_429(self):
        provider = _av(_FakeResponse(status_code=429))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.RATE_LIMITED

    def test_http_500(self):
        provider = _av(_FakeResponse(status_code=500))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.PROVIDER_ERROR
        assert exc_info.value.retryable

    def test_non_json_body(self):
        provider = _av(_FakeResponse(ValueError("not json")))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.PROVIDER_ERROR

    def test_timeout(self):
        provider = _av(requests.Timeout("slow"))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.TIMEOUT
        assert exc_info.value.retryable

    def test_connection_error(self):
        provider = _av(requests.ConnectionError("down"))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("RKLB")
        assert exc_info.value.code == StockWatchErrorCode.PROVIDER_ERROR

    def test_invalid_interval(self):
        provider = _av()
        with pytest.raises(StockWatchError):
            provider.get_intraday_bars("RKLB", "2min")
        assert provider.session.calls == []

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("ALPHA_VANTAGE_API_KEY", raising=False)
        with pytest.raises(StockWatchError) as exc_info:
            AlphaVantageProvider()
        assert exc_info.value.code == StockWatchErrorCode.AUTH_FAILED

    def test_api_key_from_env(self, monkeypatch):
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "env-key")
        provider = AlphaVantageProvider(session=_FakeSession())
        assert provider.api_key == "env-key"

    def test_close(self):
        provider = _av()
        provider.close()
        assert provider.session.closed


class TestPolygon:
    def _provider(self, *responses) -> PolygonProvider:
        return PolygonProvider(api_key="pk", session=_FakeSession(*responses), max_bars=2)

    def test_parses_and_keeps_latest(self):
        t0 = int(datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc).timestamp() * 1000)
        results = [
            {"t": t0 + i * 300_000, "o": 10 + i, "h": 11 + i, "l": 9 + i, "c": 10.5 + i, "v": 100}
            for i in range(3)
        ]
        provider = self._provider(_FakeResponse({"results": results}))
        bars = provider.get_intraday_bars("aapl", end=date(2024, 1, 15))
        assert [b.close for b in bars] == [11.5, 12.5]
        url, params = provider.session.calls[0]
        assert "/range/5/minute/2024-01-10/2024-01-15" in url
        assert params["sort"] == "asc"

    def test_follows_next_url(self, monkeypatch):
        monkeypatch.setattr("stockwatch.providers.polygon.time.sleep", lambda _s: None)
        t0 = int(datetime(2024, 1, 15, 15, 0, tzinfo=timezone.utc).timestamp() * 1000)
        row = {"o": 10, "h": 11, "l": 9, "c": 10.5, "v": 100}
        provider = self._provider(
            _FakeResponse({"results": [dict(row, t=t0)], "next_url": "https://page/2"}),
            _FakeResponse({"results": [dict(row, t=t0 + 300_000)]}),
        )
        bars = provider.get_intraday_bars("AAPL", end=date(2024, 1, 15))
        assert len(bars) == 2
        url, params = provider.session.calls[1]
        assert url == "https://page/2"
        assert params == {"apiKey": "pk"}

    def test_body_not_an_object(self):
        provider = self._provider(_FakeResponse(["unexpected"]))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("AAPL")
        assert exc_info.value.code == StockWatchErrorCode.PROVIDER_ERROR
        assert exc_info.value.retryable

    def test_empty_results_is_no_data(self):
        provider = self._provider(_FakeResponse({"results": []}))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("AAPL")
        assert exc_info.value.code == StockWatchErrorCode.NO_DATA

    @pytest.mark.parametrize(
        "status,code",
        [
            (429, StockWatchErrorCode.RATE_LIMITED),
            (403, StockWatchErrorCode.AUTH_FAILED),
            (404, StockWatchErrorCode.NOT_FOUND),
            (502, StockWatchErrorCode.PROVIDER_ERROR),
        ],
    )
    def test_status_mapping(self, status, code):
        provider = self._provider(_FakeResponse(status_code=status))
        with pytest.raises(StockWatchError) as exc_info:
            provider.get_intraday_bars("AAPL")
        assert exc_info.value.code == code


class TestMockProvider:
    def test_synthetic_session(self):
        provider = MockProvider(session_date=date(2024, 1, 15))
        bars = provider.get_intraday_bars("RKLB", "5min")
        assert len(bars) == 78
        assert all(b.timestamp.date() == date(2024, 1, 15) for b in bars)
        assert all(bars[i].timestamp < bars[i + 1].timestamp for i in range(len(bars) - 1))

    def test_preloaded(self, sample_bars):
        provider = MockProvider()
        provider.set_bars("rklb", sample_bars)
        assert provider.get_intraday_bars("RKLB") == sample_bars


class TestRegistry:
    def test_create_mock(self):
        provider = create_provider(MonitorProviderType.MOCK)
        assert isinstance(provider, MockProvider)
        assert provider.capabilities() == {"intraday"}

    def test_create_alphavantage_forwards_kwargs(self):
        provider = create_provider(MonitorProviderType.ALPHAVANTAGE, api_key="k", timeout=3.0)
        assert isinstance(provider, AlphaVantageProvider)
        assert provider.timeout == 3.0
