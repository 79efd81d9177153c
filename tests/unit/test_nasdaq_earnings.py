"""Tests for NASDAQ earnings provider."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import orjson
import pytest

from earncal.calendar.models import EarningEntry, MarketSession
from earncal.providers.nasdaq.client import NasdaqClient

# ---------------------------------------------------------------------------
# Sample Data
# ---------------------------------------------------------------------------

SAMPLE_EARNINGS_RESPONSE = {
    "data": {
        "asOf": "2024-05-06T00:00:00.000",
        "headers": {"symbol": {}, "name": {}, "marketCap": {}, "epsForecast": {}},
        "rows": [
            {
                "symbol": "AAPL",
                "name": "Apple Inc.",
                "marketCap": "$3,500,000,000,000",
                "time": "time-after-hours",
            },
            {
                "symbol": "MSFT",
                "name": "Microsoft Corporation",
                "time": "time-pre-market",
            },
            {
                "symbol": "NVDA",
                "name": "NVIDIA Corporation",
                "time": "time-not-supplied",
            },
            {"symbol": "", "name": "Blank row", "time": "time-pre-market"},
        ],
    }
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_redis():
    redis = AsyncMock()
    redis.get.return_value = None
    redis.set.return_value = True
    return redis


@pytest.fixture()
def client(mock_redis):
    return NasdaqClient(redis=mock_redis)


def _response(payload: object) -> MagicMock:
    mock_response = MagicMock()
    mock_response.content = orjson.dumps(payload)
    mock_response.raise_for_status = MagicMock()
    return mock_response


# ---------------------------------------------------------------------------
# get_earnings_by_date
# ---------------------------------------------------------------------------


class TestGetEarningsByDate:
    async def test_get_earnings(self, client: NasdaqClient, mock_redis):
        """Test fetching earnings from NASDAQ API."""
        with patch.object(client, "_get_http_client") as mock_http:
            mock_http.return_value.get = AsyncMock(
                return_value=_response(SAMPLE_EARNINGS_RESPONSE)
            )
            entries = await client.get_earnings_by_date(date(2024, 5, 6))

        assert [e.ticker for e in entries] == ["AAPL", "MSFT", "NVDA"]
        assert [e.market_session for e in entries] == [
            MarketSession.AFTER,
            MarketSession.PRE,
            MarketSession.UNKNOWN,
        ]
        assert all(e.earnings_date == date(2024, 5, 6) for e in entries)

        mock_redis.set.assert_called_once()
        key = mock_redis.set.call_args.args[0]
        assert key == "earncal:nasdaq:earnings:2024-05-06"

    async def test_get_earnings_from_cache(self, client: NasdaqClient, mock_redis):
        """Test earnings loaded from Redis cache."""
        cached = [
            {"ticker": "AAPL", "earnings_date": "2024-05-06", "market_session": "after"},
        ]
        mock_redis.get.return_value = orjson.dumps(cached)

        with patch.object(client, "_get_http_client") as mock_http:
            entries = await client.get_earnings_by_date(date(2024, 5, 6))
            mock_http.assert_not_called()

        assert entries == [
            EarningEntry(ticker="AAPL", earnings_date=date(2024, 5, 6), market_session="after")
        ]

    async def test_corrupt_cache_refetches(self, client: NasdaqClient, mock_redis):
        mock_redis.get.return_value = b"not json"

        with patch.object(client, "_get_http_client") as mock_http:
            mock_http.return_value.get = AsyncMock(
                return_value=_response(SAMPLE_EARNINGS_RESPONSE)
            )
            entries = await client.get_earnings_by_date(date(2024, 5, 6))

        assert len(entries) == 3

    async def test_http_error_returns_empty(self, client: NasdaqClient, mock_redis):
        with patch.object(client, "_get_http_client") as mock_http:
            mock_http.return_value.get = AsyncMock(side_effect=httpx.ConnectError("refused"))
            entries = await client.get_earnings_by_date(date(2024, 5, 6))

        assert entries == []
        mock_redis.set.assert_not_called()

    async def test_no_rows(self, client: NasdaqClient):
        with patch.object(client, "_get_http_client") as mock_http:
            mock_http.return_value.get = AsyncMock(
                return_value=_response({"data": {"rows": None}})
            )
            assert await client.get_earnings_by_date(date(2024, 5, 6)) == []

    async def test_null_data(self, client: NasdaqClient):
        with patch.object(client, "_get_http_client") as mock_http:
            mock_http.return_value.get = AsyncMock(return_value=_response({"data": None}))
            assert await client.get_earnings_by_date(date(2024, 5, 6)) == []


# ---------------------------------------------------------------------------
# fetch_entries
# ---------------------------------------------------------------------------


class TestFetchEntries:
    async def test_weekdays_only(self, client: NasdaqClient):
        by_date = AsyncMock(
            side_effect=lambda d: [EarningEntry(ticker="AAPL", earnings_date=d)]
        )
        with patch.object(client, "get_earnings_by_date", by_date):
            entries = await client.fetch_entries(date(2024, 5, 9), date(2024, 5, 14))

        requested = sorted(call.args[0] for call in by_date.call_args_list)
        assert requested == [
            date(2024, 5, 9),
            date(2024, 5, 10),
            date(2024, 5, 13),
            date(2024, 5, 14),
        ]
        assert [e.earnings_date for e in entries] == requested

    async def test_default_window(self, mock_redis):
        client = NasdaqClient(redis=mock_redis, lookahead_days=6)
        by_date = AsyncMock(return_value=[])
        with patch.object(client, "get_earnings_by_date", by_date):
            await client.fetch_entries(date(2024, 5, 6))

        assert by_date.await_count == 5


class TestClose:
    async def test_close(self, client: NasdaqClient):
        http_client = client._get_http_client()
        with patch.object(http_client, "aclose", AsyncMock()) as mock_close:
            await client.close()
            mock_close.assert_awaited_once()
        assert client._http_client is None
