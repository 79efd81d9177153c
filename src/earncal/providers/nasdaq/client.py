"""NASDAQ API client for the earnings calendar.

Free API, no key required.
- Earnings calendar: https://api.nasdaq.com/api/calendar/earnings?date=YYYY-MM-DD
"""

from __future__ import annotations

import asyncio
from datetime import date, timedelta
from typing import TYPE_CHECKING

import httpx
import orjson

from earncal.calendar.models import EarningEntry, MarketSession
from earncal.core.constants import CACHE_PREFIX, NASDAQ_API_URL, NASDAQ_CACHE_TTL_EARNINGS
from earncal.core.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

# NASDAQ time label mapping
_SESSION_MAP: dict[str, MarketSession] = {
    "time-pre-market": MarketSession.PRE,
    "time-after-hours": MarketSession.AFTER,
    "time-not-supplied": MarketSession.UNKNOWN,
}


class NasdaqClient:
    """Client for the NASDAQ earnings calendar API.

    Usage:
        client = NasdaqClient(redis=redis_client)
        entries = await client.fetch_entries(date(2024, 5, 6), date(2024, 5, 10))
        await client.close()
    """

    def __init__(
        self,
        redis: Redis,
        cache_ttl: int = NASDAQ_CACHE_TTL_EARNINGS,
        lookahead_days: int = 35,
        api_url: str = NASDAQ_API_URL,
    ) -> None:
        self._redis = redis
        self._cache_ttl = cache_ttl
        self._lookahead_days = lookahead_days
        self._api_url = api_url
        self._http_client: httpx.AsyncClient | None = None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=30.0,
                headers={
                    "User-Agent": "Mozilla/5.0 (compatible; earncal/1.0)",
                    "Accept": "application/json",
                },
            )
        return self._http_client

    async def get_earnings_by_date(self, target_date: date) -> list[EarningEntry]:
        """Get all earnings reports for a specific date.

        Args:
            target_date: Date to look up earnings for

        Returns:
            List of EarningEntry for that date (empty on any failure)
        """
        date_str = target_date.isoformat()
        cache_key = f"{CACHE_PREFIX}:nasdaq:earnings:{date_str}"

        cached = await self._redis.get(cache_key)
        if cached:
            try:
                return [EarningEntry.model_validate(e) for e in orjson.loads(cached)]
            except Exception as e:
                logger.warning("Cache deserialization failed", key=cache_key, error=str(e))

        client = self._get_http_client()
        try:
            resp = await client.get(
                f"{self._api_url}/calendar/earnings",
                params={"date": date_str},
            )
            resp.raise_for_status()
            data = orjson.loads(resp.content)
        except Exception as e:
            logger.warning("Failed to fetch NASDAQ earnings", date=date_str, error=str(e))
            return []

        payload = data.get("data") if isinstance(data, dict) else None
        rows = (payload.get("rows") or []) if isinstance(payload, dict) else []

        entries: list[EarningEntry] = []
        for row in rows:
            symbol = (row.get("symbol") or "").strip()
            if not symbol:
                continue
            entries.append(
                EarningEntry(
                    ticker=symbol,
                    earnings_date=target_date,
                    market_session=_SESSION_MAP.get(row.get("time", ""), MarketSession.UNKNOWN),
                )
            )

        await self._redis.set(
            cache_key,
            orjson.dumps([e.model_dump(mode="json") for e in entries]),
            ex=self._cache_ttl,
        )
        logger.debug("Fetched NASDAQ earnings", date=date_str, count=len(entries))

        return entries

    async def fetch_entries(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[EarningEntry]:
        """Get earnings for every weekday in ``[start, end]``.

        Defaults to today through the configured lookahead window.
        """
        start = start or date.today()
        end = end or start + timedelta(days=self._lookahead_days)
        days = (start + timedelta(days=i) for i in range((end - start).days + 1))
        targets = [d for d in days if d.weekday() < 5]

        sem = asyncio.Semaphore(5)

        async def _fetch(target_date: date) -> list[EarningEntry]:
            async with sem:
                return await self.get_earnings_by_date(target_date)

        per_day = await asyncio.gather(*(_fetch(d) for d in targets))
        return [entry for entries in per_day for entry in entries]

    async def close(self) -> None:
        """Clean up resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("NasdaqClient closed")
