"""Earnings entries from a JSON file.

The file holds an array of objects:

    [
        {"ticker": "AAPL", "earnings_date": "2024-05-06", "market_session": "pre"},
        {"ticker": "MSFT", "earnings_date": "2024-05-09", "market_session": null,
         "logo_url": "https://..."}
    ]
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import orjson
from pydantic import ValidationError as PydanticValidationError

from earncal.calendar.models import EarningEntry
from earncal.core.logging import get_logger

logger = get_logger(__name__)


class JsonFileEarningsSource:
    """Serve entries from a JSON file, re-read when its mtime changes."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._entries: list[EarningEntry] = []
        self._mtime: float | None = None

    def _load(self) -> list[EarningEntry]:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            logger.warning("Earnings file unavailable", path=str(self.path), error=str(e))
            return self._entries

        if mtime == self._mtime:
            return self._entries

        try:
            rows = orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            # Keep serving the last good copy
            logger.warning("Failed to read earnings file", path=str(self.path), error=str(e))
            return self._entries

        if not isinstance(rows, list):
            logger.warning("Earnings file is not a JSON array", path=str(self.path))
            return self._entries

        entries: list[EarningEntry] = []
        skipped = 0
        for row in rows:
            try:
                entries.append(EarningEntry.model_validate(row))
            except PydanticValidationError as e:
                skipped += 1
                logger.debug("Skipping invalid earnings row", row=row, error=str(e))

        if skipped:
            logger.warning("Skipped invalid earnings rows", path=str(self.path), skipped=skipped)
        logger.info("Loaded earnings file", path=str(self.path), count=len(entries))

        self._entries = entries
        self._mtime = mtime
        return entries

    async def fetch_entries(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[EarningEntry]:
        entries = self._load()
        return [
            e
            for e in entries
            if (start is None or e.earnings_date >= start)
            and (end is None or e.earnings_date <= end)
        ]

    async def close(self) -> None:
        return None
