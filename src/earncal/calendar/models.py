"""Models for earnings entries and ISO-week calendar keys."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from earncal.core.constants import TRADING_DAYS

_WEEK_KEY_RE = re.compile(r"^(\d{4})-W(\d{1,2})$")


class MarketSession(StrEnum):
    """When the earnings call happens relative to the trading session."""

    PRE = "pre"
    AFTER = "after"
    UNKNOWN = "unknown"


# Display order within a day: pre-market first, unknown last
SESSION_ORDER: dict[MarketSession, int] = {
    MarketSession.PRE: 0,
    MarketSession.AFTER: 1,
    MarketSession.UNKNOWN: 2,
}


class EarningEntry(BaseModel):
    """A single company earnings date."""

    model_config = ConfigDict(frozen=True)

    ticker: str = Field(..., min_length=1)
    market_session: MarketSession = MarketSession.UNKNOWN
    earnings_date: date
    logo_url: str | None = None

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize_ticker(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("market_session", mode="before")
    @classmethod
    def default_market_session(cls, v: object) -> object:
        if v is None or v == "":
            return MarketSession.UNKNOWN
        if isinstance(v, str):
            return v.strip().lower()
        return v


@dataclass(frozen=True, order=True)
class WeekKey:
    """ISO week identifier.

    Field order (year, then week) makes the natural ordering chronological,
    including across year boundaries where "52-2024" > "1-2025" as strings.
    """

    iso_year: int
    iso_week: int

    def __post_init__(self) -> None:
        # Raises ValueError for weeks the ISO year doesn't have (e.g. W53)
        date.fromisocalendar(self.iso_year, self.iso_week, 1)

    @classmethod
    def from_date(cls, d: date) -> WeekKey:
        iso = d.isocalendar()
        return cls(iso_year=iso.year, iso_week=iso.week)

    @classmethod
    def parse(cls, value: str) -> WeekKey:
        """Parse ``"2024-W52"``."""
        match = _WEEK_KEY_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid week key: {value!r}")
        return cls(iso_year=int(match.group(1)), iso_week=int(match.group(2)))

    @property
    def week_start(self) -> date:
        """Monday of this ISO week."""
        return date.fromisocalendar(self.iso_year, self.iso_week, 1)

    @property
    def week_end(self) -> date:
        """Sunday of this ISO week."""
        return self.week_start + timedelta(days=6)

    def previous(self) -> WeekKey:
        return WeekKey.from_date(self.week_start - timedelta(days=7))

    def day(self, name: str) -> date:
        """Calendar date of a trading day name within this week."""
        return self.week_start + timedelta(days=TRADING_DAYS.index(name))

    def __str__(self) -> str:
        return f"{self.iso_year}-W{self.iso_week:02d}"


# Weekday name -> entries for that day, Monday..Friday only
WeekBucket = dict[str, list[EarningEntry]]


def new_week_bucket() -> WeekBucket:
    """Create a bucket pre-seeded with an empty list per trading day."""
    return {day: [] for day in TRADING_DAYS}
