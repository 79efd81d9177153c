"""Calendar view model handed to rendering surfaces (API, terminal)."""

from __future__ import annotations

import datetime as dt
from collections.abc import Container, Iterable

from pydantic import BaseModel

from earncal.calendar.bucketing import bucket_entries, sort_by_session
from earncal.calendar.models import EarningEntry, MarketSession, WeekBucket, WeekKey
from earncal.calendar.selection import reference_date, selectable_weeks


class EntryView(BaseModel):
    ticker: str
    market_session: MarketSession
    logo_url: str | None = None
    is_favorite: bool = False


class DayView(BaseModel):
    day: str  # "Monday"
    date: dt.date
    label: str  # "05/06"
    entries: list[EntryView]


class WeekView(BaseModel):
    key: str  # "2024-W19"
    title: str  # "May 6 - May 10, 2024"
    week_start: dt.date
    days: list[DayView]


class CalendarView(BaseModel):
    generated_at: dt.datetime
    weeks: list[WeekView]


def format_week_title(key: WeekKey) -> str:
    """Title spanning Monday to Friday, e.g. ``"Dec 30 - Jan 3, 2025"``."""
    monday = key.week_start
    friday = key.day("Friday")
    return f"{monday:%b} {monday.day} - {friday:%b} {friday.day}, {friday.year}"


def build_week_view(key: WeekKey, bucket: WeekBucket, favorites: Container[str]) -> WeekView:
    days = []
    for day_name, entries in bucket.items():
        day_date = key.day(day_name)
        days.append(
            DayView(
                day=day_name,
                date=day_date,
                label=f"{day_date:%m/%d}",
                entries=[
                    EntryView(
                        ticker=e.ticker,
                        market_session=e.market_session,
                        logo_url=e.logo_url,
                        is_favorite=e.ticker in favorites,
                    )
                    for e in sort_by_session(entries)
                ],
            )
        )
    return WeekView(
        key=str(key),
        title=format_week_title(key),
        week_start=key.week_start,
        days=days,
    )


def build_calendar_view(
    entries: Iterable[EarningEntry],
    now: dt.datetime,
    favorites: Container[str] = frozenset(),
    *,
    max_weeks: int | None = None,
    show_last_week: bool = False,
    tz: dt.tzinfo | None = None,
) -> CalendarView:
    """Bucket, select and decorate entries for display.

    Args:
        entries: Raw earnings entries
        now: Current instant
        favorites: Tickers to flag as starred
        max_weeks: Keep only the first N current and upcoming weeks. The
            previous week added by ``show_last_week`` does not count.
        show_last_week: Include the previous week when it has entries
        tz: Market timezone for the current-day calculation

    Returns:
        CalendarView with weeks in chronological order
    """
    buckets = bucket_entries(entries)
    keys = selectable_weeks(buckets, now, show_last_week=show_last_week, tz=tz)
    if max_weeks is not None:
        current = WeekKey.from_date(reference_date(now, tz))
        earlier = [key for key in keys if key < current]
        keys = earlier + [key for key in keys if key >= current][:max_weeks]

    return CalendarView(
        generated_at=now,
        weeks=[build_week_view(key, buckets[key], favorites) for key in keys],
    )
