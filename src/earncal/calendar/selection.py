"""Pick the calendar weeks worth showing relative to now."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta, tzinfo

from earncal.calendar.models import WeekBucket, WeekKey
from earncal.core.constants import WEEKEND_ROLL_FORWARD_DAYS


def reference_date(now: datetime | date, tz: tzinfo | None = None) -> date:
    """Day the selection is anchored on.

    Saturday and Sunday belong to the upcoming week, so the anchor moves
    forward by a week.

    Args:
        now: Current instant (or a plain date)
        tz: Market timezone to read the calendar day in. Only applied to
            timezone-aware datetimes.
    """
    if isinstance(now, datetime):
        if tz is not None and now.tzinfo is not None:
            now = now.astimezone(tz)
        today = now.date()
    else:
        today = now

    if today.weekday() >= 5:
        return today + timedelta(days=WEEKEND_ROLL_FORWARD_DAYS)
    return today


def week_end(key: WeekKey) -> date:
    """Last day of the week used for the "still upcoming" test (Sunday)."""
    return key.week_end


def selectable_weeks(
    buckets: Mapping[WeekKey, WeekBucket],
    now: datetime | date,
    *,
    show_last_week: bool = False,
    tz: tzinfo | None = None,
) -> list[WeekKey]:
    """Current and future weeks in chronological order.

    Args:
        buckets: Output of ``bucket_entries``
        now: Current instant
        show_last_week: Prepend the week before the reference week when
            it has entries
        tz: Market timezone for reading the current day

    Returns:
        WeekKeys sorted by week start date with fully past weeks removed
    """
    anchor = reference_date(now, tz)

    ordered = sorted(buckets, key=lambda k: k.week_start)
    weeks = [key for key in ordered if week_end(key) >= anchor]

    if show_last_week:
        last_week = WeekKey.from_date(anchor).previous()
        if last_week in buckets and last_week not in weeks:
            weeks.insert(0, last_week)

    return weeks


def fetch_window(
    now: datetime | date,
    weeks: int,
    *,
    show_last_week: bool = False,
    tz: tzinfo | None = None,
) -> tuple[date, date]:
    """Date range a source must cover to fill ``weeks`` selectable weeks.

    Runs from the Monday of the reference week (or the week before it) to
    the Sunday ``weeks`` weeks later.
    """
    start = WeekKey.from_date(reference_date(now, tz)).week_start
    if show_last_week:
        start -= timedelta(days=7)
    end = start + timedelta(days=7 * (weeks + int(show_last_week)) - 1)
    return start, end
