"""Group a flat list of earnings entries into ISO weeks and weekdays."""

from __future__ import annotations

from collections.abc import Iterable

from earncal.calendar.models import (
    SESSION_ORDER,
    EarningEntry,
    WeekBucket,
    WeekKey,
    new_week_bucket,
)
from earncal.core.constants import WEEKDAY_NAMES
from earncal.core.logging import get_logger

logger = get_logger(__name__)


def bucket_entries(entries: Iterable[EarningEntry]) -> dict[WeekKey, WeekBucket]:
    """Bucket entries by ISO week, then by weekday name.

    Entries keep their input order within a day and duplicates are kept.
    Saturday and Sunday entries are dropped: markets are closed and buckets
    only carry Monday..Friday. A weekend entry never creates a week bucket
    on its own.

    Args:
        entries: Earnings entries in any order

    Returns:
        Mapping of WeekKey to its weekday bucket (insertion order, not sorted;
        see ``selection.selectable_weeks`` for chronological ordering)
    """
    weeks: dict[WeekKey, WeekBucket] = {}
    dropped = 0

    for entry in entries:
        weekday = entry.earnings_date.weekday()
        if weekday >= 5:
            dropped += 1
            continue

        key = WeekKey.from_date(entry.earnings_date)
        bucket = weeks.get(key)
        if bucket is None:
            bucket = weeks[key] = new_week_bucket()
        bucket[WEEKDAY_NAMES[weekday]].append(entry)

    if dropped:
        logger.debug("Dropped weekend earnings entries", count=dropped)

    return weeks


def sort_by_session(entries: Iterable[EarningEntry]) -> list[EarningEntry]:
    """Order a day's entries pre-market, after-hours, then unknown (stable)."""
    return sorted(entries, key=lambda e: SESSION_ORDER[e.market_session])
