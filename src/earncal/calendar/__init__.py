"""Earnings calendar: week bucketing, week selection and view models."""

from earncal.calendar.bucketing import bucket_entries, sort_by_session
from earncal.calendar.models import (
    EarningEntry,
    MarketSession,
    WeekBucket,
    WeekKey,
    new_week_bucket,
)
from earncal.calendar.selection import fetch_window, reference_date, selectable_weeks
from earncal.calendar.view import CalendarView, build_calendar_view

__all__ = [
    "CalendarView",
    "EarningEntry",
    "MarketSession",
    "WeekBucket",
    "WeekKey",
    "bucket_entries",
    "build_calendar_view",
    "fetch_window",
    "new_week_bucket",
    "reference_date",
    "selectable_weeks",
    "sort_by_session",
]
