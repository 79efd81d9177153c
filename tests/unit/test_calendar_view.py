"""Tests for the calendar view model."""

from __future__ import annotations

from datetime import UTC, date, datetime

from earncal.calendar.models import EarningEntry, WeekKey
from earncal.calendar.view import build_calendar_view, format_week_title

NOW = datetime(2024, 5, 8, 15, 0, tzinfo=UTC)  # Wednesday


def _entries() -> list[EarningEntry]:
    return [
        EarningEntry(ticker="MSFT", earnings_date=date(2024, 5, 9), market_session="after"),
        EarningEntry(ticker="AAPL", earnings_date=date(2024, 5, 6)),
        EarningEntry(ticker="NVDA", earnings_date=date(2024, 5, 6), market_session="pre"),
        EarningEntry(ticker="TSLA", earnings_date=date(2024, 5, 14), market_session="pre"),
        EarningEntry(ticker="OLD", earnings_date=date(2024, 4, 30)),
    ]


class TestFormatWeekTitle:
    def test_same_month(self):
        assert format_week_title(WeekKey(2024, 19)) == "May 6 - May 10, 2024"

    def test_spans_year(self):
        assert format_week_title(WeekKey(2025, 1)) == "Dec 30 - Jan 3, 2025"


class TestBuildCalendarView:
    def test_weeks_and_days(self):
        view = build_calendar_view(_entries(), NOW)

        assert [w.key for w in view.weeks] == ["2024-W19", "2024-W20"]
        week = view.weeks[0]
        assert week.title == "May 6 - May 10, 2024"
        assert [d.day for d in week.days] == [
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
        ]
        assert [d.label for d in week.days] == ["05/06", "05/07", "05/08", "05/09", "05/10"]

    def test_entries_sorted_by_session(self):
        view = build_calendar_view(_entries(), NOW)

        monday = view.weeks[0].days[0]
        assert [e.ticker for e in monday.entries] == ["NVDA", "AAPL"]

    def test_favorites_flagged(self):
        view = build_calendar_view(_entries(), NOW, frozenset({"MSFT"}))

        thursday = view.weeks[0].days[3]
        assert thursday.entries[0].ticker == "MSFT"
        assert thursday.entries[0].is_favorite is True
        monday = view.weeks[0].days[0]
        assert not any(e.is_favorite for e in monday.entries)

    def test_max_weeks(self):
        view = build_calendar_view(_entries(), NOW, max_weeks=1)
        assert [w.key for w in view.weeks] == ["2024-W19"]

    def test_show_last_week(self):
        view = build_calendar_view(_entries(), NOW, show_last_week=True)
        assert [w.key for w in view.weeks] == ["2024-W18", "2024-W19", "2024-W20"]

    def test_last_week_not_counted_in_max_weeks(self):
        view = build_calendar_view(_entries(), NOW, max_weeks=2, show_last_week=True)
        assert [w.key for w in view.weeks] == ["2024-W18", "2024-W19", "2024-W20"]

    def test_no_entries(self):
        view = build_calendar_view([], NOW)
        assert view.weeks == []
        assert view.generated_at == NOW

    def test_serializes(self):
        data = build_calendar_view(_entries(), NOW).model_dump(mode="json")
        assert data["weeks"][0]["days"][0]["date"] == "2024-05-06"
        assert data["weeks"][0]["days"][0]["entries"][0]["market_session"] == "pre"
