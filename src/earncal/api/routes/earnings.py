"""Earnings entries and calendar endpoints."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Any

from fastapi import APIRouter, Query

from earncal.calendar.selection import fetch_window
from earncal.calendar.view import CalendarView, build_calendar_view
from earncal.core.dependencies import (
    EarningsSourceDep,
    IdentityDep,
    OptionalFavoritesRepoDep,
    SettingsDep,
)
from earncal.core.logging import get_logger
from earncal.core.result import Err
from earncal.storage.repositories import PostgresFavoritesRepository

logger = get_logger(__name__)

router = APIRouter()


async def _starred(
    identity: str | None, repo: PostgresFavoritesRepository | None
) -> frozenset[str] | None:
    """Favorites of the requesting identity, or None when unavailable."""
    if identity is None or repo is None:
        return None
    result = await repo.list_favorites(identity)
    if isinstance(result, Err):
        # Unknown user or storage down: serve plain entries
        logger.info("Favorites unavailable for earnings join", identity=identity, kind=result.kind)
        return None
    return frozenset(result.value)


@router.get("")
async def list_earnings(
    source: EarningsSourceDep,
    identity: IdentityDep,
    repo: OptionalFavoritesRepoDep,
    start: date | None = Query(None, description="First date to include (YYYY-MM-DD)"),
    end: date | None = Query(None, description="Last date to include (YYYY-MM-DD)"),
) -> dict[str, Any]:
    """List earnings entries, flagged ``is_starred`` for a signed-in identity."""
    entries = await source.fetch_entries(start, end)
    starred = await _starred(identity, repo)

    rows = []
    for entry in entries:
        row = entry.model_dump(mode="json")
        if starred is not None:
            row["is_starred"] = entry.ticker in starred
        rows.append(row)

    return {"entries": rows, "count": len(rows)}


@router.get("/calendar", response_model=CalendarView)
async def get_calendar(
    source: EarningsSourceDep,
    identity: IdentityDep,
    repo: OptionalFavoritesRepoDep,
    settings: SettingsDep,
    weeks: int | None = Query(None, ge=1, le=52, description="Number of weeks to show"),
    show_last_week: bool | None = Query(None, description="Include the previous week"),
) -> CalendarView:
    """Calendar view model: selectable weeks, weekday columns, starred flags."""
    max_weeks = weeks or settings.calendar_max_weeks
    include_last = settings.calendar_show_last_week if show_last_week is None else show_last_week

    now = datetime.now(UTC)
    start, end = fetch_window(now, max_weeks, show_last_week=include_last, tz=settings.tz)

    entries = await source.fetch_entries(start, end)
    starred = await _starred(identity, repo)

    return build_calendar_view(
        entries,
        now,
        starred or frozenset(),
        max_weeks=max_weeks,
        show_last_week=include_last,
        tz=settings.tz,
    )
