"""CLI entry point for earncal."""

import argparse
import asyncio

import uvicorn

from earncal.calendar.view import CalendarView
from earncal.client import CalendarSession
from earncal.config import Settings, get_settings
from earncal.core.logging import setup_logging
from earncal.core.result import Err
from earncal.favorites.models import normalize_ticker


def render_calendar(view: CalendarView) -> str:
    """Plain-text rendering of a calendar view, one block per week."""
    if not view.weeks:
        return "No upcoming earnings."

    lines: list[str] = []
    for week in view.weeks:
        lines.append(week.title)
        lines.append("-" * len(week.title))
        for day in week.days:
            tickers = " ".join(
                f"*{e.ticker}" if e.is_favorite else e.ticker for e in day.entries
            )
            lines.append(f"{day.day:<9} {day.label}  {tickers or '-'}")
        lines.append("")
    return "\n".join(lines).rstrip()


async def _open_session(settings: Settings, user: str | None) -> CalendarSession:
    session = CalendarSession.from_settings(settings)
    if user and not await session.sign_in(user):
        print(f"Could not load favorites for {user}; using local favorites.")
    return session


async def _calendar(settings: Settings, args: argparse.Namespace) -> int:
    session = await _open_session(settings, args.user)
    try:
        view = await session.calendar(weeks=args.weeks, show_last_week=args.last_week or None)
    finally:
        await session.close()
    print(render_calendar(view))
    return 0


async def _star(settings: Settings, args: argparse.Namespace) -> int:
    session = await _open_session(settings, args.user)
    try:
        result = await session.toggle(args.ticker)
    finally:
        await session.close()
    if isinstance(result, Err):
        print(f"Could not update favorites: {result.error.message}")
        return 1
    ticker = normalize_ticker(args.ticker)
    print(f"{ticker} {'starred' if ticker in result.value else 'unstarred'}")
    return 0


async def _favorites(settings: Settings, args: argparse.Namespace) -> int:
    session = await _open_session(settings, args.user)
    try:
        tickers = session.favorites.as_list()
    finally:
        await session.close()
    print("\n".join(tickers) if tickers else "No favorites.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="earncal")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the API server")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve.add_argument("--host", default="0.0.0.0", help="Bind host")
    serve.add_argument("--port", type=int, default=8000, help="Bind port")

    calendar = subparsers.add_parser("calendar", help="Show upcoming earnings weeks")
    calendar.add_argument("--weeks", type=int, default=None, help="Number of weeks to show")
    calendar.add_argument("--last-week", action="store_true", help="Include the previous week")
    calendar.add_argument("--user", default=None, help="Signed-in identity")

    star = subparsers.add_parser("star", help="Star or unstar a ticker")
    star.add_argument("ticker", help="Ticker symbol (e.g. AAPL)")
    star.add_argument("--user", default=None, help="Signed-in identity")

    favorites = subparsers.add_parser("favorites", help="List starred tickers")
    favorites.add_argument("--user", default=None, help="Signed-in identity")

    args = parser.parse_args(argv)
    command = args.command or "serve"

    if command == "serve":
        uvicorn.run(
            "earncal.main:app",
            host=getattr(args, "host", "0.0.0.0"),
            port=getattr(args, "port", 8000),
            reload=getattr(args, "reload", False),
        )
        return 0

    settings = get_settings()
    setup_logging(settings)
    handlers = {"calendar": _calendar, "star": _star, "favorites": _favorites}
    return asyncio.run(handlers[command](settings, args))
