"""Terminal calendar session: favorites state plus calendar rendering data."""

from __future__ import annotations

from datetime import UTC, datetime

from earncal.calendar.selection import fetch_window
from earncal.calendar.view import CalendarView, build_calendar_view
from earncal.client.http import EarncalApiClient
from earncal.config import Settings
from earncal.core.logging import get_logger
from earncal.core.result import Result
from earncal.favorites.local import FileStorage, LocalFavoritesStore
from earncal.favorites.models import FavoriteSet
from earncal.favorites.protocols import KeyValueStorage
from earncal.favorites.reconciler import FavoritesReconciler
from earncal.favorites.sync import SessionSync

logger = get_logger(__name__)


class CalendarSession:
    """Favorites and calendar for one terminal user.

    Anonymous sessions keep favorites in the local storage file. Calling
    ``sign_in`` switches to the identity's server-side favorites; a failed
    sign-in leaves the session on local favorites.

    Usage:
        session = CalendarSession.from_settings(settings)
        await session.sign_in("alice")
        await session.toggle("AAPL")
        view = await session.calendar()
        await session.close()
    """

    def __init__(
        self,
        client: EarncalApiClient,
        storage: KeyValueStorage,
        settings: Settings,
    ) -> None:
        self._client = client
        self._settings = settings
        self.reconciler = FavoritesReconciler(
            LocalFavoritesStore(storage),
            sign_out_policy=settings.sign_out_policy,
            remote_timeout=settings.remote_timeout_seconds,
        )
        self.sync = SessionSync(
            self.reconciler,
            users=client,
            favorites=client,
            timeout=settings.remote_timeout_seconds,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> CalendarSession:
        client = EarncalApiClient(
            settings.api_base_url,
            identity_header=settings.identity_header,
            timeout=settings.remote_timeout_seconds,
        )
        return cls(client, FileStorage(settings.local_storage_path), settings)

    @property
    def favorites(self) -> FavoriteSet:
        return self.reconciler.favorites

    async def sign_in(self, identity: str) -> bool:
        """Adopt ``identity``'s remote favorites. False keeps local favorites."""
        return await self.sync.on_identity_established(identity)

    def sign_out(self) -> None:
        self.sync.on_signed_out()

    async def toggle(self, ticker: str) -> Result[FavoriteSet]:
        return await self.reconciler.toggle(ticker)

    async def calendar(
        self,
        *,
        weeks: int | None = None,
        show_last_week: bool | None = None,
        now: datetime | None = None,
    ) -> CalendarView:
        """Fetch entries and build the calendar with the active favorites."""
        max_weeks = weeks or self._settings.calendar_max_weeks
        include_last = (
            self._settings.calendar_show_last_week if show_last_week is None else show_last_week
        )
        now = now or datetime.now(UTC)

        start, end = fetch_window(
            now, max_weeks, show_last_week=include_last, tz=self._settings.tz
        )
        entries = await self._client.fetch_entries(start, end)
        logger.debug("Fetched calendar entries", count=len(entries))
        return build_calendar_view(
            entries,
            now,
            self.reconciler.favorites,
            max_weeks=max_weeks,
            show_last_week=include_last,
            tz=self._settings.tz,
        )

    async def close(self) -> None:
        await self._client.close()
