"""Switch the reconciler to remote favorites when an identity signs in."""

from __future__ import annotations

import asyncio

from earncal.core.logging import get_logger
from earncal.core.result import Err, guarded
from earncal.favorites.models import FavoriteSet
from earncal.favorites.protocols import BoundFavorites, FavoritesDataSource, UserRecordSource
from earncal.favorites.reconciler import FavoritesReconciler

logger = get_logger(__name__)


class SessionSync:
    """React to identity changes reported by the auth provider.

    Sign-in runs two sequenced steps: ensure the user record exists, then
    fetch that identity's favorites. Either step failing leaves the
    reconciler in LOCAL mode. Duplicate sign-in events are serialized; a
    repeat fetch never overwrites toggles made after it started.
    """

    def __init__(
        self,
        reconciler: FavoritesReconciler,
        users: UserRecordSource,
        favorites: FavoritesDataSource,
        *,
        timeout: float = 10.0,
    ) -> None:
        self._reconciler = reconciler
        self._users = users
        self._favorites = favorites
        self._timeout = timeout
        self._lock = asyncio.Lock()

    async def on_identity_established(self, identity: str) -> bool:
        """Ensure the user record and adopt its remote favorites.

        Args:
            identity: Stable user id from the auth provider

        Returns:
            True if remote favorites are now active for ``identity``
        """
        async with self._lock:
            log = logger.bind(identity=identity)
            version = self._reconciler.version

            ensured = await guarded(
                self._users.ensure(identity),
                timeout=self._timeout,
                operation="ensure user record",
            )
            if isinstance(ensured, Err):
                log.warning(
                    "User record sync failed, staying on local favorites",
                    error_kind=ensured.kind,
                    error=ensured.error.message,
                )
                return False

            remote = BoundFavorites(self._favorites, identity)
            fetched = await guarded(
                remote.list(),
                timeout=self._timeout,
                operation="fetch favorites",
            )
            if isinstance(fetched, Err):
                log.warning(
                    "Favorites fetch failed, staying on local favorites",
                    error_kind=fetched.kind,
                    error=fetched.error.message,
                )
                return False

            favorites: FavoriteSet = fetched.value
            adopted = self._reconciler.adopt_remote(
                remote, favorites, expected_version=version
            )
            if adopted:
                log.info("Session synced", favorites=len(favorites))
            return adopted or self._reconciler.identity == identity

    def on_signed_out(self) -> None:
        self._reconciler.sign_out()
