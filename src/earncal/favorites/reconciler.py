"""Active favorite set with local/remote modes and optimistic remote writes.

Exactly one store is authoritative at a time:

- LOCAL: anonymous visitor. Toggles are persisted synchronously to the local
  store. A storage failure is logged and the change stays in memory.
- REMOTE: signed-in identity. Toggles update memory immediately, then the
  full set is written with ``replace``. A failed write rolls the toggle back.

Remote writes are serialized, and each one sends the in-memory set as of the
moment it runs, so a second toggle made while the first is in flight is
neither lost nor overwritten by a stale snapshot. A queued toggle whose
change an earlier write already carried is not written again, so a failure
cannot roll back a change the remote store has accepted. Across processes (two
browser tabs, two terminals) ``replace`` is last-writer-wins.
"""

from __future__ import annotations

import asyncio

from earncal.core.exceptions import StorageError
from earncal.core.logging import get_logger
from earncal.core.result import Err, Ok, Result, guarded
from earncal.favorites.local import LocalFavoritesStore
from earncal.favorites.models import (
    FavoriteSet,
    FavoritesMode,
    SignOutPolicy,
    normalize_ticker,
)
from earncal.favorites.protocols import RemoteFavorites

logger = get_logger(__name__)


class FavoritesReconciler:
    """Own the in-memory favorite set and route writes to the active store."""

    def __init__(
        self,
        local_store: LocalFavoritesStore,
        *,
        sign_out_policy: SignOutPolicy = SignOutPolicy.RESTORE_LOCAL,
        remote_timeout: float = 10.0,
    ) -> None:
        """Initialize in LOCAL mode from the persisted local set.

        Args:
            local_store: Persistent store for the anonymous set
            sign_out_policy: How the local set is rebuilt on sign-out
            remote_timeout: Seconds before a remote write counts as failed
        """
        self._local = local_store
        self._sign_out_policy = sign_out_policy
        self._remote_timeout = remote_timeout

        self._favorites = local_store.load()
        self._mode = FavoritesMode.LOCAL
        self._remote: RemoteFavorites | None = None
        self._version = 0
        # Version of the last set the remote store confirmed
        self._synced_version = 0
        self._write_lock = asyncio.Lock()

    @property
    def mode(self) -> FavoritesMode:
        return self._mode

    @property
    def identity(self) -> str | None:
        return self._remote.identity if self._remote else None

    @property
    def favorites(self) -> FavoriteSet:
        return self._favorites

    @property
    def version(self) -> int:
        """Monotonic counter bumped on every in-memory change."""
        return self._version

    def is_favorite(self, ticker: str) -> bool:
        return ticker in self._favorites

    def _apply(self, favorites: FavoriteSet) -> int:
        self._favorites = favorites
        self._version += 1
        return self._version

    def _persist_local(self) -> None:
        try:
            self._local.save(self._favorites)
        except StorageError as e:
            logger.error(
                "Failed to persist local favorites, keeping change in memory only",
                error=e.message,
                count=len(self._favorites),
            )

    async def toggle(self, ticker: str) -> Result[FavoriteSet]:
        """Star an unstarred ticker or unstar a starred one.

        Returns:
            Ok with the active set, or Err when a remote write failed and
            the toggle was rolled back. Callers may show the error; the
            state is already consistent either way.
        """
        ticker = normalize_ticker(ticker)

        if self._mode is FavoritesMode.LOCAL or self._remote is None:
            self._apply(self._favorites.toggled(ticker))
            self._persist_local()
            return Ok(self._favorites)

        snapshot = self._favorites
        added = ticker not in snapshot
        applied_version = self._apply(snapshot.toggled(ticker))
        remote = self._remote

        async with self._write_lock:
            if self._remote is not remote:
                # Signed out (or switched identity) while queued
                logger.info("Dropping favorites write for inactive identity", ticker=ticker)
                return Ok(self._favorites)
            if self._synced_version >= applied_version:
                # An earlier queued write already sent this toggle
                return Ok(self._favorites)
            sent_version = self._version
            try:
                result = await guarded(
                    remote.replace(self._favorites),
                    timeout=self._remote_timeout,
                    operation="replace favorites",
                )
            except Exception:
                self._roll_back(remote, ticker, added, snapshot, applied_version)
                raise
            if isinstance(result, Ok) and self._remote is remote:
                self._synced_version = sent_version

        if isinstance(result, Ok):
            logger.debug(
                "Favorite toggled",
                ticker=ticker,
                added=added,
                identity=remote.identity,
            )
            return Ok(self._favorites)

        self._roll_back(remote, ticker, added, snapshot, applied_version)
        logger.warning(
            "Favorite toggle failed, rolled back",
            ticker=ticker,
            added=added,
            identity=remote.identity,
            error_kind=result.kind,
            error=result.error.message,
        )
        return Err(result.error)

    def _roll_back(
        self,
        remote: RemoteFavorites,
        ticker: str,
        added: bool,
        snapshot: FavoriteSet,
        applied_version: int,
    ) -> None:
        if self._remote is not remote:
            return
        if self._version == applied_version:
            self._apply(snapshot)
        else:
            # Later toggles landed meanwhile; undo only this ticker
            self._apply(
                self._favorites.without(ticker) if added else self._favorites.with_ticker(ticker)
            )

    def adopt_remote(
        self,
        remote: RemoteFavorites,
        favorites: FavoriteSet,
        *,
        expected_version: int | None = None,
    ) -> bool:
        """Switch to REMOTE mode with the fetched set as the active set.

        The fetched set replaces the in-memory set wholesale; local favorites
        are not merged in (the local store itself is left untouched).

        Args:
            remote: Identity-bound remote store
            favorites: Set fetched from ``remote``
            expected_version: ``version`` observed before the fetch started.
                If already REMOTE for the same identity and the version has
                moved since, the fetch is stale and is discarded.

        Returns:
            True if the set was adopted
        """
        if (
            self._mode is FavoritesMode.REMOTE
            and self.identity == remote.identity
            and expected_version is not None
            and self._version != expected_version
        ):
            logger.info(
                "Discarding stale remote favorites",
                identity=remote.identity,
                expected_version=expected_version,
                version=self._version,
            )
            return False

        previous_mode = self._mode
        self._remote = remote
        self._mode = FavoritesMode.REMOTE
        self._apply(favorites)
        self._synced_version = self._version
        logger.info(
            "Remote favorites active",
            identity=remote.identity,
            previous_mode=previous_mode,
            count=len(favorites),
        )
        return True

    def sign_out(self) -> None:
        """Return to LOCAL mode according to the sign-out policy."""
        if self._mode is FavoritesMode.LOCAL:
            return

        identity = self.identity
        remote_set = self._favorites
        self._remote = None
        self._mode = FavoritesMode.LOCAL

        if self._sign_out_policy is SignOutPolicy.CARRY_OVER:
            self._apply(remote_set)
            self._persist_local()
        elif self._sign_out_policy is SignOutPolicy.MERGE:
            self._apply(self._local.load().union(remote_set))
            self._persist_local()
        else:
            self._apply(self._local.load())

        logger.info(
            "Local favorites active",
            identity=identity,
            policy=self._sign_out_policy,
            count=len(self._favorites),
        )
