"""Collaborator protocols for favorites storage.

Implementations:
- PostgresFavoritesRepository / PostgresUserRepository (server side)
- EarncalApiClient (terminal client, talks to the HTTP API)
- LocalFavoritesStore over FileStorage / MemoryStorage (anonymous visitors)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from earncal.core.result import Err, Ok, Result
from earncal.favorites.models import FavoriteSet, UserRecord


@runtime_checkable
class FavoritesDataSource(Protocol):
    """Per-identity favorites store.

    ``insert`` of a ticker already present and ``delete`` of a ticker not
    present are successes, not errors.
    """

    async def list_favorites(self, identity: str) -> Result[list[str]]: ...

    async def insert(self, identity: str, ticker: str) -> Result[None]: ...

    async def delete(self, identity: str, ticker: str) -> Result[None]: ...

    async def replace(self, identity: str, tickers: list[str]) -> Result[list[str]]: ...


@runtime_checkable
class UserRecordSource(Protocol):
    """Create-if-absent store for identity records."""

    async def ensure(self, identity: str) -> Result[UserRecord]: ...


class RemoteFavorites(Protocol):
    """Favorites store already bound to one identity."""

    @property
    def identity(self) -> str: ...

    async def list(self) -> Result[FavoriteSet]: ...

    async def replace(self, favorites: FavoriteSet) -> Result[FavoriteSet]: ...


class KeyValueStorage(Protocol):
    """String key-value store in the shape of browser local storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class BoundFavorites:
    """Bind a FavoritesDataSource to a single identity."""

    def __init__(self, source: FavoritesDataSource, identity: str) -> None:
        self._source = source
        self._identity = identity

    @property
    def identity(self) -> str:
        return self._identity

    async def list(self) -> Result[FavoriteSet]:
        result = await self._source.list_favorites(self._identity)
        if isinstance(result, Err):
            return Err(result.error)
        return Ok(FavoriteSet(result.value))

    async def replace(self, favorites: FavoriteSet) -> Result[FavoriteSet]:
        result = await self._source.replace(self._identity, favorites.as_list())
        if isinstance(result, Err):
            return Err(result.error)
        return Ok(FavoriteSet(result.value))
