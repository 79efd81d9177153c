"""Favorites: local/remote favorite sets and session-aware sync."""

from earncal.favorites.local import FileStorage, LocalFavoritesStore, MemoryStorage
from earncal.favorites.models import (
    FavoriteSet,
    FavoritesMode,
    SignOutPolicy,
    UserRecord,
    normalize_ticker,
)
from earncal.favorites.protocols import (
    BoundFavorites,
    FavoritesDataSource,
    KeyValueStorage,
    RemoteFavorites,
    UserRecordSource,
)
from earncal.favorites.reconciler import FavoritesReconciler
from earncal.favorites.sync import SessionSync

__all__ = [
    "BoundFavorites",
    "FavoriteSet",
    "FavoritesDataSource",
    "FavoritesMode",
    "FavoritesReconciler",
    "FileStorage",
    "KeyValueStorage",
    "LocalFavoritesStore",
    "MemoryStorage",
    "RemoteFavorites",
    "SessionSync",
    "SignOutPolicy",
    "UserRecord",
    "UserRecordSource",
    "normalize_ticker",
]
