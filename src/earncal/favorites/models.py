"""Favorite ticker sets, modes and user records."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel


def normalize_ticker(ticker: str) -> str:
    return ticker.strip().upper()


class FavoriteSet:
    """Immutable, insertion-ordered set of ticker symbols.

    Order is kept for persistence (the stored JSON array), but equality is by
    contents: starring then unstarring a ticker yields an equal set even if
    it changed position.
    """

    __slots__ = ("_tickers", "_members")

    def __init__(self, tickers: Iterable[str] = ()) -> None:
        ordered = dict.fromkeys(normalize_ticker(t) for t in tickers if t and t.strip())
        self._tickers: tuple[str, ...] = tuple(ordered)
        self._members: frozenset[str] = frozenset(ordered)

    def __contains__(self, ticker: object) -> bool:
        return isinstance(ticker, str) and normalize_ticker(ticker) in self._members

    def __iter__(self) -> Iterator[str]:
        return iter(self._tickers)

    def __len__(self) -> int:
        return len(self._tickers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FavoriteSet):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __repr__(self) -> str:
        return f"FavoriteSet({list(self._tickers)!r})"

    def with_ticker(self, ticker: str) -> FavoriteSet:
        return FavoriteSet((*self._tickers, ticker))

    def without(self, ticker: str) -> FavoriteSet:
        ticker = normalize_ticker(ticker)
        return FavoriteSet(t for t in self._tickers if t != ticker)

    def toggled(self, ticker: str) -> FavoriteSet:
        return self.without(ticker) if ticker in self else self.with_ticker(ticker)

    def union(self, other: Iterable[str]) -> FavoriteSet:
        return FavoriteSet((*self._tickers, *other))

    def as_list(self) -> list[str]:
        return list(self._tickers)


class FavoritesMode(StrEnum):
    """Which store is authoritative for the active favorite set."""

    LOCAL = "local"  # persistent client storage, anonymous visitor
    REMOTE = "remote"  # per-identity record in the hosted database


class SignOutPolicy(StrEnum):
    """What the local set becomes when a signed-in identity signs out."""

    RESTORE_LOCAL = "restore_local"  # reload what was stored locally before sign-in
    CARRY_OVER = "carry_over"  # remote set replaces the local set
    MERGE = "merge"  # union of the stored local set and the remote set


class UserRecord(BaseModel):
    """Backing row for a signed-in identity."""

    identity: str
    created_at: datetime | None = None
