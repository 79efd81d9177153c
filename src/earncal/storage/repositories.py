"""Result-returning favorites and user repositories over PostgreSQL.

asyncpg raises a zoo of exception types; these repositories fold them into
``ErrorKind`` categories so callers never inspect driver error shapes.
"""

from __future__ import annotations

import asyncpg

from earncal.core.exceptions import (
    BackendError,
    EarncalError,
    NetworkError,
    NotFoundError,
    ValidationError,
)
from earncal.core.logging import get_logger
from earncal.core.result import Err, Ok, Result
from earncal.favorites.models import UserRecord, normalize_ticker
from earncal.storage.database import Database

logger = get_logger(__name__)

_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, TimeoutError)


def _classify(e: Exception, operation: str) -> EarncalError:
    """Map an asyncpg / connection exception to an earncal error."""
    if isinstance(e, asyncpg.ForeignKeyViolationError):
        return NotFoundError(f"{operation}: no user record")
    if isinstance(e, (asyncpg.CheckViolationError, asyncpg.NotNullViolationError)):
        return ValidationError(f"{operation}: {e}")
    if isinstance(
        e, (OSError, TimeoutError, asyncpg.PostgresConnectionError, asyncpg.InterfaceError)
    ):
        return NetworkError(f"{operation}: database unreachable ({e})")
    return BackendError(f"{operation}: {e}")


def _validated_ticker(ticker: str) -> str | None:
    ticker = normalize_ticker(ticker) if ticker else ""
    return ticker or None


class PostgresFavoritesRepository:
    """FavoritesDataSource backed by the ``favorites`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def list_favorites(self, identity: str) -> Result[list[str]]:
        try:
            if not await self.db.user_exists(identity):
                return Err(NotFoundError(f"No user record for {identity}"))
            return Ok(await self.db.get_favorites(identity))
        except _DB_ERRORS as e:
            logger.warning("Failed to list favorites", identity=identity, error=str(e))
            return Err(_classify(e, "list favorites"))

    async def insert(self, identity: str, ticker: str) -> Result[None]:
        normalized = _validated_ticker(ticker)
        if not identity or normalized is None:
            return Err(ValidationError("identity and ticker are required"))
        try:
            await self.db.insert_favorite(identity, normalized)
        except asyncpg.UniqueViolationError:
            # Concurrent insert of the same ticker; already a favorite
            return Ok(None)
        except _DB_ERRORS as e:
            logger.warning(
                "Failed to insert favorite", identity=identity, ticker=normalized, error=str(e)
            )
            return Err(_classify(e, "insert favorite"))
        return Ok(None)

    async def delete(self, identity: str, ticker: str) -> Result[None]:
        normalized = _validated_ticker(ticker)
        if not identity or normalized is None:
            return Err(ValidationError("identity and ticker are required"))
        try:
            await self.db.delete_favorite(identity, normalized)
        except _DB_ERRORS as e:
            logger.warning(
                "Failed to delete favorite", identity=identity, ticker=normalized, error=str(e)
            )
            return Err(_classify(e, "delete favorite"))
        return Ok(None)

    async def replace(self, identity: str, tickers: list[str]) -> Result[list[str]]:
        if not identity:
            return Err(ValidationError("identity is required"))
        cleaned = list(dict.fromkeys(t for t in (_validated_ticker(x) for x in tickers) if t))
        try:
            saved = await self.db.replace_favorites(identity, cleaned)
        except _DB_ERRORS as e:
            logger.warning("Failed to replace favorites", identity=identity, error=str(e))
            return Err(_classify(e, "replace favorites"))
        return Ok(saved)


class PostgresUserRepository:
    """UserRecordSource backed by the ``users`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def ensure(self, identity: str) -> Result[UserRecord]:
        if not identity:
            return Err(ValidationError("identity is required"))
        try:
            row = await self.db.ensure_user(identity)
        except _DB_ERRORS as e:
            logger.warning("Failed to ensure user record", identity=identity, error=str(e))
            return Err(_classify(e, "ensure user"))
        return Ok(UserRecord(identity=row["identity"], created_at=row["created_at"]))
