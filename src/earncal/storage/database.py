"""PostgreSQL database connection using raw asyncpg."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, cast

import asyncpg

from earncal.core.logging import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    identity    TEXT PRIMARY KEY,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE TABLE IF NOT EXISTS favorites (
    identity    TEXT NOT NULL REFERENCES users (identity) ON DELETE CASCADE,
    ticker      TEXT NOT NULL,
    position    INTEGER NOT NULL DEFAULT 0,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    PRIMARY KEY (identity, ticker)
);
"""


class Database:
    """Async PostgreSQL database wrapper using asyncpg."""

    def __init__(self, dsn: str, min_size: int = 2, max_size: int = 10) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: asyncpg.Pool[asyncpg.Record] | None = None

    async def connect(self) -> None:
        """Create connection pool."""
        # Convert SQLAlchemy-style DSN to asyncpg format
        dsn = self._dsn.replace("postgresql+asyncpg://", "postgresql://")

        self._pool = await asyncpg.create_pool(
            dsn,
            min_size=self._min_size,
            max_size=self._max_size,
        )
        logger.debug("Database pool created", min_size=self._min_size, max_size=self._max_size)

    async def disconnect(self) -> None:
        """Close connection pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.debug("Database pool closed")

    async def ensure_schema(self) -> None:
        """Create tables if they don't exist."""
        await self.execute(SCHEMA_SQL)
        logger.debug("Database schema ensured")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection[asyncpg.Record]]:
        """Acquire a connection from the pool."""
        if not self._pool:
            raise RuntimeError("Database not connected. Call connect() first.")
        async with self._pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection[asyncpg.Record]]:
        """Acquire a connection with an open transaction."""
        async with self.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def execute(self, query: str, *args: Any) -> str:
        """Execute a query and return status."""
        async with self.acquire() as conn:
            result = await conn.execute(query, *args)
            return cast(str, result)

    async def fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        """Fetch multiple rows."""
        async with self.acquire() as conn:
            result = await conn.fetch(query, *args)
            return list(result)

    async def fetchrow(self, query: str, *args: Any) -> asyncpg.Record | None:
        """Fetch a single row."""
        async with self.acquire() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        """Fetch a single value."""
        async with self.acquire() as conn:
            return await conn.fetchval(query, *args)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def ensure_user(self, identity: str) -> asyncpg.Record:
        """Create the user row if absent and return it.

        Args:
            identity: Stable user id from the auth provider

        Returns:
            Record with identity, created_at (existing row unchanged)
        """
        query = """
            WITH inserted AS (
                INSERT INTO users (identity)
                VALUES ($1)
                ON CONFLICT (identity) DO NOTHING
                RETURNING identity, created_at
            )
            SELECT identity, created_at FROM inserted
            UNION ALL
            SELECT identity, created_at FROM users WHERE identity = $1
            LIMIT 1
        """
        row = await self.fetchrow(query, identity)
        if row is None:
            # A concurrent insert committed after this statement's snapshot
            row = await self.fetchrow(
                "SELECT identity, created_at FROM users WHERE identity = $1", identity
            )
        if row is None:
            raise asyncpg.NoDataFoundError(f"User upsert returned no row for {identity}")
        return row

    async def user_exists(self, identity: str) -> bool:
        result = await self.fetchval("SELECT 1 FROM users WHERE identity = $1", identity)
        return result is not None

    # -------------------------------------------------------------------------
    # Favorites
    # -------------------------------------------------------------------------

    async def get_favorites(self, identity: str) -> list[str]:
        """Get an identity's favorite tickers in the order they were starred."""
        query = """
            SELECT ticker FROM favorites
            WHERE identity = $1
            ORDER BY position, created_at, ticker
        """
        rows = await self.fetch(query, identity)
        return [row["ticker"] for row in rows]

    async def insert_favorite(self, identity: str, ticker: str) -> bool:
        """Add a ticker to the end of an identity's favorites.

        Returns:
            True if inserted, False if it was already a favorite
        """
        query = """
            INSERT INTO favorites (identity, ticker, position)
            VALUES (
                $1, $2,
                (SELECT COALESCE(MAX(position) + 1, 0) FROM favorites WHERE identity = $1)
            )
            ON CONFLICT (identity, ticker) DO NOTHING
        """
        status = await self.execute(query, identity, ticker)
        inserted = status.endswith(" 1")
        logger.debug("Favorite insert", identity=identity, ticker=ticker, inserted=inserted)
        return inserted

    async def delete_favorite(self, identity: str, ticker: str) -> bool:
        """Remove a ticker from an identity's favorites.

        Returns:
            True if a row was deleted
        """
        status = await self.execute(
            "DELETE FROM favorites WHERE identity = $1 AND ticker = $2",
            identity,
            ticker,
        )
        deleted = status.endswith(" 1")
        logger.debug("Favorite delete", identity=identity, ticker=ticker, deleted=deleted)
        return deleted

    async def replace_favorites(self, identity: str, tickers: list[str]) -> list[str]:
        """Replace an identity's favorites with ``tickers`` in one transaction."""
        async with self.transaction() as conn:
            await conn.execute("DELETE FROM favorites WHERE identity = $1", identity)
            if tickers:
                await conn.executemany(
                    "INSERT INTO favorites (identity, ticker, position) VALUES ($1, $2, $3)",
                    [(identity, ticker, i) for i, ticker in enumerate(tickers)],
                )
        logger.debug("Favorites replaced", identity=identity, count=len(tickers))
        return tickers
