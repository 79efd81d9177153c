"""Storage layer: PostgreSQL (asyncpg), Redis."""

from earncal.storage.database import Database
from earncal.storage.redis import close_redis, init_redis
from earncal.storage.repositories import PostgresFavoritesRepository, PostgresUserRepository

__all__ = [
    "Database",
    "PostgresFavoritesRepository",
    "PostgresUserRepository",
    "close_redis",
    "init_redis",
]
