"""FastAPI dependencies for dependency injection.

Infrastructure clients live on ``app.state`` (created in the lifespan), not in
module globals, so tests and multiple apps never share connections.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from earncal.config import Settings, get_settings
from earncal.providers.base import EarningsSource
from earncal.storage.database import Database
from earncal.storage.repositories import PostgresFavoritesRepository, PostgresUserRepository

# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_optional_db(request: Request) -> Database | None:
    """Database, or None when DATABASE_URL is unset."""
    return getattr(request.app.state, "db", None)


def get_db(db: Database | None = Depends(get_optional_db)) -> Database:
    if db is None:
        raise HTTPException(status_code=503, detail="Favorites storage not configured")
    return db


def get_earnings_source(request: Request) -> EarningsSource:
    source: EarningsSource | None = getattr(request.app.state, "earnings_source", None)
    if source is None:
        raise HTTPException(status_code=503, detail="Earnings source not available")
    return source


def get_favorites_repository(db: Database = Depends(get_db)) -> PostgresFavoritesRepository:
    return PostgresFavoritesRepository(db)


def get_optional_favorites_repository(
    db: Database | None = Depends(get_optional_db),
) -> PostgresFavoritesRepository | None:
    return PostgresFavoritesRepository(db) if db is not None else None


def get_user_repository(db: Database = Depends(get_db)) -> PostgresUserRepository:
    return PostgresUserRepository(db)


def get_identity(request: Request, settings: SettingsDep) -> str | None:
    """Identity forwarded by the auth proxy in the configured header."""
    value = request.headers.get(settings.identity_header, "").strip()
    return value or None


def require_identity(identity: str | None = Depends(get_identity)) -> str:
    if identity is None:
        raise HTTPException(status_code=401, detail="No signed-in identity on request")
    return identity


# Annotated dependencies for use in route handlers
DbDep = Annotated[Database, Depends(get_db)]
EarningsSourceDep = Annotated[EarningsSource, Depends(get_earnings_source)]
FavoritesRepoDep = Annotated[PostgresFavoritesRepository, Depends(get_favorites_repository)]
OptionalFavoritesRepoDep = Annotated[
    PostgresFavoritesRepository | None, Depends(get_optional_favorites_repository)
]
UserRepoDep = Annotated[PostgresUserRepository, Depends(get_user_repository)]
IdentityDep = Annotated[str | None, Depends(get_identity)]
RequiredIdentityDep = Annotated[str, Depends(require_identity)]
