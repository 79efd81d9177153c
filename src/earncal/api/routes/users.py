"""User record and favorites-collection endpoints for the signed-in identity."""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, Field

from earncal.api.errors import unwrap_or_raise
from earncal.core.dependencies import FavoritesRepoDep, RequiredIdentityDep, UserRepoDep

router = APIRouter()


class UserRecordResponse(BaseModel):
    identity: str
    created_at: datetime


class ReplaceFavoritesRequest(BaseModel):
    tickers: list[str] = Field(default_factory=list, description="Full favorites set")


class FavoritesResponse(BaseModel):
    identity: str
    tickers: list[str]


@router.post("", response_model=UserRecordResponse)
async def ensure_user(identity: RequiredIdentityDep, users: UserRepoDep) -> UserRecordResponse:
    """Create the user record if absent. Safe to repeat."""
    record = unwrap_or_raise(await users.ensure(identity))
    return UserRecordResponse(identity=record.identity, created_at=record.created_at)


@router.get("/favorites", response_model=FavoritesResponse)
async def get_favorites(identity: RequiredIdentityDep, repo: FavoritesRepoDep) -> FavoritesResponse:
    tickers = unwrap_or_raise(await repo.list_favorites(identity))
    return FavoritesResponse(identity=identity, tickers=tickers)


@router.put("/favorites", response_model=FavoritesResponse)
async def replace_favorites(
    body: ReplaceFavoritesRequest,
    identity: RequiredIdentityDep,
    repo: FavoritesRepoDep,
) -> FavoritesResponse:
    """Replace the identity's favorites with ``tickers`` (last writer wins)."""
    tickers = unwrap_or_raise(await repo.replace(identity, body.tickers))
    return FavoritesResponse(identity=identity, tickers=tickers)
