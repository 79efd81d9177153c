"""Single-ticker favorite endpoints. Both operations are idempotent."""

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from earncal.api.errors import unwrap_or_raise
from earncal.core.dependencies import FavoritesRepoDep, RequiredIdentityDep
from earncal.favorites.models import normalize_ticker

router = APIRouter()


class AddFavoriteRequest(BaseModel):
    ticker: str = Field(..., description="Ticker symbol (e.g. AAPL)")


class AddFavoriteResponse(BaseModel):
    ticker: str


@router.post("", status_code=201, response_model=AddFavoriteResponse)
async def add_favorite(
    body: AddFavoriteRequest,
    identity: RequiredIdentityDep,
    repo: FavoritesRepoDep,
) -> AddFavoriteResponse:
    unwrap_or_raise(await repo.insert(identity, body.ticker))
    return AddFavoriteResponse(ticker=normalize_ticker(body.ticker))


@router.delete("/{ticker}", status_code=204)
async def remove_favorite(
    ticker: str,
    identity: RequiredIdentityDep,
    repo: FavoritesRepoDep,
) -> Response:
    unwrap_or_raise(await repo.delete(identity, ticker))
    return Response(status_code=204)
