"""HTTP client for the earncal API.

Implements ``FavoritesDataSource`` and ``UserRecordSource`` so the terminal
client runs the same reconciler and sync code as any other consumer, plus
``fetch_entries`` in the shape of ``EarningsSource``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import httpx
import orjson
from pydantic import ValidationError as PydanticValidationError

from earncal.calendar.models import EarningEntry
from earncal.core.constants import DEFAULT_API_BASE_URL, DEFAULT_IDENTITY_HEADER
from earncal.core.exceptions import (
    BackendError,
    ConflictError,
    EarncalError,
    NetworkError,
    NotFoundError,
    ValidationError,
)
from earncal.core.logging import get_logger
from earncal.core.result import Err, Ok, Result
from earncal.favorites.models import UserRecord

logger = get_logger(__name__)

# Raised while reading a 2xx body that is not the expected JSON shape
_MALFORMED = (ValueError, KeyError, TypeError, AttributeError)


def _error_for_response(resp: httpx.Response, operation: str) -> EarncalError:
    """Map a non-2xx response to an earncal error."""
    try:
        detail = orjson.loads(resp.content).get("detail")
    except (orjson.JSONDecodeError, AttributeError):
        detail = None
    if isinstance(detail, dict):
        detail = detail.get("message")
    message = f"{operation}: HTTP {resp.status_code}" + (f" ({detail})" if detail else "")

    if resp.status_code in (400, 401, 422):
        return ValidationError(message)
    if resp.status_code == 404:
        return NotFoundError(message)
    if resp.status_code == 409:
        return ConflictError(message)
    if resp.status_code == 503:
        return NetworkError(message)
    return BackendError(message)


def _malformed(operation: str, e: Exception) -> BackendError:
    return BackendError(f"{operation}: unexpected response body ({type(e).__name__}: {e})")


def _tickers(resp: httpx.Response) -> list[str]:
    tickers = orjson.loads(resp.content)["tickers"]
    if not isinstance(tickers, list) or not all(isinstance(t, str) for t in tickers):
        raise TypeError("tickers is not a list of strings")
    return tickers


class EarncalApiClient:
    """Client for the earncal HTTP API.

    Usage:
        client = EarncalApiClient("http://localhost:8000")
        result = await client.list_favorites("alice")
        await client.close()
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        *,
        identity_header: str = DEFAULT_IDENTITY_HEADER,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._identity_header = identity_header
        self._timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                base_url=f"{self._base_url}/api/v1",
                timeout=self._timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
        return self._http_client

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        *,
        identity: str | None = None,
        **kwargs: Any,
    ) -> Result[httpx.Response]:
        headers = {self._identity_header: identity} if identity else None
        try:
            resp = await self._get_http_client().request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            return Err(NetworkError(f"{operation} timed out ({e})"))
        except httpx.TransportError as e:
            return Err(NetworkError(f"{operation} failed: {e}"))
        if resp.is_success:
            return Ok(resp)
        return Err(_error_for_response(resp, operation))

    # ------------------------------------------------------------------
    # UserRecordSource
    # ------------------------------------------------------------------

    async def ensure(self, identity: str) -> Result[UserRecord]:
        result = await self._request("POST", "/users", "ensure user", identity=identity)
        if isinstance(result, Err):
            return Err(result.error)
        try:
            data = orjson.loads(result.value.content)
            record = UserRecord(
                identity=data["identity"],
                created_at=datetime.fromisoformat(data["created_at"]),
            )
        except _MALFORMED as e:
            return Err(_malformed("ensure user", e))
        return Ok(record)

    # ------------------------------------------------------------------
    # FavoritesDataSource
    # ------------------------------------------------------------------

    async def list_favorites(self, identity: str) -> Result[list[str]]:
        result = await self._request(
            "GET", "/users/favorites", "list favorites", identity=identity
        )
        if isinstance(result, Err):
            return Err(result.error)
        try:
            return Ok(_tickers(result.value))
        except _MALFORMED as e:
            return Err(_malformed("list favorites", e))

    async def insert(self, identity: str, ticker: str) -> Result[None]:
        result = await self._request(
            "POST", "/favorites", "insert favorite", identity=identity, json={"ticker": ticker}
        )
        if isinstance(result, Err) and result.kind != ConflictError.kind:
            return Err(result.error)
        return Ok(None)

    async def delete(self, identity: str, ticker: str) -> Result[None]:
        result = await self._request(
            "DELETE", f"/favorites/{ticker}", "delete favorite", identity=identity
        )
        if isinstance(result, Err):
            return Err(result.error)
        return Ok(None)

    async def replace(self, identity: str, tickers: list[str]) -> Result[list[str]]:
        result = await self._request(
            "PUT",
            "/users/favorites",
            "replace favorites",
            identity=identity,
            json={"tickers": tickers},
        )
        if isinstance(result, Err):
            return Err(result.error)
        try:
            return Ok(_tickers(result.value))
        except _MALFORMED as e:
            return Err(_malformed("replace favorites", e))

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    async def fetch_entries(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[EarningEntry]:
        """Fetch earnings entries. Any failure degrades to an empty list."""
        params: dict[str, str] = {}
        if start is not None:
            params["start"] = start.isoformat()
        if end is not None:
            params["end"] = end.isoformat()

        result = await self._request("GET", "/earnings", "fetch entries", params=params)
        if isinstance(result, Err):
            logger.warning("Failed to fetch earnings entries", error=result.error.message)
            return []

        try:
            rows = orjson.loads(result.value.content).get("entries", [])
            if not isinstance(rows, list):
                raise TypeError("entries is not a list")
        except _MALFORMED as e:
            logger.warning("Unexpected earnings response body", error=f"{type(e).__name__}: {e}")
            return []

        entries: list[EarningEntry] = []
        for row in rows:
            try:
                entries.append(EarningEntry.model_validate(row))
            except PydanticValidationError as e:
                logger.debug("Skipping invalid earnings row", row=row, error=str(e))
        return entries

    async def close(self) -> None:
        """Clean up resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
