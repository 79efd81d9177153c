"""Map earncal errors to HTTP responses."""

from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from earncal.core.exceptions import EarncalError, ErrorKind
from earncal.core.logging import get_logger
from earncal.core.result import Ok, Result

logger = get_logger(__name__)

T = TypeVar("T")

ERROR_KIND_TO_STATUS: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.NETWORK: 503,
    ErrorKind.BACKEND: 503,
    ErrorKind.STORAGE: 503,
}


def status_for_kind(kind: ErrorKind) -> int:
    """Resolve an error kind to an HTTP status, defaulting to 500."""
    return ERROR_KIND_TO_STATUS.get(kind, 500)


def unwrap_or_raise(result: Result[T]) -> T:
    """Return the value of ``result`` or raise its error as an HTTPException."""
    if isinstance(result, Ok):
        return result.value
    raise HTTPException(
        status_code=status_for_kind(result.kind),
        detail={"kind": str(result.kind), "message": result.error.message},
    )


async def earncal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render an uncaught EarncalError as ``{"detail": {"kind", "message"}}``."""
    if not isinstance(exc, EarncalError):
        raise exc
    status = status_for_kind(exc.kind)
    logger.warning(
        "Request failed",
        path=request.url.path,
        kind=str(exc.kind),
        status=status,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status,
        content={"detail": {"kind": str(exc.kind), "message": exc.message}},
    )
