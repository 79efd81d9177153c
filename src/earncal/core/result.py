"""Result envelope for data-source operations.

Data sources return ``Ok(value)`` or ``Err(error)`` instead of raising, so
callers decide per operation whether a failure rolls back, degrades to a
fallback, or surfaces as an HTTP error:

    result = await favorites.replace(identity, tickers)
    match result:
        case Ok(saved):
            ...
        case Err(error) if error.kind is ErrorKind.CONFLICT:
            ...
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from earncal.core.exceptions import EarncalError, ErrorKind, NetworkError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    @property
    def kind(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result carrying the error that caused it."""

    error: EarncalError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def unwrap(self) -> T:
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default


Result = Ok[T] | Err[T]


async def guarded(
    awaitable: Awaitable[Result[T]],
    *,
    timeout: float,
    operation: str,
) -> Result[T]:
    """Await a data-source call with a deadline.

    A call that outlives ``timeout`` is cancelled and reported as a
    ``NetworkError`` instead of leaving the caller waiting indefinitely.
    An ``EarncalError`` raised by a source that should have returned
    ``Err`` is folded into the result as well.
    """
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError:
        return Err(NetworkError(f"{operation} timed out after {timeout:g}s"))
    except EarncalError as e:
        return Err(e)
