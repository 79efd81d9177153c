"""Abstract protocol for earnings entries sources.

This allows swapping where the calendar's entries come from (a bundled JSON
file, the NASDAQ calendar API) without changing the API or client code.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from earncal.calendar.models import EarningEntry


@runtime_checkable
class EarningsSource(Protocol):
    """Protocol for fetching earnings entries.

    Read failures degrade to an empty list rather than raising, so the
    calendar renders (empty) instead of erroring.
    """

    async def fetch_entries(
        self,
        start: date | None = None,
        end: date | None = None,
    ) -> list[EarningEntry]:
        """Get entries with ``start <= earnings_date <= end``.

        Args:
            start: First date to include (None = source default)
            end: Last date to include (None = source default)

        Returns:
            Entries in source order
        """
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
