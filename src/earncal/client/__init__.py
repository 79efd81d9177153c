"""Terminal client for the earncal API."""

from earncal.client.http import EarncalApiClient
from earncal.client.session import CalendarSession

__all__ = ["CalendarSession", "EarncalApiClient"]
