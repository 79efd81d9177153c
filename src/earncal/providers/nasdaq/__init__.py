"""NASDAQ provider for earnings calendar data.

Uses the free NASDAQ API (api.nasdaq.com), no API key required.
"""

from earncal.providers.nasdaq.client import NasdaqClient

__all__ = ["NasdaqClient"]
