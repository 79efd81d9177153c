"""Earnings entries providers."""

from earncal.providers.base import EarningsSource
from earncal.providers.earnings_file import JsonFileEarningsSource
from earncal.providers.factory import create_earnings_source
from earncal.providers.nasdaq import NasdaqClient

__all__ = [
    "EarningsSource",
    "JsonFileEarningsSource",
    "NasdaqClient",
    "create_earnings_source",
]
