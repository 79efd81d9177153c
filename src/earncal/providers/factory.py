"""Provider factory for the earnings entries source.

Usage:
    from earncal.providers import create_earnings_source

    source = create_earnings_source(settings, redis)
    entries = await source.fetch_entries()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from earncal.core.logging import get_logger
from earncal.providers.base import EarningsSource
from earncal.providers.earnings_file import JsonFileEarningsSource
from earncal.providers.nasdaq import NasdaqClient

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from earncal.config import Settings

logger = get_logger(__name__)


def create_earnings_source(settings: Settings, redis: Redis | None = None) -> EarningsSource:
    """Create the earnings source selected by ``settings.earnings_provider``.

    Args:
        settings: Application settings
        redis: Redis client, required by the nasdaq provider for caching

    Returns:
        EarningsSource implementation

    Raises:
        ValueError: If the provider is unsupported or its requirements are missing
    """
    provider_type = settings.earnings_provider

    if provider_type == "file":
        logger.debug("Creating JsonFileEarningsSource", path=str(settings.earnings_file))
        return JsonFileEarningsSource(settings.earnings_file)

    if provider_type == "nasdaq":
        if redis is None:
            raise ValueError("Redis required for nasdaq earnings provider")
        logger.debug("Creating NasdaqClient")
        return NasdaqClient(
            redis=redis,
            cache_ttl=settings.nasdaq_cache_ttl_earnings,
            lookahead_days=settings.nasdaq_lookahead_days,
        )

    raise ValueError(f"Unsupported earnings provider: {provider_type}")
