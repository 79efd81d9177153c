"""Tests for Redis client module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from earncal.storage.redis import close_redis, init_redis


class TestInitRedis:
    """Tests for init_redis function."""

    @pytest.mark.anyio
    async def test_init_creates_client(self) -> None:
        """Test init_redis creates Redis client."""
        mock_redis = MagicMock()
        mock_ping = AsyncMock(return_value=True)
        mock_redis.ping = MagicMock(return_value=mock_ping())

        with patch("earncal.storage.redis.Redis") as mock_redis_cls:
            mock_redis_cls.from_url.return_value = mock_redis

            result = await init_redis("redis://localhost:6379")

        assert result is mock_redis
        mock_redis_cls.from_url.assert_called_once_with(
            "redis://localhost:6379",
            decode_responses=False,
        )
        mock_redis.ping.assert_called_once()

    @pytest.mark.anyio
    async def test_init_propagates_connection_error(self) -> None:
        mock_redis = MagicMock()
        mock_redis.ping = AsyncMock(side_effect=ConnectionError("refused"))

        with patch("earncal.storage.redis.Redis") as mock_redis_cls:
            mock_redis_cls.from_url.return_value = mock_redis

            with pytest.raises(ConnectionError):
                await init_redis("redis://localhost:6379")


class TestCloseRedis:
    """Tests for close_redis function."""

    @pytest.mark.anyio
    async def test_close(self) -> None:
        mock_redis = AsyncMock()

        await close_redis(mock_redis)

        mock_redis.aclose.assert_called_once()

    @pytest.mark.anyio
    async def test_close_none(self) -> None:
        """Closing a client that was never created is a no-op."""
        await close_redis(None)
