"""Tests for the FastAPI app: lifespan wiring and infrastructure endpoints."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from earncal.config import Settings
from earncal.main import app, lifespan
from earncal.providers.earnings_file import JsonFileEarningsSource

_STATE_ATTRS = ("redis", "db", "earnings_source")


@pytest.fixture()
def clean_state() -> Iterator[None]:
    yield
    for attr in _STATE_ATTRS:
        if hasattr(app.state, attr):
            delattr(app.state, attr)


@pytest.fixture()
async def client(clean_state):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _settings(tmp_path: Path, **kwargs: object) -> Settings:
    return Settings(  # type: ignore[call-arg]
        _env_file=None,
        earnings_file=tmp_path / "earnings.json",
        **kwargs,
    )


class TestHealth:
    async def test_health(self, client: httpx.AsyncClient):
        resp = await client.get("/health")
        assert resp.json() == {"status": "ok"}


class TestReady:
    async def test_ready(self, client: httpx.AsyncClient):
        db = AsyncMock()
        db.fetchval.return_value = 1
        app.state.redis = None
        app.state.db = db
        app.state.earnings_source = MagicMock()

        resp = await client.get("/ready")

        assert resp.json() == {
            "status": "ready",
            "redis": "disabled",
            "db": "ok",
            "earnings_source": "ok",
        }

    async def test_db_error_not_ready(self, client: httpx.AsyncClient):
        db = AsyncMock()
        db.fetchval.side_effect = OSError("connection refused")
        redis = AsyncMock()
        app.state.redis = redis
        app.state.db = db
        app.state.earnings_source = MagicMock()

        data = (await client.get("/ready")).json()

        assert data["status"] == "not_ready"
        assert data["db"] == "error"
        assert data["redis"] == "ok"


class TestLifespan:
    async def test_file_provider_without_database(self, tmp_path: Path, clean_state):
        settings = _settings(tmp_path, database_url=None)

        with patch("earncal.main.get_settings", return_value=settings):
            async with lifespan(app):
                assert app.state.db is None
                assert app.state.redis is None
                assert isinstance(app.state.earnings_source, JsonFileEarningsSource)

    async def test_database_connected(self, tmp_path: Path, clean_state):
        settings = _settings(tmp_path, database_url="postgresql://localhost/earncal")
        db = AsyncMock()

        with (
            patch("earncal.main.get_settings", return_value=settings),
            patch("earncal.main.Database", return_value=db),
        ):
            async with lifespan(app):
                assert app.state.db is db
                db.ensure_schema.assert_awaited_once()

        db.disconnect.assert_awaited_once()

    async def test_database_unavailable_disables_favorites(self, tmp_path: Path, clean_state):
        settings = _settings(tmp_path, database_url="postgresql://localhost/earncal")
        db = AsyncMock()
        db.connect.side_effect = OSError("connection refused")

        with (
            patch("earncal.main.get_settings", return_value=settings),
            patch("earncal.main.Database", return_value=db),
        ):
            async with lifespan(app):
                assert app.state.db is None

    async def test_nasdaq_provider_uses_redis(self, tmp_path: Path, clean_state):
        settings = _settings(tmp_path, database_url=None, earnings_provider="nasdaq")
        redis = AsyncMock()

        with (
            patch("earncal.main.get_settings", return_value=settings),
            patch("earncal.main.init_redis", AsyncMock(return_value=redis)),
        ):
            async with lifespan(app):
                assert app.state.redis is redis

        redis.aclose.assert_awaited_once()
