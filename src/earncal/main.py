"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg
from fastapi import FastAPI, Request

from earncal.api import api_router
from earncal.api.errors import earncal_error_handler
from earncal.config import get_settings
from earncal.core.exceptions import EarncalError
from earncal.core.logging import get_logger, setup_logging
from earncal.providers import create_earnings_source
from earncal.storage import Database, close_redis, init_redis

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: connects storage and the earnings source."""
    settings = get_settings()
    setup_logging(settings)

    redis = None
    if settings.earnings_provider == "nasdaq":
        redis = await init_redis(settings.redis_url)

    db: Database | None = None
    if settings.database_url:
        db = Database(settings.database_url)
        try:
            await db.connect()
            await db.ensure_schema()
        except (OSError, asyncpg.PostgresError) as e:
            # Calendar still serves; favorites endpoints answer 503
            logger.error("Database unavailable, favorites disabled", error=str(e))
            await db.disconnect()
            db = None
    else:
        logger.info("DATABASE_URL not set, favorites disabled")

    source = create_earnings_source(settings, redis)

    app.state.redis = redis
    app.state.db = db
    app.state.earnings_source = source
    logger.info(
        "earncal ready",
        env=settings.env,
        provider=settings.earnings_provider,
        favorites=db is not None,
    )
    try:
        yield
    finally:
        await source.close()
        if db is not None:
            await db.disconnect()
        await close_redis(redis)
        logger.info("earncal stopped")


app = FastAPI(
    title="earncal",
    description="Earnings calendar with per-user favorites",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_exception_handler(EarncalError, earncal_error_handler)

# Infrastructure (no prefix, not versioned)


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness check: always ok if process is running."""
    return {"status": "ok"}


@app.get("/ready")
async def ready(request: Request) -> dict[str, str]:
    """Readiness check: verifies infrastructure is connected."""
    state = request.app.state
    checks: dict[str, str] = {}

    redis = getattr(state, "redis", None)
    if redis is None:
        checks["redis"] = "disabled"
    else:
        try:
            await redis.ping()
            checks["redis"] = "ok"
        except Exception:
            checks["redis"] = "error"

    db = getattr(state, "db", None)
    if db is None:
        checks["db"] = "disabled"
    else:
        try:
            await db.fetchval("SELECT 1")
            checks["db"] = "ok"
        except Exception:
            checks["db"] = "error"

    checks["earnings_source"] = "ok" if getattr(state, "earnings_source", None) else "error"
    status = "ready" if all(v != "error" for v in checks.values()) else "not_ready"
    return {"status": status, **checks}


# Domain API
app.include_router(api_router, prefix="/api/v1")
