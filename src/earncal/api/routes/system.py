"""System config endpoint."""

from fastapi import APIRouter, Request

from earncal.core.dependencies import SettingsDep

router = APIRouter()


@router.get("/config")
async def system_config(request: Request, settings: SettingsDep) -> dict[str, object]:
    return {
        "env": settings.env,
        "earnings_provider": settings.earnings_provider,
        "calendar_timezone": settings.calendar_timezone,
        "calendar_max_weeks": settings.calendar_max_weeks,
        "favorites_enabled": getattr(request.app.state, "db", None) is not None,
        "identity_header": settings.identity_header,
    }
