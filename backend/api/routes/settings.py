"""Settings API routes. Backend maintains settings.json; frontend fetches and overwrites on save."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from shared.settings import resolve_engine_settings

from ..schemas import SettingsRequest
from .. import state as api_state

router = APIRouter()


@router.get("")
async def get_settings_route():
    """Return settings.json contents plus the effective engine settings."""
    settings = await api_state.repository.get_settings()
    try:
        effective = resolve_engine_settings(settings)
    except ValidationError as e:
        logger.warning("Invalid engine settings: {}", e)
        return JSONResponse(status_code=500, content={"error": "Invalid engine settings", "settings": settings})
    return {"settings": settings, "effective": effective.model_dump(by_alias=True)}


@router.post("")
async def save_settings_route(body: SettingsRequest):
    """Overwrite settings.json with request body."""
    await api_state.repository.save_settings(body.model_dump(by_alias=True, exclude_none=True))
    return {"success": True}
