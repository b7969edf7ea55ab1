"""FastAPI routes for user settings."""

import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.settings_controller import get_settings, update_settings

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["settings"])


class SettingsPayload(BaseModel):
    theme: Optional[Literal["light", "dark", "system"]] = None
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    weekly_digest: Optional[bool] = None
    content_language: Optional[Literal["en", "es", "fr", "de"]] = None
    auto_schedule: Optional[bool] = None


@router.get("")
async def get_settings_route(request: Request):
    try:
        return await get_settings(request)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error fetching user settings: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch user settings")


@router.patch("")
async def patch_settings_route(request: Request, payload: SettingsPayload):
    try:
        return await update_settings(request, payload.model_dump(exclude_none=True))
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error updating user settings: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to update user settings")
