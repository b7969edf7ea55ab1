from dataclasses import asdict
from typing import Any, Dict

from fastapi import Request

from controllers.session_controller import require_identity
from dal.user_settings_dal import UserSettingsDAL


async def get_settings(request: Request) -> Dict[str, Any]:
    """Return the caller's settings, saving the defaults on first access."""
    identity = require_identity(request)
    dal = UserSettingsDAL(request.app.state.db_initializer)
    settings = await dal.get(identity.user_id)
    if settings is None:
        settings = await dal.upsert(identity.user_id, {})
    return asdict(settings)


async def update_settings(request: Request, updates: Dict[str, Any]) -> Dict[str, Any]:
    identity = require_identity(request)
    settings = await UserSettingsDAL(request.app.state.db_initializer).upsert(identity.user_id, updates)
    return asdict(settings)
