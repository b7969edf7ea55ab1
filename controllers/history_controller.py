from dataclasses import asdict
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request

from controllers.session_controller import require_identity
from dal.content_history_dal import ContentHistoryDAL
from models.content_records import ContentHistoryRecord


async def list_history(request: Request) -> List[Dict[str, Any]]:
    """Return the caller's generated posts, newest first."""
    identity = require_identity(request)
    records = await ContentHistoryDAL(request.app.state.db_initializer).list_for_user(identity.user_id)
    return [asdict(r) for r in records]


async def create_history(
    request: Request,
    content: str,
    platform: str,
    hashtags: List[str],
    engagement_prediction: Optional[float],
    tone: Optional[str],
) -> Dict[str, Any]:
    """Save a generated post to the caller's history.

    Clients call this after a `content_generated` frame arrives, so the
    realtime exchange itself never touches the database.
    """
    identity = require_identity(request)
    record = ContentHistoryRecord(
        id=None,
        user_id=identity.user_id,
        content=content,
        platform=platform,
        hashtags=hashtags,
        engagement_prediction=None if engagement_prediction is None else int(round(engagement_prediction)),
        tone=tone,
    )
    saved = await ContentHistoryDAL(request.app.state.db_initializer).create(record)
    return asdict(saved)


async def delete_history(request: Request, history_id: int) -> Dict[str, Any]:
    identity = require_identity(request)
    deleted = await ContentHistoryDAL(request.app.state.db_initializer).delete(history_id, identity.user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"History entry {history_id} not found")
    return {"id": history_id, "deleted": True}
