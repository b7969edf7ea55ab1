from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import HTTPException, Request

from controllers.session_controller import require_identity
from dal.scheduled_post_dal import ScheduledPostDAL
from models.content_records import ScheduledPostRecord


async def create_scheduled_post(
    request: Request,
    content: str,
    platform: str,
    scheduled_time: str,
    hashtags: List[str],
    engagement_prediction: int,
    tone: str,
) -> Dict[str, Any]:
    """Queue a post for publishing at `scheduled_time` with status 'pending'."""
    identity = require_identity(request)
    record = ScheduledPostRecord(
        id=None,
        user_id=identity.user_id,
        content=content,
        platform=platform,
        scheduled_time=scheduled_time,
        hashtags=hashtags,
        engagement_prediction=engagement_prediction,
        tone=tone,
    )
    saved = await ScheduledPostDAL(request.app.state.db_initializer).create(record)
    return asdict(saved)


async def list_scheduled_posts(request: Request) -> List[Dict[str, Any]]:
    identity = require_identity(request)
    records = await ScheduledPostDAL(request.app.state.db_initializer).list_for_user(identity.user_id)
    return [asdict(r) for r in records]


async def update_scheduled_post_status(request: Request, post_id: int, status: str) -> Dict[str, Any]:
    identity = require_identity(request)
    updated = await ScheduledPostDAL(request.app.state.db_initializer).update_status(
        post_id, identity.user_id, status
    )
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Scheduled post {post_id} not found")
    return asdict(updated)
