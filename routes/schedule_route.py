"""FastAPI routes for scheduled posts."""

import logging
from typing import List, Literal

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from controllers.schedule_controller import (
    create_scheduled_post,
    list_scheduled_posts,
    update_scheduled_post_status,
)
from models.content_models import Platform

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api/scheduled-posts", tags=["schedule"])


class ScheduledPostPayload(BaseModel):
    content: str = Field(min_length=1)
    platform: Platform
    scheduled_time: str = Field(min_length=1)
    hashtags: List[str] = []
    engagement_prediction: int = Field(default=0, ge=0, le=100)
    tone: str = ""


class StatusPayload(BaseModel):
    status: Literal["pending", "published", "failed", "cancelled"]


@router.get("")
async def get_scheduled_posts_route(request: Request):
    try:
        return await list_scheduled_posts(request)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error fetching scheduled posts: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch scheduled posts")


@router.post("", status_code=201)
async def post_scheduled_post_route(request: Request, payload: ScheduledPostPayload):
    try:
        return await create_scheduled_post(
            request,
            payload.content,
            payload.platform.value,
            payload.scheduled_time,
            payload.hashtags,
            payload.engagement_prediction,
            payload.tone,
        )
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error scheduling post: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to schedule post")


@router.patch("/{post_id}")
async def patch_scheduled_post_route(request: Request, post_id: int, payload: StatusPayload):
    try:
        return await update_scheduled_post_status(request, post_id, payload.status)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error updating scheduled post %s: %s", post_id, exc)
        raise HTTPException(status_code=500, detail="Failed to update scheduled post")
