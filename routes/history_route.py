"""FastAPI routes for generated content history and analyses."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field

from controllers.analysis_controller import analyze_content, delete_analysis, list_analyses
from controllers.history_controller import create_history, delete_history, list_history
from models.content_models import Platform

LOGGER = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


class HistoryPayload(BaseModel):
    content: str = Field(min_length=1)
    platform: Platform
    hashtags: List[str] = []
    engagement_prediction: Optional[float] = Field(default=None, ge=0, le=100)
    tone: Optional[str] = None


class AnalysisPayload(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


@router.get("/content-history")
async def get_history_route(request: Request):
    try:
        return await list_history(request)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error fetching content history: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch content history")


@router.post("/content-history", status_code=201)
async def post_history_route(request: Request, payload: HistoryPayload):
    try:
        return await create_history(
            request,
            payload.content,
            payload.platform.value,
            payload.hashtags,
            payload.engagement_prediction,
            payload.tone,
        )
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error creating content history: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to create content history")


@router.delete("/content-history/{history_id}")
async def delete_history_route(request: Request, history_id: int):
    try:
        return await delete_history(request, history_id)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error deleting content history: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to delete content history")


@router.post("/analyze")
async def analyze_route(request: Request, payload: AnalysisPayload):
    """Analyze a draft post's tone, engagement and hashtags."""
    try:
        return await analyze_content(request, payload.content)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Analysis error: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to analyze content")


@router.get("/analyses")
async def get_analyses_route(request: Request):
    try:
        return await list_analyses(request)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error fetching analyses: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to fetch analyses")


@router.delete("/analyses/{analysis_id}")
async def delete_analysis_route(request: Request, analysis_id: int):
    try:
        return await delete_analysis(request, analysis_id)
    except HTTPException:
        raise
    except Exception as exc:
        LOGGER.error("Error deleting analysis: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to delete analysis")
