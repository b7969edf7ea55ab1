from typing import Any, Dict, List

from fastapi import HTTPException, Request

from controllers.session_controller import require_identity
from dal.content_analysis_dal import ContentAnalysisDAL
from models.content_models import Platform
from models.content_records import ContentAnalysisRecord
from services.openai.content_generator import ContentGenerator
from services.openai.errors import GenerationError


def analysis_to_dict(record: ContentAnalysisRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "content": record.content,
        "sentiment": {"label": record.sentiment_label, "score": record.sentiment_score},
        "hashtags": list(record.hashtags),
        "engagement_score": record.engagement_score,
        "created_at": record.created_at,
    }


async def analyze_content(request: Request, content: str) -> Dict[str, Any]:
    """Score a draft post and store the analysis.

    The draft is run through the generator as a Twitter prompt; the reply's
    tone and clarity become the sentiment, and its engagement prediction the
    engagement score.

    Raises:
        HTTPException(400) carrying the generation error code on failure.
    """
    identity = require_identity(request)
    generator: ContentGenerator = request.app.state.content_generator
    try:
        result = await generator.generate(content, Platform.TWITTER.value)
    except GenerationError as exc:
        raise HTTPException(status_code=400, detail={"message": exc.message, "code": exc.code}) from exc

    record = ContentAnalysisRecord(
        id=None,
        user_id=identity.user_id,
        content=content,
        sentiment_label=result.tone,
        sentiment_score=result.quality_metrics.clarity,
        hashtags=list(result.hashtags),
        engagement_score=int(round(result.engagement_prediction)),
    )
    saved = await ContentAnalysisDAL(request.app.state.db_initializer).create(record)
    return analysis_to_dict(saved)


async def list_analyses(request: Request) -> List[Dict[str, Any]]:
    identity = require_identity(request)
    records = await ContentAnalysisDAL(request.app.state.db_initializer).list_for_user(identity.user_id)
    return [analysis_to_dict(r) for r in records]


async def delete_analysis(request: Request, analysis_id: int) -> Dict[str, Any]:
    identity = require_identity(request)
    deleted = await ContentAnalysisDAL(request.app.state.db_initializer).delete(analysis_id, identity.user_id)
    if not deleted:
        raise HTTPException(status_code=404, detail=f"Analysis {analysis_id} not found")
    return {"id": analysis_id, "deleted": True}
