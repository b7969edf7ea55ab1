"""Helpers to extract and validate chat completion outputs."""

import json
import math
from typing import Any, List

from models.content_models import GenerationResult, QualityMetrics
from services.openai.errors import EMPTY_RESPONSE, VALIDATION_ERROR, GenerationError

METRIC_MIN = 0
METRIC_MAX = 100


def extract_message_text(response: Any) -> str:
    """Return the first choice's message content or raise EMPTY_RESPONSE."""
    choices = getattr(response, "choices", None) or []
    message = getattr(choices[0], "message", None) if choices else None
    content = getattr(message, "content", None) if message else None
    if not content:
        raise GenerationError("No content generated from OpenAI", EMPTY_RESPONSE)
    return content


def validate_string(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise GenerationError(f"Invalid {field}: must be a non-empty string", VALIDATION_ERROR)
    return value.strip()


def validate_hashtags(hashtags: Any) -> List[str]:
    """Return hashtags trimmed and prefixed with '#'."""
    if not isinstance(hashtags, list):
        raise GenerationError("Invalid hashtags: must be an array", VALIDATION_ERROR)
    normalized = []
    for tag in hashtags:
        if not isinstance(tag, str) or not tag.strip():
            raise GenerationError(
                "Invalid hashtag: each hashtag must be a non-empty string", VALIDATION_ERROR
            )
        tag = tag.strip()
        normalized.append(tag if tag.startswith("#") else f"#{tag}")
    return normalized


def validate_number(value: Any, field: str, minimum: float = METRIC_MIN, maximum: float = METRIC_MAX) -> float:
    """Coerce a metric to a number and check it lies in [minimum, maximum].

    Numeric strings such as "85" are accepted; booleans, None and blank
    strings are not.
    """
    error = GenerationError(
        f"Invalid {field}: must be a number between {minimum} and {maximum}", VALIDATION_ERROR
    )
    if isinstance(value, bool) or value is None:
        raise error
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise error from None
    if math.isnan(number) or number < minimum or number > maximum:
        raise error
    return int(number) if number.is_integer() else number


def parse_generation_result(text: str) -> GenerationResult:
    """Parse a JSON reply into a fully validated GenerationResult."""
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GenerationError(f"Invalid response: not valid JSON ({exc.msg})", VALIDATION_ERROR) from exc
    if not isinstance(payload, dict):
        raise GenerationError("Invalid response: expected a JSON object", VALIDATION_ERROR)

    metrics = payload.get("quality_metrics")
    if not isinstance(metrics, dict):
        metrics = {}

    return GenerationResult(
        content=validate_string(payload.get("content"), "content"),
        hashtags=tuple(validate_hashtags(payload.get("hashtags"))),
        engagement_prediction=validate_number(payload.get("engagement_prediction"), "engagement_prediction"),
        tone=validate_string(payload.get("tone"), "tone"),
        quality_metrics=QualityMetrics(
            clarity=validate_number(metrics.get("clarity"), "clarity"),
            relevance=validate_number(metrics.get("relevance"), "relevance"),
            originality=validate_number(metrics.get("originality"), "originality"),
            engagement_potential=validate_number(metrics.get("engagement_potential"), "engagement_potential"),
        ),
    )
