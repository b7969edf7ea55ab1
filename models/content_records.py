from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ContentHistoryRecord:
    """In-memory representation of a row in the CONTENT_HISTORY table.

    Attributes:
        id: Primary key (None for new records).
        user_id: Owner of the generated post.
        content: Generated post text.
        platform: Platform the post was generated for.
        hashtags: Hashtags attached to the post.
        engagement_prediction: Optional predicted engagement score.
        tone: Optional tone description.
        generated_at: ISO-8601 timestamp of generation.
    """

    id: Optional[int]
    user_id: int
    content: str
    platform: str
    hashtags: List[str] = field(default_factory=list)
    engagement_prediction: Optional[int] = None
    tone: Optional[str] = None
    generated_at: Optional[str] = None


@dataclass
class ContentAnalysisRecord:
    """Row in the CONTENT_ANALYSIS table.

    `sentiment_label` and `sentiment_score` are exposed together as the
    `sentiment` object in API responses.
    """

    id: Optional[int]
    user_id: int
    content: str
    sentiment_label: str
    sentiment_score: float
    hashtags: List[str]
    engagement_score: int
    created_at: Optional[str] = None


@dataclass
class ScheduledPostRecord:
    """Row in the SCHEDULED_POST table."""

    id: Optional[int]
    user_id: int
    content: str
    platform: str
    scheduled_time: str
    status: str = "pending"
    hashtags: List[str] = field(default_factory=list)
    engagement_prediction: int = 0
    tone: str = ""
    created_at: Optional[str] = None


@dataclass
class UserSettingsRecord:
    user_id: int
    theme: str = "system"
    email_notifications: bool = True
    push_notifications: bool = True
    weekly_digest: bool = True
    content_language: str = "en"
    auto_schedule: bool = False
