"""Content generation domain models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class Platform(str, Enum):
    """Social platforms with dedicated generation guidance."""

    TWITTER = "twitter"
    INSTAGRAM = "instagram"
    LINKEDIN = "linkedin"
    FACEBOOK = "facebook"


@dataclass(frozen=True)
class QualityMetrics:
    """Model-estimated quality scores, each in [0, 100]."""

    clarity: float
    relevance: float
    originality: float
    engagement_potential: float


@dataclass(frozen=True)
class GenerationResult:
    """A fully validated post suggestion returned by the generation provider.

    Attributes:
        content: Post text, whitespace-trimmed and non-empty.
        hashtags: Hashtags in model order, each prefixed with '#'.
        engagement_prediction: Predicted engagement score in [0, 100].
        tone: Short description of the post tone.
        quality_metrics: Clarity, relevance, originality and engagement scores.
    """

    content: str
    hashtags: Tuple[str, ...]
    engagement_prediction: float
    tone: str
    quality_metrics: QualityMetrics

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation."""
        data = asdict(self)
        data["hashtags"] = list(self.hashtags)
        return data
