"""
Recommendation feedback — what a client did with a delivered suggestion.

Feedback rows are the one piece of recommendation state that is persisted
(``recommendation_feedback`` table). They reference the per-call
recommendation id as an opaque string; there is no foreign key because
recommendations themselves are never stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from consult_recommender.taxonomy.recommendation_taxonomy import FeedbackAction


class RecommendationFeedback(BaseModel):
    """A single feedback event.

    Attributes:
        feedback_id: Auto-assigned DB PK; ``None`` before insertion.
        user_id: Client who gave the feedback.
        recommendation_id: Id of the recommendation as delivered.
        action: ``accepted``, ``dismissed`` or ``completed``.
        rating: Optional 1–5 usefulness rating.
        feedback: Optional free-text comment.
        recorded_at: UTC time the feedback was received.
    """

    model_config = ConfigDict(frozen=True)

    feedback_id: Optional[int] = None
    user_id: str
    recommendation_id: str
    action: FeedbackAction
    rating: Optional[int] = None
    feedback: Optional[str] = None
    recorded_at: datetime

    @field_validator("rating")
    @classmethod
    def validate_rating(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1 <= v <= 5:
            raise ValueError(f"rating must be in [1, 5], got {v}.")
        return v

    @field_validator("user_id", "recommendation_id")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("identifier must not be empty.")
        return v.strip()

    @field_validator("feedback")
    @classmethod
    def normalize_feedback(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None
