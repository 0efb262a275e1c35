"""
Insights bundle: recommendations and/or notifications plus a profile summary.

``kind`` selects what is computed:

    recommendations   ranked recommendations only
    notifications     top-N notifications only
    all               both (the default)

The engine runs once per report; notifications are the top of the same
ranked list. The part not requested is ``None``.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from consult_recommender.models.profile import UserProfile
from consult_recommender.models.recommendation import AIRecommendation, Notification
from consult_recommender.recommendations.engine import RecommendationEngine
from consult_recommender.recommendations.notifications import (
    DEFAULT_NOTIFICATION_LIMIT,
    notifications_from,
)
from consult_recommender.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

InsightsKind = Literal["recommendations", "notifications", "all"]

INSIGHTS_KINDS: tuple[str, ...] = ("recommendations", "notifications", "all")


class ProfileSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    role: str
    industry: Optional[str] = None
    experience: Optional[str] = None
    consultation_count: int = 0

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "ProfileSummary":
        return cls(
            id=profile.id,
            role=profile.role,
            industry=profile.industry,
            experience=profile.experience,
            consultation_count=len(profile.consultation_history),
        )


class InsightsReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    recommendations: Optional[list[AIRecommendation]] = None
    notifications: Optional[list[Notification]] = None
    profile_summary: ProfileSummary
    generated_at: datetime


async def build_insights(
    engine: RecommendationEngine,
    profile: UserProfile,
    kind: InsightsKind = "all",
    now: Optional[datetime] = None,
    notification_limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> InsightsReport:
    """Compute the requested insights for one user.

    Args:
        engine: Recommendation engine.
        profile: Client profile.
        kind: ``"recommendations"``, ``"notifications"`` or ``"all"``.
        now: Reference time shared by every part of the report.
        notification_limit: Number of notifications when they are requested.

    Returns:
        ``InsightsReport``.

    Raises:
        ValueError: If ``kind`` is not one of ``INSIGHTS_KINDS``.
    """
    if kind not in INSIGHTS_KINDS:
        raise ValueError(f"kind must be one of {INSIGHTS_KINDS}, got {kind!r}.")

    now = now or utcnow()
    recommendations: Optional[list[AIRecommendation]] = None
    notifications: Optional[list[Notification]] = None

    recs = await engine.generate_all_recommendations(profile, now=now)

    if kind in ("recommendations", "all"):
        recommendations = recs
    if kind in ("notifications", "all"):
        notifications = notifications_from(recs, now, notification_limit)

    logger.debug("Insights built | user=%s kind=%s", profile.id, kind)
    return InsightsReport(
        recommendations=recommendations,
        notifications=notifications,
        profile_summary=ProfileSummary.from_profile(profile),
        generated_at=now,
    )
