"""
Smart notifications: the top recommendations rendered as dashboard alerts.

Action URLs by recommendation type
----------------------------------
    expert    -> /dashboard/book-consultation
    service   -> /services
    content   -> /resources
    strategy  -> /dashboard/strategy
    other     -> /dashboard
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from consult_recommender.models.profile import UserProfile
from consult_recommender.models.recommendation import AIRecommendation, Notification
from consult_recommender.recommendations.engine import RecommendationEngine
from consult_recommender.recommendations.ranker import top_n
from consult_recommender.taxonomy.recommendation_taxonomy import RecommendationType
from consult_recommender.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_NOTIFICATION_LIMIT = 3

ACTION_URLS: dict[RecommendationType, str] = {
    RecommendationType.EXPERT:   "/dashboard/book-consultation",
    RecommendationType.SERVICE:  "/services",
    RecommendationType.CONTENT:  "/resources",
    RecommendationType.STRATEGY: "/dashboard/strategy",
}

DEFAULT_ACTION_URL = "/dashboard"


def action_url_for(rec: AIRecommendation) -> str:
    return ACTION_URLS.get(rec.type, DEFAULT_ACTION_URL)


def to_notification(rec: AIRecommendation, timestamp: datetime) -> Notification:
    return Notification(
        id=rec.id,
        title=rec.title,
        message=rec.description,
        priority=rec.priority,
        action_url=action_url_for(rec),
        timestamp=timestamp,
    )


def notifications_from(
    recs: list[AIRecommendation],
    timestamp: datetime,
    limit: int = DEFAULT_NOTIFICATION_LIMIT,
) -> list[Notification]:
    """Map the top ``limit`` of an already ranked list to notifications."""
    return [to_notification(rec, timestamp) for rec in top_n(recs, limit)]


class SmartNotificationEngine:
    """Maps the best few recommendations for a user to ``Notification``s."""

    def __init__(
        self,
        engine: RecommendationEngine,
        limit: int = DEFAULT_NOTIFICATION_LIMIT,
    ) -> None:
        self.engine = engine
        self.limit = limit

    async def generate_smart_notifications(
        self,
        profile: UserProfile,
        now: Optional[datetime] = None,
    ) -> list[Notification]:
        now = now or utcnow()
        recs = await self.engine.generate_all_recommendations(profile, now=now)
        notifications = notifications_from(recs, now, self.limit)
        logger.info(
            "Generated %d notifications | user=%s", len(notifications), profile.id
        )
        return notifications
