"""
Tests for consult_recommender/recommendations/notifications.py.

What we test
------------
  - At most ``limit`` notifications (default 3), in ranked order.
  - Fields map from the recommendation: id, title, message, priority.
  - type is always "recommendation"; timestamp is the reference time.
  - action_url per recommendation type, with /dashboard as the fallback.
  - notifications_from() maps an existing ranked list without re-running.
"""

from __future__ import annotations

import asyncio

import pytest

from consult_recommender.models.recommendation import AIRecommendation
from consult_recommender.recommendations.notifications import (
    DEFAULT_ACTION_URL,
    SmartNotificationEngine,
    notifications_from,
    action_url_for,
)
from consult_recommender.taxonomy.recommendation_taxonomy import Priority, RecommendationType


def _rec(rtype: RecommendationType) -> AIRecommendation:
    return AIRecommendation(
        id=f"{rtype.value}-1",
        type=rtype,
        title="t",
        description="d",
        confidence=0.5,
        reasoning=[],
        priority=Priority.LOW,
    )


class TestActionUrl:
    @pytest.mark.parametrize(
        "rtype, url",
        [
            (RecommendationType.EXPERT, "/dashboard/book-consultation"),
            (RecommendationType.SERVICE, "/services"),
            (RecommendationType.CONTENT, "/resources"),
            (RecommendationType.STRATEGY, "/dashboard/strategy"),
            (RecommendationType.TIMING, "/dashboard"),
        ],
    )
    def test_url_per_type(self, rtype, url) -> None:
        assert action_url_for(_rec(rtype)) == url

    def test_fallback_constant(self) -> None:
        assert DEFAULT_ACTION_URL == "/dashboard"


class TestSmartNotifications:
    def test_top_three_in_ranked_order(self, make_engine, full_profile, q4_now) -> None:
        engine = make_engine(favorable=True, market_confidence=0.85)
        notifier = SmartNotificationEngine(engine)
        notifications = asyncio.run(notifier.generate_smart_notifications(full_profile, now=q4_now))
        recs = asyncio.run(engine.generate_all_recommendations(full_profile, now=q4_now))

        assert len(notifications) == 3
        assert [n.id for n in notifications] == [r.id for r in recs[:3]]
        assert [n.action_url for n in notifications] == [
            "/dashboard/book-consultation",  # expert-industry
            "/dashboard",                    # timing-market
            "/dashboard/strategy",           # strategy-risk
        ]

    def test_fields_mapped_from_recommendation(self, make_engine, minimal_profile, summer_now) -> None:
        engine = make_engine(favorable=False)
        notifications = asyncio.run(
            SmartNotificationEngine(engine).generate_smart_notifications(
                minimal_profile, now=summer_now
            )
        )
        first = notifications[0]
        assert first.title == "Risk Mitigation Strategy"
        assert first.message.startswith("Identified potential risks")
        assert first.type == "recommendation"
        assert first.priority == Priority.HIGH
        assert first.timestamp == summer_now

    def test_fewer_recommendations_than_limit(self, make_engine, minimal_profile, summer_now) -> None:
        notifier = SmartNotificationEngine(make_engine(favorable=False), limit=10)
        notifications = asyncio.run(
            notifier.generate_smart_notifications(minimal_profile, now=summer_now)
        )
        assert len(notifications) == 3

    def test_zero_limit(self, make_engine, full_profile, q4_now) -> None:
        notifier = SmartNotificationEngine(make_engine(), limit=0)
        assert asyncio.run(notifier.generate_smart_notifications(full_profile, now=q4_now)) == []


class TestNotificationsFrom:
    def test_maps_head_of_list(self, q4_now) -> None:
        recs = [_rec(RecommendationType.EXPERT), _rec(RecommendationType.CONTENT), _rec(RecommendationType.TIMING)]
        notifications = notifications_from(recs, q4_now, limit=2)
        assert [n.id for n in notifications] == ["expert-1", "content-1"]
        assert [n.action_url for n in notifications] == ["/dashboard/book-consultation", "/resources"]
        assert all(n.timestamp == q4_now for n in notifications)
