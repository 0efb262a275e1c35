"""Tests for client profile and feedback models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from consult_recommender.models.feedback import RecommendationFeedback
from consult_recommender.models.profile import AccountRecord, ConsultationRecord, UserProfile
from consult_recommender.taxonomy.recommendation_taxonomy import FeedbackAction

_NOW = datetime(2024, 11, 15, tzinfo=timezone.utc)


class TestConsultationRecord:
    def test_type_is_stripped(self):
        rec = ConsultationRecord(id="1", type="  defi ", rating=4, date=_NOW, expert_id="e")
        assert rec.type == "defi"

    def test_empty_type_rejected(self):
        with pytest.raises(ValidationError, match="type must not be empty"):
            ConsultationRecord(id="1", type="  ", rating=4, date=_NOW, expert_id="e")

    @pytest.mark.parametrize("rating", [-1, 5.5])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError, match="rating"):
            ConsultationRecord(id="1", type="defi", rating=rating, date=_NOW, expert_id="e")


class TestUserProfile:
    def test_minimal(self):
        profile = UserProfile(id="u1", role="CLIENT")
        assert profile.consultation_history == []
        assert profile.industry is None
        assert profile.budget is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError, match="id must not be empty"):
            UserProfile(id=" ", role="CLIENT")

    def test_negative_budget_rejected(self):
        with pytest.raises(ValidationError, match="budget"):
            UserProfile(id="u1", role="CLIENT", budget=-1)

    def test_frozen(self):
        profile = UserProfile(id="u1", role="CLIENT")
        with pytest.raises(ValidationError):
            profile.industry = "DeFi"


class TestAccountRecord:
    def test_defaults(self):
        account = AccountRecord(id="u1", role="CLIENT", created_at=_NOW)
        assert account.email == ""
        assert account.subscription_tier is None


class TestRecommendationFeedback:
    def test_valid(self):
        fb = RecommendationFeedback(
            user_id=" u1 ",
            recommendation_id="timing-market-1",
            action="completed",
            rating=4,
            feedback="  ",
            recorded_at=_NOW,
        )
        assert fb.user_id == "u1"
        assert fb.action == FeedbackAction.COMPLETED
        assert fb.feedback is None
        assert fb.feedback_id is None

    def test_unknown_action(self):
        with pytest.raises(ValidationError):
            RecommendationFeedback(
                user_id="u1", recommendation_id="r", action="ignored", recorded_at=_NOW
            )

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError, match="rating"):
            RecommendationFeedback(
                user_id="u1", recommendation_id="r", action="accepted",
                rating=rating, recorded_at=_NOW,
            )

    def test_empty_recommendation_id(self):
        with pytest.raises(ValidationError, match="identifier"):
            RecommendationFeedback(
                user_id="u1", recommendation_id="", action="accepted", recorded_at=_NOW
            )
