"""Tests for consult_recommender.taxonomy.recommendation_taxonomy."""

from __future__ import annotations

import pytest

from consult_recommender.taxonomy.recommendation_taxonomy import (
    PRIORITY_RANK,
    ExperienceLevel,
    FeedbackAction,
    Priority,
    RecommendationType,
)


class TestPriorityRank:
    def test_every_priority_ranked(self):
        assert set(PRIORITY_RANK) == set(Priority)

    def test_order(self):
        assert (
            PRIORITY_RANK[Priority.URGENT]
            > PRIORITY_RANK[Priority.HIGH]
            > PRIORITY_RANK[Priority.MEDIUM]
            > PRIORITY_RANK[Priority.LOW]
        )


class TestEnumValues:
    def test_recommendation_types(self):
        assert {t.value for t in RecommendationType} == {
            "expert", "service", "content", "timing", "strategy",
        }

    def test_experience_levels_are_title_case(self):
        assert [lvl.value for lvl in ExperienceLevel] == ["Beginner", "Intermediate", "Advanced"]

    def test_str_enum_compares_to_str(self):
        assert RecommendationType.EXPERT == "expert"
        assert f"{Priority.HIGH}" == "high"

    def test_unknown_feedback_action(self):
        with pytest.raises(ValueError):
            FeedbackAction("ignored")
