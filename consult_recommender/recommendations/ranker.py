"""
Recommendation ranker: the one ordering rule every consumer relies on.

Order
-----
1. Priority rank descending (urgent=4, high=3, medium=2, low=1).
2. Confidence descending.
3. Original generation order (the sort is stable).

``top_n`` slices the ranked list; the notification mapper and the insights
bundle both go through it so "top" always means the same thing.
"""

from __future__ import annotations

from collections import defaultdict

from consult_recommender.models.recommendation import AIRecommendation
from consult_recommender.taxonomy.recommendation_taxonomy import PRIORITY_RANK


def sort_key(rec: AIRecommendation) -> tuple[int, float]:
    return (-PRIORITY_RANK[rec.priority], -rec.confidence)


def rank_recommendations(recs: list[AIRecommendation]) -> list[AIRecommendation]:
    """Return a new list ordered by priority, then confidence (both descending)."""
    return sorted(recs, key=sort_key)


def top_n(recs: list[AIRecommendation], n: int) -> list[AIRecommendation]:
    """Return the ``n`` best recommendations (``n <= 0`` gives an empty list)."""
    if n <= 0:
        return []
    return rank_recommendations(recs)[:n]


def group_by_type(recs: list[AIRecommendation]) -> dict[str, list[AIRecommendation]]:
    """Bucket recommendations by type, each bucket in ranked order."""
    by_type: dict[str, list[AIRecommendation]] = defaultdict(list)
    for rec in rank_recommendations(recs):
        by_type[rec.type.value].append(rec)
    return dict(by_type)
