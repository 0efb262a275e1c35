"""
Repository for recommendation feedback — insert and fetch operations.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Optional

from consult_recommender.db.repositories.base import BaseRepository
from consult_recommender.models.feedback import RecommendationFeedback
from consult_recommender.taxonomy.recommendation_taxonomy import FeedbackAction

logger = logging.getLogger(__name__)


class FeedbackRepository(BaseRepository):
    """Read/write access to the ``recommendation_feedback`` table."""

    def insert(self, feedback: RecommendationFeedback) -> int:
        """Insert a feedback event and return its ``feedback_id``."""
        self.execute(
            """
            INSERT INTO recommendation_feedback (
                user_id, recommendation_id, action, rating, feedback, recorded_at
            ) VALUES (?, ?, ?, ?, ?, ?);
            """,
            (
                feedback.user_id,
                feedback.recommendation_id,
                feedback.action.value,
                feedback.rating,
                feedback.feedback,
                feedback.recorded_at.isoformat(),
            ),
        )
        feedback_id = self.last_insert_rowid()
        logger.info(
            "Feedback recorded | id=%d user=%s rec=%s action=%s",
            feedback_id, feedback.user_id, feedback.recommendation_id, feedback.action,
        )
        return feedback_id

    def get_by_id(self, feedback_id: int) -> Optional[RecommendationFeedback]:
        row = self.fetchone(
            "SELECT * FROM recommendation_feedback WHERE feedback_id = ?;",
            (feedback_id,),
        )
        return _row_to_model(row) if row else None

    def list_for_user(self, user_id: str, limit: int = 50) -> list[RecommendationFeedback]:
        """Most recent feedback first."""
        rows = self.fetchall(
            """
            SELECT * FROM recommendation_feedback
            WHERE user_id = ?
            ORDER BY recorded_at DESC, feedback_id DESC
            LIMIT ?;
            """,
            (user_id, limit),
        )
        return [_row_to_model(r) for r in rows]

    def list_for_recommendation(self, recommendation_id: str) -> list[RecommendationFeedback]:
        rows = self.fetchall(
            """
            SELECT * FROM recommendation_feedback
            WHERE recommendation_id = ?
            ORDER BY recorded_at ASC, feedback_id ASC;
            """,
            (recommendation_id,),
        )
        return [_row_to_model(r) for r in rows]

    def count_by_action(self, user_id: Optional[str] = None) -> dict[str, int]:
        """Return ``{action: count}``, optionally restricted to one user."""
        sql = "SELECT action, COUNT(*) AS n FROM recommendation_feedback"
        params: tuple = ()
        if user_id is not None:
            sql += " WHERE user_id = ?"
            params = (user_id,)
        sql += " GROUP BY action;"
        return {r["action"]: int(r["n"]) for r in self.fetchall(sql, params)}


def _row_to_model(row: sqlite3.Row) -> RecommendationFeedback:
    return RecommendationFeedback(
        feedback_id=row["feedback_id"],
        user_id=row["user_id"],
        recommendation_id=row["recommendation_id"],
        action=FeedbackAction(row["action"]),
        rating=row["rating"],
        feedback=row["feedback"],
        recorded_at=datetime.fromisoformat(row["recorded_at"]),
    )
