"""
Repository for the consultant directory — ``experts`` + ``expert_industries``.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Optional

from consult_recommender.db.repositories.base import BaseRepository
from consult_recommender.models.recommendation import Expert

logger = logging.getLogger(__name__)


class ExpertRepository(BaseRepository):
    """Read/write access to active experts and their industries."""

    def upsert(self, expert: Expert) -> str:
        """Insert or update an expert and replace its industry tags.

        Args:
            expert: The ``Expert`` to persist.

        Returns:
            The ``expert_id``.
        """
        self.execute(
            """
            INSERT INTO experts (expert_id, name, specialization, rating, is_active, updated_at)
            VALUES (?, ?, ?, ?, 1, strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
            ON CONFLICT(expert_id) DO UPDATE SET
                name           = excluded.name,
                specialization = excluded.specialization,
                rating         = excluded.rating,
                is_active      = 1,
                updated_at     = excluded.updated_at;
            """,
            (expert.id, expert.name, expert.specialization, expert.rating),
        )
        self.execute("DELETE FROM expert_industries WHERE expert_id = ?;", (expert.id,))
        industries = sorted({i.strip() for i in expert.industries if i.strip()}, key=str.lower)
        if industries:
            self.executemany(
                "INSERT OR IGNORE INTO expert_industries (expert_id, industry) VALUES (?, ?);",
                [(expert.id, industry) for industry in industries],
            )
        return expert.id

    def deactivate(self, expert_id: str) -> bool:
        """Hide an expert from lookups. Returns ``True`` if a row was updated."""
        cur = self.execute(
            "UPDATE experts SET is_active = 0, "
            "updated_at = strftime('%Y-%m-%dT%H:%M:%SZ', 'now') WHERE expert_id = ?;",
            (expert_id,),
        )
        return cur.rowcount > 0

    def get_by_id(self, expert_id: str) -> Optional[Expert]:
        row = self.fetchone("SELECT * FROM experts WHERE expert_id = ?;", (expert_id,))
        return self._row_to_model(row) if row else None

    def get_by_industry(self, industry: str, limit: Optional[int] = None) -> list[Expert]:
        """Return active experts tagged with ``industry`` (case-insensitive).

        Ordered by rating descending, then name ascending for stable output.
        """
        sql = """
            SELECT e.*
            FROM experts e
            JOIN expert_industries ei ON ei.expert_id = e.expert_id
            WHERE ei.industry = ? COLLATE NOCASE
              AND e.is_active = 1
            ORDER BY e.rating DESC, e.name ASC
        """
        params: tuple = (industry.strip(),)
        if limit is not None:
            sql += " LIMIT ?"
            params = (industry.strip(), limit)
        return [self._row_to_model(r) for r in self.fetchall(sql, params)]

    def list_active(self) -> list[Expert]:
        rows = self.fetchall(
            "SELECT * FROM experts WHERE is_active = 1 ORDER BY rating DESC, name ASC;"
        )
        return [self._row_to_model(r) for r in rows]

    def _industries_for(self, expert_id: str) -> list[str]:
        rows = self.fetchall(
            "SELECT industry FROM expert_industries WHERE expert_id = ? "
            "ORDER BY industry COLLATE NOCASE;",
            (expert_id,),
        )
        return [r["industry"] for r in rows]

    def _row_to_model(self, row: sqlite3.Row) -> Expert:
        return Expert(
            id=row["expert_id"],
            name=row["name"],
            specialization=row["specialization"],
            rating=float(row["rating"]),
            industries=self._industries_for(row["expert_id"]),
        )
