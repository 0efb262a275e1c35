"""
Expert directory backed by the local SQLite database.

Queries run on a worker thread (``asyncio.to_thread``) with a fresh
connection per lookup, so the event loop is never blocked and no
connection crosses threads.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from typing import Optional

from consult_recommender.db.connection import get_connection
from consult_recommender.db.repositories.expert_repo import ExpertRepository
from consult_recommender.models.recommendation import Expert
from consult_recommender.providers.base import ExpertDirectory, ProviderUnavailableError

logger = logging.getLogger(__name__)


class SqliteExpertDirectory(ExpertDirectory):
    """Experts from the ``experts`` / ``expert_industries`` tables."""

    source_name = "sqlite_experts"

    def __init__(
        self,
        db_path: str,
        busy_timeout_ms: int = 5000,
        limit: Optional[int] = None,
    ) -> None:
        self.db_path = db_path
        self.busy_timeout_ms = busy_timeout_ms
        self.limit = limit

    async def by_industry(self, industry: str) -> list[Expert]:
        return await asyncio.to_thread(self._query, industry)

    def _query(self, industry: str) -> list[Expert]:
        try:
            with get_connection(
                self.db_path, busy_timeout_ms=self.busy_timeout_ms, read_only=True
            ) as conn:
                experts = ExpertRepository(conn).get_by_industry(industry, limit=self.limit)
        except sqlite3.Error as exc:
            raise ProviderUnavailableError(self.source_name, str(exc)) from exc

        logger.debug(
            "SQLite directory | industry=%s matched=%d", industry, len(experts)
        )
        return experts
