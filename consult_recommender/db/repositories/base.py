"""
Base repository with the SQL helpers shared by the expert and feedback stores.

Repositories receive an open ``sqlite3.Connection`` (from ``get_connection()``)
and never commit on their own — the connection context manager owns the
transaction. SQL is explicit; repositories return pydantic models.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | dict[str, Any]


class BaseRepository:
    """Thin wrapper over a connection that logs every statement at DEBUG."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def execute(self, sql: str, params: Params = ()) -> sqlite3.Cursor:
        logger.debug("SQL: %s | params: %s", sql.strip(), params)
        return self.conn.execute(sql, params)

    def executemany(self, sql: str, params_list: list[Params]) -> sqlite3.Cursor:
        logger.debug("SQL (many): %s | count: %d", sql.strip(), len(params_list))
        return self.conn.executemany(sql, params_list)

    def fetchone(self, sql: str, params: Params = ()) -> Optional[sqlite3.Row]:
        return self.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        return self.execute(sql, params).fetchall()

    def last_insert_rowid(self) -> int:
        """Return the rowid of the last successful INSERT on this connection."""
        row = self.fetchone("SELECT last_insert_rowid() AS rowid;")
        assert row is not None
        return int(row["rowid"])
