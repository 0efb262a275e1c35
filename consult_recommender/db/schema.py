"""
SQLite schema DDL — all CREATE TABLE and CREATE INDEX statements.

All statements use ``IF NOT EXISTS`` so ``apply_schema()`` is idempotent.

Tables:
  1. experts                  (no FKs) — consultant directory
  2. expert_industries        (→ experts) — one row per (expert, industry)
  3. recommendation_feedback  (no FKs) — client responses to recommendations

Recommendations themselves are never persisted; feedback references them by
their opaque per-call id.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_EXPERTS = """
CREATE TABLE IF NOT EXISTS experts (
    expert_id       TEXT    PRIMARY KEY,
    name            TEXT    NOT NULL,
    specialization  TEXT    NOT NULL,
    rating          REAL    NOT NULL CHECK (rating BETWEEN 0 AND 5),
    is_active       INTEGER NOT NULL DEFAULT 1,
    created_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    updated_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now'))
);
"""

_DDL_EXPERT_INDUSTRIES = """
CREATE TABLE IF NOT EXISTS expert_industries (
    expert_id   TEXT NOT NULL REFERENCES experts(expert_id) ON DELETE CASCADE,
    industry    TEXT NOT NULL COLLATE NOCASE,
    PRIMARY KEY (expert_id, industry)
);
CREATE INDEX IF NOT EXISTS idx_expert_industries_industry
    ON expert_industries (industry);
"""

_DDL_RECOMMENDATION_FEEDBACK = """
CREATE TABLE IF NOT EXISTS recommendation_feedback (
    feedback_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id            TEXT    NOT NULL,
    recommendation_id  TEXT    NOT NULL,
    action             TEXT    NOT NULL
                       CHECK (action IN ('accepted', 'dismissed', 'completed')),
    rating             INTEGER CHECK (rating IS NULL OR rating BETWEEN 1 AND 5),
    feedback           TEXT,
    recorded_at        TEXT    NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_feedback_user
    ON recommendation_feedback (user_id, recorded_at);
CREATE INDEX IF NOT EXISTS idx_feedback_recommendation
    ON recommendation_feedback (recommendation_id);
"""

_ALL_DDL: list[str] = [
    _DDL_EXPERTS,
    _DDL_EXPERT_INDUSTRIES,
    _DDL_RECOMMENDATION_FEEDBACK,
]

ALL_TABLE_NAMES: list[str] = [
    "experts",
    "expert_industries",
    "recommendation_feedback",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Apply all DDL statements to ``conn``.

    Idempotent — safe to call on an already-initialized database.

    Args:
        conn: An open ``sqlite3.Connection`` (FK enforcement should be ON).
    """
    logger.debug("Applying schema to database...")

    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d tables created/verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    """Split a multi-statement DDL block on semicolons."""
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the user table names present in the database, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row[0] for row in rows]


def get_existing_indexes(conn: sqlite3.Connection) -> list[str]:
    """Return the explicitly created index names, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'index' AND name NOT LIKE 'sqlite_%' ORDER BY name;"
    ).fetchall()
    return [row[0] for row in rows]
