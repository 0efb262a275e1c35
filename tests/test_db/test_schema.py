"""Tests for SQLite schema — idempotency, table/index creation, constraints."""

from __future__ import annotations

import sqlite3

import pytest

from consult_recommender.db.connection import MEMORY_DB, get_connection
from consult_recommender.db.schema import (
    ALL_TABLE_NAMES,
    apply_schema,
    get_existing_indexes,
    get_existing_tables,
)


class TestApplySchema:
    def test_all_tables_created(self, in_memory_db):
        tables = get_existing_tables(in_memory_db)
        for expected_table in ALL_TABLE_NAMES:
            assert expected_table in tables, (
                f"Expected table '{expected_table}' not found in database. "
                f"Found: {tables}"
            )

    def test_idempotent_double_apply(self, in_memory_db):
        """apply_schema() called twice must not raise errors."""
        apply_schema(in_memory_db)
        assert sorted(ALL_TABLE_NAMES) == [
            t for t in get_existing_tables(in_memory_db) if t != "sqlite_sequence"
        ]

    def test_key_indexes_created(self, in_memory_db):
        indexes = get_existing_indexes(in_memory_db)
        for idx in (
            "idx_expert_industries_industry",
            "idx_feedback_user",
            "idx_feedback_recommendation",
        ):
            assert idx in indexes, f"Expected index '{idx}' not found. Found: {indexes}"


class TestConstraints:
    def test_rating_check_on_experts(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO experts (expert_id, name, specialization, rating) "
                "VALUES ('x', 'X', 'Y', 6.0);"
            )

    def test_feedback_action_check(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO recommendation_feedback "
                "(user_id, recommendation_id, action, recorded_at) "
                "VALUES ('u', 'r', 'ignored', '2024-01-01T00:00:00+00:00');"
            )

    def test_feedback_rating_check(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO recommendation_feedback "
                "(user_id, recommendation_id, action, rating, recorded_at) "
                "VALUES ('u', 'r', 'accepted', 0, '2024-01-01T00:00:00+00:00');"
            )

    def test_industry_requires_expert(self, in_memory_db):
        with pytest.raises(sqlite3.IntegrityError):
            in_memory_db.execute(
                "INSERT INTO expert_industries (expert_id, industry) VALUES ('missing', 'DeFi');"
            )


class TestGetConnection:
    def test_fk_enforcement_is_on(self):
        with get_connection(MEMORY_DB) as conn:
            assert conn.execute("PRAGMA foreign_keys;").fetchone()[0] == 1

    def test_creates_parent_dirs(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "test.db"
        with get_connection(str(db_path)) as conn:
            apply_schema(conn)
        assert db_path.exists()

    def test_rollback_on_error(self, tmp_path):
        db_path = str(tmp_path / "rollback.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)

        with pytest.raises(RuntimeError):
            with get_connection(db_path) as conn:
                conn.execute(
                    "INSERT INTO experts (expert_id, name, specialization, rating) "
                    "VALUES ('x', 'X', 'Y', 4.0);"
                )
                raise RuntimeError("boom")

        with get_connection(db_path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM experts;").fetchone()[0] == 0

    def test_read_only_rejects_writes(self, tmp_path):
        db_path = str(tmp_path / "ro.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)

        with pytest.raises(sqlite3.OperationalError):
            with get_connection(db_path, read_only=True) as conn:
                assert conn.execute("SELECT COUNT(*) FROM experts;").fetchone()[0] == 0
                conn.execute(
                    "INSERT INTO experts (expert_id, name, specialization, rating) "
                    "VALUES ('x', 'X', 'Y', 4.0);"
                )

    def test_read_only_missing_file(self, tmp_path):
        db_path = tmp_path / "absent" / "x.db"
        with pytest.raises(sqlite3.OperationalError):
            with get_connection(str(db_path), read_only=True):
                pass
        assert not db_path.parent.exists()
