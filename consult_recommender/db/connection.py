"""
SQLite connection management.

``get_connection()`` is a context manager that:
  - Enables foreign key enforcement (OFF by default in SQLite).
  - Optionally enables WAL journal mode so CLI reads do not block seeding.
  - Sets a busy timeout to handle lock contention gracefully.
  - Uses ``sqlite3.Row`` factory so rows behave like dicts.
  - Commits on clean exit, rolls back on exception.

``open_from_config()`` applies the ``[database]`` section of ``AppConfig``.

Usage::

    from consult_recommender.db.connection import get_connection

    with get_connection("data/db/consult_recommender.db") as conn:
        ExpertRepository(conn).upsert(expert)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Generator, Optional

if TYPE_CHECKING:
    from consult_recommender.config import AppConfig

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
    read_only: bool = False,
) -> Generator[sqlite3.Connection, None, None]:
    """Context manager yielding a configured SQLite connection.

    The database file (and any parent directories) are created if they do
    not already exist, unless ``read_only`` is set: then the file must
    already exist and nothing is created on disk.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.
        wal_mode: If ``True``, enable WAL journal mode (ignored when read-only).
        busy_timeout_ms: Milliseconds to wait on a locked database before
            raising ``OperationalError``.
        read_only: Open with ``mode=ro``.

    Yields:
        An open, configured ``sqlite3.Connection``.

    Raises:
        sqlite3.OperationalError: If the database cannot be opened or is locked.
    """
    timeout = busy_timeout_ms / 1000
    if db_path == MEMORY_DB:
        conn = sqlite3.connect(db_path, timeout=timeout)
    elif read_only:
        uri = f"{Path(db_path).resolve().as_uri()}?mode=ro"
        conn = sqlite3.connect(uri, timeout=timeout, uri=True)
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    logger.debug("Opened SQLite connection: %s (read_only=%s)", db_path, read_only)

    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        if wal_mode and not read_only and db_path != MEMORY_DB:
            conn.execute("PRAGMA journal_mode = WAL;")

        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()


def open_from_config(
    config: "AppConfig",
    db_path: Optional[str] = None,
):
    """Return ``get_connection()`` bound to the ``[database]`` settings.

    Args:
        config: Application config.
        db_path: Optional override for ``config.database.db_path``.
    """
    return get_connection(
        db_path or config.database.db_path,
        wal_mode=config.database.wal_mode,
        busy_timeout_ms=config.database.busy_timeout_ms,
    )
