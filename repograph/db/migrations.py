"""Database initialisation and migration helpers.

``init_db(conn)`` is idempotent and safe to call on an existing database.
``migrate(conn)`` runs incremental schema changes tracked in a version table;
``init_db`` applies any pending ones.
"""

from __future__ import annotations

import sqlite3
from typing import Optional, Sequence

from repograph.config import settings


def init_db(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes.

    Every DDL statement uses ``IF NOT EXISTS`` so calling this repeatedly on
    the same database is safe.
    """
    sql = settings.schema_path.read_text(encoding="utf-8")
    conn.executescript(sql)
    _ensure_version_table(conn)
    migrate(conn)


def _ensure_version_table(conn: sqlite3.Connection) -> None:
    """Create the internal schema-version tracking table if absent."""
    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version  INTEGER PRIMARY KEY,
                applied_at INTEGER DEFAULT (strftime('%s', 'now'))
            )
            """
        )


def current_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 if none applied)."""
    row = conn.execute(
        "SELECT COALESCE(MAX(version), 0) FROM schema_version"
    ).fetchone()
    return row[0] if row else 0


# (version, sql) pairs, applied in order by ``migrate``.
MIGRATIONS: list[tuple[int, str]] = []


def migrate(
    conn: sqlite3.Connection,
    migrations: Optional[Sequence[tuple[int, str]]] = None,
) -> int:
    """Apply every migration newer than :func:`current_version`.

    Returns the schema version after the run.
    """
    applied = current_version(conn)
    for version, sql in sorted(MIGRATIONS if migrations is None else migrations):
        if version > applied:
            with conn:
                conn.execute(sql)
                conn.execute(
                    "INSERT INTO schema_version(version) VALUES (?)", (version,)
                )
            applied = version
    return applied
