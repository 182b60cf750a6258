"""Database layer package.

Public re-exports so callers can write::

    from repograph.db import get_connection, init_db
"""

from repograph.db.connection import get_connection
from repograph.db.graphs import SqliteGraphStore
from repograph.db.migrations import init_db

__all__ = ["get_connection", "init_db", "SqliteGraphStore"]
