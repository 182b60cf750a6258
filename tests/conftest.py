"""Shared fixtures."""

from __future__ import annotations

import sqlite3
from typing import Generator

import pytest

from repograph.db.connection import get_connection
from repograph.db.migrations import init_db


@pytest.fixture()
def conn() -> Generator[sqlite3.Connection, None, None]:
    """In-memory connection with the schema initialised."""
    connection = get_connection(db_path=":memory:")  # type: ignore[arg-type]
    init_db(connection)
    yield connection
    connection.close()
