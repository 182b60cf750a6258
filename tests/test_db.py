"""Tests for the database layer.

All tests use an in-memory SQLite database so nothing is written to the
workspace directory.
"""

from __future__ import annotations

import sqlite3

import pytest

from repograph.db.graphs import (
    SqliteGraphStore,
    count_graphs,
    delete_graph,
    get_graph,
    list_graphs,
    save_graph,
    touch_graph,
    update_graph,
)
from repograph.db.migrations import current_version, init_db, migrate

from tests.fakes import make_graph


class TestConnection:
    def test_foreign_keys_enabled(self, conn: sqlite3.Connection) -> None:
        assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1

    def test_rows_by_name(self, conn: sqlite3.Connection) -> None:
        row = conn.execute("SELECT 1 AS one").fetchone()
        assert row["one"] == 1

    def test_init_is_idempotent(self, conn: sqlite3.Connection) -> None:
        init_db(conn)
        init_db(conn)
        tables = {
            r["name"]
            for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        assert {"graphs", "schema_version"} <= tables

    def test_version_starts_at_zero(self, conn: sqlite3.Connection) -> None:
        assert current_version(conn) == 0


class TestMigrate:
    _ADD_BRANCH = [(1, "ALTER TABLE graphs ADD COLUMN branch TEXT")]

    def test_applies_pending_migration(self, conn: sqlite3.Connection) -> None:
        assert migrate(conn, self._ADD_BRANCH) == 1
        assert current_version(conn) == 1
        columns = {r["name"] for r in conn.execute("PRAGMA table_info(graphs)")}
        assert "branch" in columns

    def test_already_applied_is_skipped(self, conn: sqlite3.Connection) -> None:
        migrate(conn, self._ADD_BRANCH)
        # re-running would fail with "duplicate column" if it were applied again
        assert migrate(conn, self._ADD_BRANCH) == 1

    def test_applied_in_version_order(self, conn: sqlite3.Connection) -> None:
        steps = [
            (2, "CREATE INDEX idx_graphs_branch ON graphs (branch)"),
            (1, "ALTER TABLE graphs ADD COLUMN branch TEXT"),
        ]
        assert migrate(conn, steps) == 2

    def test_init_db_keeps_version(self, conn: sqlite3.Connection) -> None:
        migrate(conn, self._ADD_BRANCH)
        init_db(conn)
        assert current_version(conn) == 1


class TestSaveAndGet:
    def test_round_trip(self, conn: sqlite3.Connection) -> None:
        graph = make_graph(workspace_id="ws-1")
        stored = save_graph(conn, graph)

        assert stored == graph
        assert stored.nodes[0].position == (1.0, 2.0, 3.0)
        assert stored.edges[0].source == 0

    def test_missing(self, conn: sqlite3.Connection) -> None:
        assert get_graph(conn, "nope") is None

    def test_scoped_to_caller(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph(caller_id="alice"))
        assert get_graph(conn, graph.id, "alice") is not None
        assert get_graph(conn, graph.id, "bob") is None


class TestListAndCount:
    def test_most_recently_viewed_first(self, conn: sqlite3.Connection) -> None:
        old = save_graph(conn, make_graph(name="a/old", last_viewed_at=100))
        new = save_graph(conn, make_graph(name="a/new", last_viewed_at=200))

        summaries = list_graphs(conn, "alice")

        assert [s["id"] for s in summaries] == [new.id, old.id]
        assert "nodes" not in summaries[0]
        assert "edges" not in summaries[0]

    def test_only_callers_graphs(self, conn: sqlite3.Connection) -> None:
        save_graph(conn, make_graph(caller_id="alice"))
        save_graph(conn, make_graph(caller_id="bob"))
        assert len(list_graphs(conn, "alice")) == 1
        assert count_graphs(conn, "bob") == 1
        assert count_graphs(conn, "carol") == 0


class TestTouchUpdateDelete:
    def test_touch_refreshes_last_viewed(self, conn: sqlite3.Connection, monkeypatch: pytest.MonkeyPatch) -> None:
        graph = save_graph(conn, make_graph(last_viewed_at=100))
        monkeypatch.setattr("repograph.db.graphs.time", lambda: 5000)

        touched = touch_graph(conn, graph.id, "alice")

        assert touched is not None
        assert touched.last_viewed_at == 5000
        assert touched.created_at == 100

    def test_touch_other_caller(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph())
        assert touch_graph(conn, graph.id, "bob") is None

    def test_rename(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph(workspace_id="ws-1"))
        updated = update_graph(conn, graph.id, caller_id="alice", name="Renamed")
        assert updated is not None
        assert updated.name == "Renamed"
        assert updated.workspace_id == "ws-1"

    def test_move_out_of_workspace(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph(workspace_id="ws-1"))
        updated = update_graph(conn, graph.id, workspace_id=None)
        assert updated is not None
        assert updated.workspace_id is None
        assert updated.name == graph.name

    def test_blank_name_rejected(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph())
        with pytest.raises(ValueError):
            update_graph(conn, graph.id, name="   ")

    def test_update_missing(self, conn: sqlite3.Connection) -> None:
        assert update_graph(conn, "nope", name="x") is None

    def test_delete(self, conn: sqlite3.Connection) -> None:
        graph = save_graph(conn, make_graph())
        assert delete_graph(conn, graph.id, "bob") is False
        assert delete_graph(conn, graph.id, "alice") is True
        assert get_graph(conn, graph.id) is None
        assert delete_graph(conn, graph.id) is False


class TestSqliteGraphStore:
    def test_count_and_save(self, conn: sqlite3.Connection) -> None:
        store = SqliteGraphStore(conn)
        assert store.count("alice") == 0
        saved = store.save(make_graph())
        assert store.count("alice") == 1
        assert get_graph(conn, saved.id) == saved
