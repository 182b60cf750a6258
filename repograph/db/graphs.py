"""CRUD operations for the ``graphs`` table.

A graph row is written once by the pipeline; afterwards only rename, move
(``workspace_id``) and ``last_viewed_at`` bookkeeping touch it.  Node and
edge arrays are stored as JSON blobs.
"""

from __future__ import annotations

import json
import sqlite3
from time import time
from typing import Any, Optional

from repograph.graph.models import Graph, GraphEdge, GraphNode

_SUMMARY_COLUMNS = (
    "id, caller_id, name, repo_owner, repo_name, repo_url, workspace_id, "
    "file_count, edge_count, health_score, created_at, last_viewed_at"
)

_UNSET: Any = object()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_graph(row: sqlite3.Row) -> Graph:
    return Graph(
        id=row["id"],
        caller_id=row["caller_id"],
        name=row["name"],
        repo_owner=row["repo_owner"],
        repo_name=row["repo_name"],
        repo_url=row["repo_url"],
        workspace_id=row["workspace_id"],
        nodes=[GraphNode.from_dict(n) for n in json.loads(row["nodes"] or "[]")],
        edges=[GraphEdge(**e) for e in json.loads(row["edges"] or "[]")],
        file_count=row["file_count"],
        edge_count=row["edge_count"],
        health_score=row["health_score"],
        created_at=row["created_at"],
        last_viewed_at=row["last_viewed_at"],
    )


def _row_to_summary(row: sqlite3.Row) -> dict[str, Any]:
    return {
        "id": row["id"],
        "name": row["name"],
        "repo_owner": row["repo_owner"],
        "repo_name": row["repo_name"],
        "repo_url": row["repo_url"],
        "workspace_id": row["workspace_id"],
        "file_count": row["file_count"],
        "edge_count": row["edge_count"],
        "health_score": row["health_score"],
        "created_at": row["created_at"],
        "last_viewed_at": row["last_viewed_at"],
    }


def _owned_clause(caller_id: Optional[str]) -> tuple[str, tuple[Any, ...]]:
    if caller_id is None:
        return "", ()
    return " AND caller_id = ?", (caller_id,)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def save_graph(conn: sqlite3.Connection, graph: Graph) -> Graph:
    """Insert a finished *graph* and return it as stored."""
    with conn:
        conn.execute(
            """
            INSERT INTO graphs (
                id, caller_id, name, repo_owner, repo_name, repo_url, workspace_id,
                nodes, edges, file_count, edge_count, health_score,
                created_at, last_viewed_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                graph.id, graph.caller_id, graph.name, graph.repo_owner,
                graph.repo_name, graph.repo_url, graph.workspace_id,
                json.dumps([n.to_dict() for n in graph.nodes]),
                json.dumps([e.to_dict() for e in graph.edges]),
                graph.file_count, graph.edge_count, graph.health_score,
                graph.created_at, graph.last_viewed_at,
            ),
        )
    return get_graph(conn, graph.id)  # type: ignore[return-value]


def get_graph(
    conn: sqlite3.Connection,
    graph_id: str,
    caller_id: Optional[str] = None,
) -> Optional[Graph]:
    """Fetch a full graph by id (optionally scoped to *caller_id*)."""
    clause, params = _owned_clause(caller_id)
    row = conn.execute(
        f"SELECT * FROM graphs WHERE id = ?{clause}", (graph_id, *params)  # noqa: S608
    ).fetchone()
    return _row_to_graph(row) if row else None


def list_graphs(conn: sqlite3.Connection, caller_id: str) -> list[dict[str, Any]]:
    """Return summaries (no node/edge arrays) of *caller_id*'s graphs, most recently viewed first."""
    rows = conn.execute(
        f"""
        SELECT {_SUMMARY_COLUMNS}
        FROM   graphs
        WHERE  caller_id = ?
        ORDER  BY last_viewed_at DESC, created_at DESC
        """,  # noqa: S608
        (caller_id,),
    ).fetchall()
    return [_row_to_summary(r) for r in rows]


def count_graphs(conn: sqlite3.Connection, caller_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) FROM graphs WHERE caller_id = ?", (caller_id,)
    ).fetchone()
    return row[0] if row else 0


def touch_graph(
    conn: sqlite3.Connection,
    graph_id: str,
    caller_id: Optional[str] = None,
) -> Optional[Graph]:
    """Refresh ``last_viewed_at`` and return the full graph (``None`` if missing)."""
    clause, params = _owned_clause(caller_id)
    with conn:
        cur = conn.execute(
            f"UPDATE graphs SET last_viewed_at = ? WHERE id = ?{clause}",  # noqa: S608
            (int(time()), graph_id, *params),
        )
    if cur.rowcount == 0:
        return None
    return get_graph(conn, graph_id)


def update_graph(
    conn: sqlite3.Connection,
    graph_id: str,
    *,
    caller_id: Optional[str] = None,
    name: Optional[str] = None,
    workspace_id: Optional[str] = _UNSET,
) -> Optional[Graph]:
    """Rename and/or move a graph.

    ``workspace_id=None`` moves the graph out of its workspace; leaving the
    argument out keeps the current one.  ``last_viewed_at`` is always
    refreshed.  Returns ``None`` if the graph does not exist.

    Raises:
        ValueError: If *name* is given but blank.
    """
    updates: dict[str, Any] = {}
    if name is not None:
        if not name.strip():
            raise ValueError("Graph name must not be empty")
        updates["name"] = name
    if workspace_id is not _UNSET:
        updates["workspace_id"] = workspace_id
    updates["last_viewed_at"] = int(time())

    clause, params = _owned_clause(caller_id)
    set_clause = ", ".join(f"{col} = ?" for col in updates)
    with conn:
        cur = conn.execute(
            f"UPDATE graphs SET {set_clause} WHERE id = ?{clause}",  # noqa: S608
            (*updates.values(), graph_id, *params),
        )
    if cur.rowcount == 0:
        return None
    return get_graph(conn, graph_id)


def delete_graph(
    conn: sqlite3.Connection,
    graph_id: str,
    caller_id: Optional[str] = None,
) -> bool:
    """Delete a graph; ``False`` if nothing matched."""
    clause, params = _owned_clause(caller_id)
    with conn:
        cur = conn.execute(
            f"DELETE FROM graphs WHERE id = ?{clause}", (graph_id, *params)  # noqa: S608
        )
    return cur.rowcount > 0


class SqliteGraphStore:
    """Adapts a connection to the pipeline's ``GraphStore`` protocol."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def count(self, caller_id: str) -> int:
        return count_graphs(self.conn, caller_id)

    def save(self, graph: Graph) -> Graph:
        return save_graph(self.conn, graph)
