"""Tests for the repograph CLI.

Each test points the workspace at a temporary directory; GitHub is mocked
with ``respx``.
"""

from __future__ import annotations

import httpx
import pytest
import respx
from typer.testing import CliRunner

from repograph.config import settings
from repograph.db import get_connection, init_db
from repograph.db.graphs import get_graph, save_graph

from cli.main import app
from tests.fakes import REPO_PAYLOAD, SMALL_APP_PATHS, make_graph

runner = CliRunner()

_TREE = {
    "truncated": False,
    "tree": [{"path": p, "type": "blob", "size": 120} for p in SMALL_APP_PATHS],
}


@pytest.fixture()
def workspace(tmp_path, monkeypatch):
    """Fresh workspace (and therefore a fresh DB) for each test."""
    monkeypatch.setattr(settings, "workspace_dir", tmp_path)
    return tmp_path


def _seed(**kwargs):  # type: ignore[no-untyped-def]
    conn = get_connection()
    init_db(conn)
    graph = save_graph(conn, make_graph(caller_id="local", **kwargs))
    conn.close()
    return graph


def test_db_init(workspace):
    result = runner.invoke(app, ["db", "init"])
    assert result.exit_code == 0
    assert "Database ready" in result.stdout
    assert (workspace / "graphs.db").exists()


def test_parse_success(workspace):
    with respx.mock:
        respx.get("https://api.github.com/repos/acme/widgets").mock(
            return_value=httpx.Response(200, json=REPO_PAYLOAD)
        )
        respx.get("https://api.github.com/repos/acme/widgets/git/trees/main").mock(
            return_value=httpx.Response(200, json=_TREE)
        )
        result = runner.invoke(app, ["parse", "acme/widgets", "--workspace", "ws-1"])

    assert result.exit_code == 0, result.stdout
    assert "[parse]   5% fetching" in result.stdout
    assert "[parse] 100% done" in result.stdout
    assert "[parse] Repo   : acme/widgets" in result.stdout
    assert "[parse] Files  : 4" in result.stdout
    assert "] 82" in result.stdout

    graph_id = next(
        line.split(":", 1)[1].strip()
        for line in result.stdout.splitlines()
        if line.startswith("[parse] Graph  :")
    )
    conn = get_connection()
    stored = get_graph(conn, graph_id, "local")
    conn.close()
    assert stored is not None
    assert stored.workspace_id == "ws-1"


def test_parse_not_found(workspace):
    with respx.mock:
        respx.get("https://api.github.com/repos/acme/ghost").mock(
            return_value=httpx.Response(404)
        )
        result = runner.invoke(app, ["parse", "acme/ghost"])

    assert result.exit_code == 1
    assert "[parse] Error: Repository \"acme/ghost\" not found" in result.stdout


def test_parse_invalid_url(workspace):
    result = runner.invoke(app, ["parse", "https://gitlab.com/a/b"])
    assert result.exit_code == 1
    assert "[parse] Error:" in result.stdout


def test_list_empty(workspace):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No graphs found" in result.stdout


def test_list_graphs(workspace):
    graph = _seed(name="acme/widgets")
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert graph.id in result.stdout
    assert "acme/widgets" in result.stdout


def test_list_other_caller(workspace):
    _seed()
    result = runner.invoke(app, ["list", "--caller", "someone-else"])
    assert "No graphs found" in result.stdout


def test_show_tree(workspace):
    graph = _seed()
    result = runner.invoke(app, ["show", graph.id])
    assert result.exit_code == 0
    assert "📁 acme/widgets" in result.stdout
    assert "src/" in result.stdout
    assert "App.tsx  [component] c=10 in=1" in result.stdout
    assert "index.ts  [logic] c=6 in=0" in result.stdout


def test_show_summary(workspace):
    graph = _seed()
    result = runner.invoke(app, ["show", graph.id, "--format", "summary"])
    assert result.exit_code == 0
    assert "files=2" in result.stdout
    assert "📁" not in result.stdout


def test_show_unknown_format(workspace):
    graph = _seed()
    result = runner.invoke(app, ["show", graph.id, "--format", "xml"])
    assert result.exit_code == 1


def test_show_missing(workspace):
    result = runner.invoke(app, ["show", "nope"])
    assert result.exit_code == 1
    assert "[show] Graph nope not found." in result.stdout


def test_delete(workspace):
    graph = _seed()
    result = runner.invoke(app, ["delete", graph.id])
    assert result.exit_code == 0
    assert f"[delete] Removed {graph.id}" in result.stdout

    again = runner.invoke(app, ["delete", graph.id])
    assert again.exit_code == 1
