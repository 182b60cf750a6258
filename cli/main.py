"""repograph CLI: entry-point for parsing and browsing graphs.

Usage:
    python cli/main.py --help

Command groups:
    db       database maintenance
    parse    build a graph from a GitHub repository
    list     list stored graphs
    show     print a stored graph as a directory tree
    delete   remove a stored graph
    serve    run the HTTP API
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from repograph.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
from datetime import datetime
from typing import Optional

import typer

from repograph.config import settings
from repograph.db import SqliteGraphStore, get_connection, init_db
from repograph.db.graphs import delete_graph, get_graph, list_graphs
from repograph.errors import RepoGraphError
from repograph.logging_setup import configure_logging
from repograph.pipeline import ConcurrencyLimiter, GraphPipeline

from cli.rendering import health_bar, render_tree

app = typer.Typer(
    name="repograph",
    help="Build and browse repository dependency graphs.",
    no_args_is_help=True,
)

LOCAL_CALLER = "local"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging("DEBUG" if verbose else settings.log_level)


# ---------------------------------------------------------------------------
# DB commands
# ---------------------------------------------------------------------------
db_app = typer.Typer(help="Database operations.", no_args_is_help=True)
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """Initialise the SQLite database (create tables if they do not exist)."""
    conn = get_connection()
    init_db(conn)
    conn.close()
    typer.echo(f"[db init] Database ready at {settings.db_path}")


# ---------------------------------------------------------------------------
# Graph commands
# ---------------------------------------------------------------------------
@app.command("parse")
def parse(
    repo: str = typer.Argument(..., help="GitHub URL or owner/repo."),
    caller: str = typer.Option(LOCAL_CALLER, "--caller", help="Owner of the stored graph."),
    workspace: Optional[str] = typer.Option(None, "--workspace", help="Workspace id to file the graph under."),
) -> None:
    """Fetch a repository's tree, build its graph and store it."""
    conn = get_connection()
    init_db(conn)
    pipeline = GraphPipeline(
        ConcurrencyLimiter(settings.max_concurrent_parses),
        SqliteGraphStore(conn),
    )

    def _on_progress(stage: str, progress: int, detail: str) -> None:
        typer.echo(f"[parse] {progress:>3}% {stage:<10} {detail}")

    try:
        graph = asyncio.run(pipeline.run(repo, caller, _on_progress, workspace_id=workspace))
    except RepoGraphError as exc:
        typer.echo(f"[parse] Error: {exc.message}")
        raise typer.Exit(code=1)
    finally:
        conn.close()

    typer.echo("")
    typer.echo(f"[parse] Graph  : {graph.id}")
    typer.echo(f"[parse] Repo   : {graph.name}")
    typer.echo(f"[parse] Files  : {graph.file_count}")
    typer.echo(f"[parse] Edges  : {graph.edge_count}")
    typer.echo(f"[parse] Health : {health_bar(graph.health_score)}")


@app.command("list")
def list_cmd(
    caller: str = typer.Option(LOCAL_CALLER, "--caller", help="Whose graphs to list."),
) -> None:
    """List stored graphs, most recently viewed first."""
    conn = get_connection()
    init_db(conn)
    try:
        graphs = list_graphs(conn, caller)
    finally:
        conn.close()

    if not graphs:
        typer.echo("[list] No graphs found.")
        return
    for g in graphs:
        created = datetime.fromtimestamp(g["created_at"]).strftime("%Y-%m-%d %H:%M")
        typer.echo(
            f"  {g['id']}  {g['name']:<30} files={g['file_count']:<6} "
            f"health={g['health_score']:<3} {created}"
        )


@app.command("show")
def show(
    graph_id: str = typer.Argument(..., help="Graph id."),
    caller: str = typer.Option(LOCAL_CALLER, "--caller", help="Owner of the graph."),
    format: str = typer.Option("tree", "--format", help="Output format: tree | summary"),
) -> None:
    """Print a stored graph."""
    conn = get_connection()
    init_db(conn)
    try:
        graph = get_graph(conn, graph_id, caller)
    finally:
        conn.close()

    if graph is None:
        typer.echo(f"[show] Graph {graph_id} not found.")
        raise typer.Exit(code=1)

    typer.echo(f"{graph.name}  files={graph.file_count}  edges={graph.edge_count}")
    typer.echo(f"health {health_bar(graph.health_score)}")
    if format == "summary":
        return
    if format != "tree":
        typer.echo(f"[show] Unknown format {format!r}. Use: tree | summary")
        raise typer.Exit(code=1)
    typer.echo("")
    typer.echo(render_tree(graph.nodes, graph.name))


@app.command("delete")
def delete(
    graph_id: str = typer.Argument(..., help="Graph id."),
    caller: str = typer.Option(LOCAL_CALLER, "--caller", help="Owner of the graph."),
) -> None:
    """Delete a stored graph."""
    conn = get_connection()
    init_db(conn)
    try:
        removed = delete_graph(conn, graph_id, caller)
    finally:
        conn.close()
    if not removed:
        typer.echo(f"[delete] Graph {graph_id} not found.")
        raise typer.Exit(code=1)
    typer.echo(f"[delete] Removed {graph_id}")


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address."),
    port: int = typer.Option(4000, help="Port."),
    reload: bool = typer.Option(False, help="Auto-reload on code changes."),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("repograph.api.app:app", host=host, port=port, reload=reload)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
