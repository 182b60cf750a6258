"""FastAPI application factory.

Lifespan
--------
On startup the app opens a single SQLite connection (shared across all
requests via ``request.app.state.db``), initialises the schema, and builds
the process-wide :class:`~repograph.pipeline.limiter.ConcurrencyLimiter`
and :class:`~repograph.pipeline.orchestrator.GraphPipeline`.  On shutdown
it closes the connection cleanly.

Routers
-------
    /graphs   parse (SSE), list, fetch, rename/move, delete
    /health   liveness probe
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from repograph.config import settings
from repograph.db import SqliteGraphStore, get_connection, init_db
from repograph.logging_setup import configure_logging
from repograph.pipeline import ConcurrencyLimiter, GraphPipeline

from repograph.api.routers import graphs as graphs_router
from repograph.api.routers import health as health_router


def attach_db(app: FastAPI, conn) -> None:  # type: ignore[no-untyped-def]
    """Point the app (and its pipeline) at *conn*."""
    app.state.db = conn
    app.state.pipeline = GraphPipeline(app.state.limiter, SqliteGraphStore(conn))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the DB on startup and close it on shutdown."""
    conn = get_connection()
    init_db(conn)
    app.state.limiter = ConcurrencyLimiter(settings.max_concurrent_parses)
    attach_db(app, conn)
    try:
        yield
    finally:
        conn.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    configure_logging(settings.log_level)

    app = FastAPI(
        title="repograph API",
        description=(
            "Turns a GitHub repository's file tree into a 3D dependency graph. "
            "Parsing streams progress as Server-Sent Events; finished graphs "
            "are stored per caller."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(graphs_router.router, prefix="/graphs", tags=["graphs"])
    app.include_router(health_router.router, prefix="/health", tags=["health"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn repograph.api.app:app --reload
app = create_app()
