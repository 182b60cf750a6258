"""Graph endpoints, including the streaming parse.

Routes
------
POST   /graphs/parse   Body: {"repo_url": "...", "workspace_id": "..."}  (SSE)
GET    /graphs         Summaries of the caller's graphs
GET    /graphs/{id}    Full graph; refreshes ``last_viewed_at``
PATCH  /graphs/{id}    Rename and/or move to another workspace
DELETE /graphs/{id}    Remove a graph

The caller is identified by the ``X-Caller-Id`` header; authentication
happens upstream of this service.

SSE event format
----------------
Each frame names its event and carries a JSON object::

    event: progress
    data: {"stage": "fetching", "progress": 15, "detail": "Loading file tree..."}

    event: complete
    data: {"graph": {...}}

    event: error
    data: {"message": "...", "code": "rate_limited", "retryable": true}
"""

from __future__ import annotations

import uuid
from typing import Any, AsyncIterator, Optional

from fastapi import APIRouter, Header, HTTPException, Request, Response
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from repograph.db.graphs import delete_graph, list_graphs, touch_graph, update_graph
from repograph.pipeline.orchestrator import GraphPipeline, stream_pipeline

router = APIRouter()

DEFAULT_CALLER = "anonymous"


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ParseRequest(BaseModel):
    repo_url: str = Field(..., min_length=1)
    workspace_id: Optional[str] = None


class GraphUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    workspace_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _require_uuid(graph_id: str) -> str:
    try:
        uuid.UUID(graph_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid graph ID") from None
    return graph_id


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Graph not found")


async def _parse_sse_generator(
    pipeline: GraphPipeline,
    body: ParseRequest,
    caller_id: str,
) -> AsyncIterator[str]:
    async for event in stream_pipeline(
        pipeline, body.repo_url, caller_id, workspace_id=body.workspace_id
    ):
        yield event.to_sse()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/parse")
async def parse_graph(
    body: ParseRequest,
    request: Request,
    x_caller_id: str = Header(DEFAULT_CALLER),
) -> StreamingResponse:
    """Build a graph for ``repo_url`` and stream progress as SSE.

    Every stream ends with exactly one ``complete`` or ``error`` event.
    """
    pipeline: GraphPipeline = request.app.state.pipeline
    return StreamingResponse(
        _parse_sse_generator(pipeline, body, x_caller_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",   # disable nginx proxy buffering
        },
    )


@router.get("", response_model=list[dict[str, Any]])
def list_graphs_endpoint(
    request: Request,
    x_caller_id: str = Header(DEFAULT_CALLER),
) -> list[dict[str, Any]]:
    """Return the caller's graphs, most recently viewed first."""
    return list_graphs(request.app.state.db, x_caller_id)


@router.get("/{graph_id}", response_model=dict[str, Any])
def get_graph_endpoint(
    graph_id: str,
    request: Request,
    x_caller_id: str = Header(DEFAULT_CALLER),
) -> dict[str, Any]:
    """Return the full graph and mark it as viewed."""
    graph = touch_graph(request.app.state.db, _require_uuid(graph_id), x_caller_id)
    if graph is None:
        raise _not_found()
    return graph.to_dict()


@router.patch("/{graph_id}", response_model=dict[str, Any])
def update_graph_endpoint(
    graph_id: str,
    body: GraphUpdate,
    request: Request,
    x_caller_id: str = Header(DEFAULT_CALLER),
) -> dict[str, Any]:
    """Rename a graph or move it to another workspace (``null`` removes it)."""
    changes: dict[str, Any] = {}
    if body.name is not None:
        changes["name"] = body.name
    if "workspace_id" in body.model_fields_set:
        changes["workspace_id"] = body.workspace_id

    try:
        graph = update_graph(
            request.app.state.db, _require_uuid(graph_id), caller_id=x_caller_id, **changes
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if graph is None:
        raise _not_found()
    return graph.summary()


@router.delete("/{graph_id}", status_code=204)
def delete_graph_endpoint(
    graph_id: str,
    request: Request,
    x_caller_id: str = Header(DEFAULT_CALLER),
) -> Response:
    if not delete_graph(request.app.state.db, _require_uuid(graph_id), x_caller_id):
        raise _not_found()
    return Response(status_code=204)
