"""Pipeline orchestration: fetch -> transform -> persist, with limits.

``GraphPipeline.run`` is the single entry-point.  It owns the three
policies no pure stage can enforce on its own:

- a per-caller concurrency ceiling (via an injected
  :class:`~repograph.pipeline.limiter.ConcurrencyLimiter`),
- a wall-clock timeout racing the whole run (cancelling any in-flight
  GitHub request),
- a hard file-count ceiling (oversized repositories are rejected, never
  truncated).

It is also the only place that logs failures and turns them into the
terminal ``error`` event of the progress stream (see :func:`stream_pipeline`).

Progress checkpoints
--------------------
====  =====================================
 5    start (repository reference parsed)
15    metadata / tree fetch
30    filtering the tree
40    before the transform
40-90 transform sub-stages, scaled
92    before persistence
100   done
====  =====================================
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
import uuid
from typing import AsyncIterator, Callable, Optional, Protocol

import httpx

from repograph.config import Settings, settings as default_settings
from repograph.errors import (
    FileLimitError,
    GraphQuotaError,
    PipelineError,
    PipelineTimeoutError,
    RepoGraphError,
)
from repograph.github.fetcher import build_client, fetch_repo_tree
from repograph.github.url import parse_repo_url
from repograph.graph.models import Graph
from repograph.graph.transformer import transform_repo_to_graph
from repograph.pipeline.limiter import ConcurrencyLimiter
from repograph.pipeline.progress import (
    ProgressCallback,
    ProgressChannel,
    ProgressEvent,
    ProgressReporter,
)

logger = logging.getLogger(__name__)

TRANSFORM_START = 40
TRANSFORM_SPAN = 50


class GraphStore(Protocol):
    """Persistence port used by the pipeline."""

    def count(self, caller_id: str) -> int: ...

    def save(self, graph: Graph) -> Graph: ...


class GraphPipeline:
    def __init__(
        self,
        limiter: ConcurrencyLimiter,
        store: GraphStore,
        *,
        config: Optional[Settings] = None,
        client_factory: Callable[[], httpx.AsyncClient] = build_client,
    ) -> None:
        self.limiter = limiter
        self.store = store
        self.config = config or default_settings
        self._client_factory = client_factory

    async def run(
        self,
        repo_url: str,
        caller_id: str,
        on_progress: Optional[ProgressCallback] = None,
        *,
        workspace_id: Optional[str] = None,
    ) -> Graph:
        """Build, persist and return the graph for *repo_url*.

        Raises:
            RepoGraphError: Any classified failure.  Unexpected exceptions are
                wrapped in :class:`~repograph.errors.PipelineError`; nothing
                partial is returned or saved.
        """
        report = ProgressReporter(on_progress)
        started = time.monotonic()
        try:
            with self.limiter.slot(caller_id):
                logger.info("Parse started: %s (caller=%s)", repo_url, caller_id)
                try:
                    graph = await asyncio.wait_for(
                        self._execute(repo_url, caller_id, workspace_id, report),
                        timeout=self.config.parse_timeout,
                    )
                except asyncio.TimeoutError as exc:
                    raise PipelineTimeoutError(
                        f"Parse operation timed out ({self.config.parse_timeout:g} second limit)."
                    ) from exc
        except RepoGraphError as exc:
            logger.warning(
                "Parse failed: %s (caller=%s) [%s] %s",
                repo_url, caller_id, exc.code, exc.message,
            )
            raise
        except Exception as exc:
            logger.exception("Parse crashed: %s (caller=%s)", repo_url, caller_id)
            raise PipelineError("An unexpected error occurred while building the graph.") from exc

        logger.info(
            "Parse finished: %s -> graph %s (%d files, %d edges, health %d) in %.2fs",
            repo_url, graph.id, graph.file_count, graph.edge_count,
            graph.health_score, time.monotonic() - started,
        )
        return graph

    async def _execute(
        self,
        repo_url: str,
        caller_id: str,
        workspace_id: Optional[str],
        report: ProgressReporter,
    ) -> Graph:
        parsed = parse_repo_url(repo_url)
        report("fetching", 5, f"Parsing repository {parsed.full_name}...")

        def _on_fetch(stage: str, detail: str) -> None:
            report(stage, 15 if stage == "fetching" else 30, detail)

        async with self._client_factory() as client:
            fetched = await fetch_repo_tree(
                parsed.owner, parsed.repo, client=client, on_progress=_on_fetch
            )

        file_count = len(fetched.entries)
        if file_count > self.config.max_files:
            raise FileLimitError(
                f"Repository has {file_count} files, exceeding the "
                f"{self.config.max_files} file limit. "
                "Try a smaller repository or a specific branch."
            )

        report("computing", TRANSFORM_START, f"Processing {file_count} files...")

        def _on_transform(stage: str, progress: int) -> None:
            scaled = TRANSFORM_START + (progress / 100) * TRANSFORM_SPAN
            report(stage, int(scaled + 0.5), f"{stage}...")

        transformed = transform_repo_to_graph(fetched.entries, _on_transform)

        report("saving", 92, "Saving to database...")
        limit = self.config.max_graphs_per_caller
        if await asyncio.to_thread(self.store.count, caller_id) >= limit:
            raise GraphQuotaError(
                f"You have reached the maximum of {limit} graphs. "
                "Please delete some before importing new ones."
            )

        now = int(time.time())
        graph = Graph(
            id=str(uuid.uuid4()),
            caller_id=caller_id,
            name=parsed.full_name,
            repo_owner=parsed.owner,
            repo_name=fetched.metadata.name,
            repo_url=fetched.metadata.url or repo_url,
            workspace_id=workspace_id,
            nodes=transformed.nodes,
            edges=transformed.edges,
            file_count=transformed.file_count,
            edge_count=transformed.edge_count,
            health_score=transformed.health_score,
            created_at=now,
            last_viewed_at=now,
        )
        saved = await asyncio.to_thread(self.store.save, graph)

        report("done", 100, "Complete!")
        return saved


async def stream_pipeline(
    pipeline: GraphPipeline,
    repo_url: str,
    caller_id: str,
    *,
    workspace_id: Optional[str] = None,
    buffer: Optional[int] = None,
) -> AsyncIterator[ProgressEvent]:
    """Run *pipeline* as a task and yield its events as they arrive.

    The stream always ends with exactly one ``complete`` or ``error`` event.
    Closing the generator early cancels the run, which releases its
    concurrency slot.
    """
    channel = ProgressChannel(buffer or pipeline.config.progress_buffer)

    async def _runner() -> None:
        try:
            graph = await pipeline.run(
                repo_url, caller_id, channel.callback(), workspace_id=workspace_id
            )
        except RepoGraphError as exc:
            channel.publish(ProgressEvent("error", exc.to_dict()))
        else:
            channel.publish(ProgressEvent("complete", {"graph": graph.to_dict()}))

    task = asyncio.create_task(_runner())
    try:
        while True:
            event = await channel.get()
            yield event
            if event.terminal:
                break
    finally:
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
