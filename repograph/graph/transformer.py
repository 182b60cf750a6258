"""Turn a filtered tree listing into a laid-out, scored graph.

Pure and synchronous: classify (while building nodes) -> infer -> metrics
-> layout -> health score.  Progress is reported on a 0..100 scale of its
own; the orchestrator maps it into the overall run.
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional, Sequence

from repograph.github.models import FileEntry
from repograph.graph.classifier import ClusterTable, assign_cluster
from repograph.graph.file_types import get_extension, get_file_name
from repograph.graph.inference import infer_dependencies
from repograph.graph.layout import compute_layout
from repograph.graph.metrics import compute_health_score, compute_node_metrics, estimate_lines
from repograph.graph.models import GraphNode, TransformResult

TransformProgress = Callable[[str, int], None]


def build_node(entry: FileEntry, clusters: ClusterTable) -> GraphNode:
    """Create a fresh :class:`GraphNode` for *entry*, registering its cluster."""
    size = entry.size or 0
    return GraphNode(
        id=str(uuid.uuid4()),
        path=entry.path,
        name=get_file_name(entry.path),
        extension=get_extension(entry.path),
        size=size,
        lines=estimate_lines(size),
        cluster=assign_cluster(entry.path, clusters),
    )


def transform_repo_to_graph(
    entries: Sequence[FileEntry],
    on_progress: Optional[TransformProgress] = None,
) -> TransformResult:
    def _emit(stage: str, progress: int) -> None:
        if on_progress is not None:
            on_progress(stage, progress)

    if not entries:
        return TransformResult()

    _emit("parsing", 10)
    clusters: ClusterTable = {}
    nodes = [build_node(entry, clusters) for entry in entries]
    _emit("parsing", 30)

    _emit("computing", 50)
    edges = infer_dependencies(nodes)

    _emit("computing", 70)
    nodes = compute_node_metrics(nodes, edges)

    _emit("layouting", 85)
    nodes = compute_layout(nodes)

    _emit("layouting", 95)
    health = compute_health_score(nodes, edges)

    _emit("done", 100)
    return TransformResult(
        nodes=nodes,
        edges=edges,
        file_count=len(nodes),
        edge_count=len(edges),
        health_score=health,
    )
