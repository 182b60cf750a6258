"""Per-node complexity and whole-graph health score.

Complexity is a documented proxy, not a cyclomatic measure: file size,
nesting depth and fan-in each contribute a weighted share::

    complexity = min(100, (lines / 300) * 40 + (depth / 5) * 30 + (dependents / 8) * 30)

The health score starts at 100 and subtracts penalties for average
complexity, the share of hot files (complexity > 70), coupling
(edges per node) and the worst fan-out.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import List, Sequence

from repograph.graph.models import GraphEdge, GraphNode

HIGH_COMPLEXITY = 70
BYTES_PER_LINE = 40


def round_half_up(value: float) -> int:
    """Round like JavaScript's ``Math.round`` (ties go towards +inf)."""
    return int(math.floor(value + 0.5))


def estimate_lines(size: int) -> int:
    return max(1, round_half_up((size or 0) / BYTES_PER_LINE))


def directory_depth(path: str) -> int:
    return path.count("/")


def node_complexity(node: GraphNode, dependents: int) -> int:
    lines = node.lines if node.lines > 0 else estimate_lines(node.size)
    raw = (
        (lines / 300) * 40
        + (directory_depth(node.path) / 5) * 30
        + (dependents / 8) * 30
    )
    return min(100, round_half_up(raw))


def compute_node_metrics(
    nodes: Sequence[GraphNode],
    edges: Sequence[GraphEdge],
) -> List[GraphNode]:
    """Return copies of *nodes* with ``deps``, ``dependents`` and ``complexity`` set."""
    if not nodes:
        return []

    count = len(nodes)
    deps = [0] * count
    dependents = [0] * count
    for edge in edges:
        if 0 <= edge.source < count:
            deps[edge.source] += 1
        if 0 <= edge.target < count:
            dependents[edge.target] += 1

    return [
        replace(
            node,
            deps=deps[i],
            dependents=dependents[i],
            complexity=node_complexity(node, dependents[i]),
        )
        for i, node in enumerate(nodes)
    ]


def compute_health_score(nodes: Sequence[GraphNode], edges: Sequence[GraphEdge]) -> int:
    """Return a 0..100 health summary; an empty graph scores 100."""
    if not nodes:
        return 100

    count = len(nodes)
    total = sum(n.complexity for n in nodes)
    high = sum(1 for n in nodes if n.complexity > HIGH_COMPLEXITY)
    max_deps = max(n.deps for n in nodes)

    score = (
        100
        - (total / count) * 0.3
        - (high / count) * 30
        - (len(edges) / count) * 20
        - (max_deps / 50) * 20
    )
    return round_half_up(max(0.0, min(100.0, score)))
