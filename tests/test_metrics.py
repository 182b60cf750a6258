"""Tests for complexity and health scoring."""

from __future__ import annotations

import pytest

from repograph.graph.metrics import (
    compute_health_score,
    compute_node_metrics,
    estimate_lines,
    node_complexity,
    round_half_up,
)
from repograph.graph.models import GraphEdge, GraphNode


def _node(path: str, *, lines: int = 1, complexity: int = 0, deps: int = 0) -> GraphNode:
    return GraphNode(
        id=path,
        path=path,
        name=path.rsplit("/", 1)[-1],
        extension="ts",
        size=lines * 40,
        lines=lines,
        complexity=complexity,
        deps=deps,
    )


class TestRounding:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(2.5, 3), (2.49, 2), (81.95, 82), (-2.5, -2), (0.0, 0)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    @pytest.mark.parametrize(("size", "expected"), [(0, 1), (20, 1), (60, 2), (400, 10)])
    def test_estimate_lines(self, size: int, expected: int) -> None:
        assert estimate_lines(size) == expected


class TestNodeComplexity:
    def test_lines_share(self) -> None:
        assert node_complexity(_node("a.ts", lines=300), 0) == 40

    def test_depth_share(self) -> None:
        assert node_complexity(_node("a/b/c/d/e/f.ts", lines=0), 0) == 30

    def test_fan_in_share(self) -> None:
        assert node_complexity(_node("a.ts", lines=0), 8) == 30

    def test_clamped_to_100(self) -> None:
        assert node_complexity(_node("a/b/c/d/e/f/g.ts", lines=3000), 40) == 100


class TestComputeNodeMetrics:
    def test_empty(self) -> None:
        assert compute_node_metrics([], []) == []

    def test_counts_and_copies(self) -> None:
        nodes = [_node("src/a.ts"), _node("src/b.ts"), _node("src/c.ts")]
        edges = [GraphEdge(0, 1), GraphEdge(0, 2), GraphEdge(1, 2)]

        result = compute_node_metrics(nodes, edges)

        assert [n.deps for n in result] == [2, 1, 0]
        assert [n.dependents for n in result] == [0, 1, 2]
        assert all(0 <= n.complexity <= 100 for n in result)
        # inputs untouched
        assert all(n.deps == 0 and n.dependents == 0 for n in nodes)

    def test_out_of_range_endpoints_ignored(self) -> None:
        result = compute_node_metrics([_node("a.ts")], [GraphEdge(0, 5)])
        assert result[0].deps == 1
        assert result[0].dependents == 0


class TestHealthScore:
    def test_empty_graph_is_healthy(self) -> None:
        assert compute_health_score([], []) == 100

    def test_isolated_simple_files(self) -> None:
        assert compute_health_score([_node("a.ts"), _node("b.ts")], []) == 100

    def test_all_hot_files(self) -> None:
        nodes = [_node("a.ts", complexity=100), _node("b.ts", complexity=100)]
        # 100 - 30 (avg) - 30 (hot share)
        assert compute_health_score(nodes, []) == 40

    def test_never_negative(self) -> None:
        nodes = [_node(f"{i}.ts", complexity=100, deps=200) for i in range(3)]
        edges = [GraphEdge(i, j) for i in range(3) for j in range(3) if i != j] * 10
        assert compute_health_score(nodes, edges) == 0
