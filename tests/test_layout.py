"""Tests for the deterministic 3D layout."""

from __future__ import annotations

import math

from repograph.graph.layout import (
    MAX_EXTENT,
    cluster_center,
    compute_layout,
    scale_to_fit,
    seeded_random,
)
from repograph.graph.models import GraphNode


def _node(i: int, cluster: int = 0, position=(0.0, 0.0, 0.0)) -> GraphNode:
    return GraphNode(
        id=f"n{i}", path=f"d{cluster}/f{i}.ts", name=f"f{i}.ts", extension="ts",
        size=0, lines=1, cluster=cluster, position=position,
    )


class TestSeededRandom:
    def test_range_and_determinism(self) -> None:
        for seed in range(500):
            value = seeded_random(seed)
            assert 0.0 <= value < 1.0
            assert seeded_random(seed) == value

    def test_varies_with_seed(self) -> None:
        assert len({seeded_random(s) for s in range(50)}) > 40


class TestComputeLayout:
    def test_empty(self) -> None:
        assert compute_layout([]) == []

    def test_single_node_at_origin(self) -> None:
        [placed] = compute_layout([_node(0, position=(5.0, 5.0, 5.0))])
        assert placed.position == (0.0, 0.0, 0.0)

    def test_same_input_same_positions(self) -> None:
        nodes = [_node(i, cluster=i % 4) for i in range(40)]
        first = [n.position for n in compute_layout(nodes)]
        second = [n.position for n in compute_layout(nodes)]
        assert first == second

    def test_inputs_not_mutated(self) -> None:
        nodes = [_node(i, cluster=i % 2) for i in range(6)]
        compute_layout(nodes)
        assert all(n.position == (0.0, 0.0, 0.0) for n in nodes)

    def test_single_cluster_surrounds_origin(self) -> None:
        nodes = [_node(i) for i in range(9)]
        radius = 0.6 + math.sqrt(9) * 0.45
        jitter = math.sqrt(3) * 0.15
        for n in compute_layout(nodes):
            assert math.dist(n.position, (0.0, 0.0, 0.0)) <= radius + jitter + 1e-9

    def test_cluster_centres_spread_out(self) -> None:
        a = cluster_center(0, 3)
        b = cluster_center(1, 3)
        assert a != b
        assert cluster_center(0, 1) == (0.0, 0.0, 0.0)

    def test_large_layout_fits_extent(self) -> None:
        nodes = [_node(i, cluster=i % 60) for i in range(600)]
        placed = compute_layout(nodes)
        for axis in range(3):
            values = [n.position[axis] for n in placed]
            assert max(values) - min(values) <= MAX_EXTENT * 2 + 1e-9


class TestScaleToFit:
    def test_small_layout_untouched(self) -> None:
        nodes = [_node(0, position=(-3.0, 0.0, 0.0)), _node(1, position=(3.0, 1.0, 0.0))]
        assert scale_to_fit(nodes) is nodes

    def test_large_layout_rescaled_and_centred(self) -> None:
        nodes = [_node(0, position=(0.0, 0.0, 0.0)), _node(1, position=(100.0, 10.0, 0.0))]
        scaled = scale_to_fit(nodes)
        assert math.isclose(scaled[0].position[0], -15.0)
        assert math.isclose(scaled[1].position[0], 15.0)
        assert math.isclose(scaled[1].position[1], 1.5)
