"""Deterministic 3D layout.

Two levels, no physics: cluster centres sit on a golden-angle spiral in the
horizontal plane, and the members of each cluster sit on a Fibonacci sphere
around their centre.  All jitter comes from :func:`seeded_random`, a pure
function of an integer seed, so the same node order always yields the same
positions.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import Dict, List, Sequence

from repograph.graph.models import GraphNode, Vec3

GOLDEN_ANGLE = 2.4
MAX_EXTENT = 15.0


def seeded_random(seed: float) -> float:
    """Hash-like pseudo random value in ``[0, 1)`` for *seed*."""
    x = math.sin(seed * 12.9898 + 78.233) * 43758.5453
    return x - math.floor(x)


def cluster_center(index: int, total: int) -> Vec3:
    if total == 1:
        return (0.0, 0.0, 0.0)

    theta = index * GOLDEN_ANGLE
    radius = 4 + math.sqrt(total) * 2.2 + seeded_random(index * 7 + 13) * 2.0
    x = radius * math.cos(theta)
    z = radius * math.sin(theta)
    y = (seeded_random(index * 11 + 3) - 0.5) * 6
    return (x, y, z)


def member_position(center: Vec3, local_index: int, group_size: int, seed: int) -> Vec3:
    if group_size == 1:
        return center

    radius = 0.6 + math.sqrt(group_size) * 0.45
    phi = math.acos(1 - 2 * (local_index + 0.5) / group_size)
    theta = math.pi * (1 + math.sqrt(5)) * local_index

    dx = radius * math.sin(phi) * math.cos(theta)
    dy = radius * math.sin(phi) * math.sin(theta)
    dz = radius * math.cos(phi)

    jx = (seeded_random(seed * 3 + 1) - 0.5) * 0.3
    jy = (seeded_random(seed * 5 + 2) - 0.5) * 0.3
    jz = (seeded_random(seed * 7 + 3) - 0.5) * 0.3

    return (center[0] + dx + jx, center[1] + dy + jy, center[2] + dz + jz)


def scale_to_fit(nodes: List[GraphNode], max_extent: float = MAX_EXTENT) -> List[GraphNode]:
    """Shrink and re-centre *nodes* when the layout spans more than ``2 * max_extent``."""
    if not nodes:
        return nodes

    xs = [n.position[0] for n in nodes]
    ys = [n.position[1] for n in nodes]
    zs = [n.position[2] for n in nodes]

    ranges = [(max(axis) - min(axis)) or 1.0 for axis in (xs, ys, zs)]
    max_range = max(ranges)
    if max_range <= max_extent * 2:
        return nodes

    scale = (max_extent * 2) / max_range
    cx = (min(xs) + max(xs)) / 2
    cy = (min(ys) + max(ys)) / 2
    cz = (min(zs) + max(zs)) / 2

    return [
        replace(
            n,
            position=(
                (n.position[0] - cx) * scale,
                (n.position[1] - cy) * scale,
                (n.position[2] - cz) * scale,
            ),
        )
        for n in nodes
    ]


def compute_layout(nodes: Sequence[GraphNode]) -> List[GraphNode]:
    """Return copies of *nodes* with ``position`` populated."""
    if not nodes:
        return []
    if len(nodes) == 1:
        return [replace(nodes[0], position=(0.0, 0.0, 0.0))]

    # dicts keep insertion order, so clusters are laid out in first-seen order
    groups: Dict[int, List[int]] = {}
    for i, node in enumerate(nodes):
        groups.setdefault(node.cluster, []).append(i)

    placed: List[GraphNode] = list(nodes)
    for cluster_index, indices in enumerate(groups.values()):
        center = cluster_center(cluster_index, len(groups))
        for local_index, node_index in enumerate(indices):
            position = member_position(center, local_index, len(indices), node_index)
            placed[node_index] = replace(nodes[node_index], position=position)

    return scale_to_fit(placed)
