"""File classification and cluster assignment."""

from __future__ import annotations

from typing import Dict

from repograph.graph.file_types import DEFAULT_FILE_TYPE, FILE_TYPES, get_extension
from repograph.graph.models import FileTypeInfo

ROOT_CLUSTER_KEY = "(root)"

# Top-level directory -> dense cluster index, in first-seen order.
# One table per pipeline run; never shared between runs.
ClusterTable = Dict[str, int]


def classify_file(path: str) -> FileTypeInfo:
    """Return the :class:`FileTypeInfo` for *path*, or the default descriptor."""
    return FILE_TYPES.get(get_extension(path), DEFAULT_FILE_TYPE)


def cluster_key(path: str) -> str:
    """Return the top-level directory of *path*, or the reserved root key."""
    segments = path.split("/")
    return segments[0] if len(segments) > 1 else ROOT_CLUSTER_KEY


def assign_cluster(path: str, clusters: ClusterTable) -> int:
    """Return the cluster index for *path*, registering new keys in *clusters*."""
    key = cluster_key(path)
    index = clusters.get(key)
    if index is None:
        index = len(clusters)
        clusters[key] = index
    return index
