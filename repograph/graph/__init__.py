"""Graph package: classification, inference, metrics and layout."""

from repograph.graph.classifier import ClusterTable, assign_cluster, classify_file
from repograph.graph.file_types import DEFAULT_FILE_TYPE, FILE_TYPES, get_extension
from repograph.graph.inference import infer_dependencies
from repograph.graph.layout import compute_layout, seeded_random
from repograph.graph.metrics import compute_health_score, compute_node_metrics
from repograph.graph.models import FileTypeInfo, Graph, GraphEdge, GraphNode, TransformResult
from repograph.graph.transformer import transform_repo_to_graph

__all__ = [
    "ClusterTable",
    "assign_cluster",
    "classify_file",
    "DEFAULT_FILE_TYPE",
    "FILE_TYPES",
    "get_extension",
    "infer_dependencies",
    "compute_layout",
    "seeded_random",
    "compute_health_score",
    "compute_node_metrics",
    "FileTypeInfo",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "TransformResult",
    "transform_repo_to_graph",
]
