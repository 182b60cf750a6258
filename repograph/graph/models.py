"""Dataclass models for the file graph.

These are plain Python objects.  Pipeline stages never patch them in place;
each stage returns new instances via :func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

Vec3 = tuple[float, float, float]


@dataclass(frozen=True)
class FileTypeInfo:
    label: str
    color: str
    hdr_color: Vec3
    category: str


@dataclass
class GraphNode:
    id: str
    path: str
    name: str
    extension: str
    size: int
    lines: int
    complexity: int = 0
    cluster: int = 0
    position: Vec3 = (0.0, 0.0, 0.0)
    deps: int = 0
    dependents: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["position"] = list(self.position)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GraphNode:
        values = dict(data)
        values["position"] = tuple(values.get("position") or (0.0, 0.0, 0.0))
        return cls(**values)


@dataclass(frozen=True)
class GraphEdge:
    source: int
    target: int

    def to_dict(self) -> dict[str, int]:
        return {"source": self.source, "target": self.target}


@dataclass
class TransformResult:
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)
    file_count: int = 0
    edge_count: int = 0
    health_score: int = 100


@dataclass
class Graph:
    id: str
    caller_id: str
    name: str
    repo_owner: str
    repo_name: str
    repo_url: str
    workspace_id: Optional[str]
    nodes: list[GraphNode]
    edges: list[GraphEdge]
    file_count: int
    edge_count: int
    health_score: int
    created_at: int
    last_viewed_at: int

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def summary(self) -> dict[str, Any]:
        """Everything except the node and edge arrays."""
        return {
            "id": self.id,
            "name": self.name,
            "repo_owner": self.repo_owner,
            "repo_name": self.repo_name,
            "repo_url": self.repo_url,
            "workspace_id": self.workspace_id,
            "file_count": self.file_count,
            "edge_count": self.edge_count,
            "health_score": self.health_score,
            "created_at": self.created_at,
            "last_viewed_at": self.last_viewed_at,
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.summary()
        data["nodes"] = [n.to_dict() for n in self.nodes]
        data["edges"] = [e.to_dict() for e in self.edges]
        return data
