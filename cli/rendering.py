"""Utilities for rendering graphs in the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from repograph.graph.classifier import classify_file
from repograph.graph.models import GraphNode


@dataclass
class _Dir:
    dirs: Dict[str, _Dir] = field(default_factory=dict)
    files: List[GraphNode] = field(default_factory=list)


def render_tree(nodes: List[GraphNode], root_label: str) -> str:
    """Render graph nodes as an ASCII directory tree.

    Each file line shows its complexity and fan-in, e.g.
    ``├── App.tsx  [component] c=12 in=2``.

    Args:
        nodes: Nodes of a finished graph.
        root_label: Text for the top line (usually ``owner/repo``).

    Returns:
        String representation of the tree.
    """
    root = _Dir()
    for node in nodes:
        *dirs, _ = node.path.split("/")
        level = root
        for d in dirs:
            level = level.dirs.setdefault(d, _Dir())
        level.files.append(node)

    lines = [f"📁 {root_label}"]

    def _render(level: _Dir, prefix: str) -> None:
        subdirs = sorted(level.dirs.items())
        files = sorted(level.files, key=lambda n: n.name)
        total = len(subdirs) + len(files)
        for i, (name, subtree) in enumerate(subdirs):
            is_last = i == total - 1
            lines.append(f"{prefix}{'└── ' if is_last else '├── '}{name}/")
            _render(subtree, prefix + ("    " if is_last else "│   "))
        for i, node in enumerate(files, start=len(subdirs)):
            connector = "└── " if i == total - 1 else "├── "
            lines.append(f"{prefix}{connector}{_file_label(node)}")

    _render(root, "")
    return "\n".join(lines)


def _file_label(node: GraphNode) -> str:
    category = classify_file(node.path).category
    return f"{node.name}  [{category}] c={node.complexity} in={node.dependents}"


def health_bar(score: int, width: int = 20) -> str:
    """``[#############-------] 65`` style gauge for a 0..100 score."""
    filled = round(width * max(0, min(100, score)) / 100)
    return f"[{'#' * filled}{'-' * (width - filled)}] {score}"
