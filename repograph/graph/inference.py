"""Heuristic dependency inference over file paths.

No source is read: relationships are guessed from names and directory
layout alone.  Five rules run in a fixed order and share one edge
accumulator, so the result is deterministic for a given node order and the
global cap (``max(3 * n, 10)``) is honoured across all of them.

Rules
-----
1. Related by basename   ``Button.tsx`` / ``Button.module.css`` / ``Button.test.tsx``
2. Index hub             ``index.ts`` links every file in its directory
3. Sibling proximity     up to 3 neighbours per file within a directory
4. Fuzzy cross-directory ``useAuth.ts`` <-> ``auth/AuthProvider.tsx``
5. Config fan-out        ``package.json`` etc. link up to 5 siblings
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from repograph.graph.models import GraphEdge, GraphNode

MAX_BASENAME_GROUP = 8
SIBLING_LINKS = 3
FUZZY_NODE_LIMIT = 2000
FUZZY_MATCHES_PER_NODE = 2
MIN_FUZZY_BASENAME = 3
DEFAULT_MIN_FUZZY_CORE = 4
CONFIG_FAN_LINKS = 5

INDEX_FILENAMES = frozenset({"index.ts", "index.tsx", "index.js", "index.jsx"})

CONFIG_FILENAMES = frozenset({
    "package.json", "tsconfig.json", "tsconfig.node.json",
    "next.config.js", "next.config.ts", "next.config.mjs",
    "vite.config.ts", "vite.config.js",
    "tailwind.config.ts", "tailwind.config.js",
    "postcss.config.js", "postcss.config.mjs",
    ".eslintrc.json", ".eslintrc.js", "eslint.config.js", "eslint.config.mjs",
})


def edge_cap(node_count: int) -> int:
    """Maximum number of edges inferred for *node_count* nodes."""
    return max(node_count * 3, 10)


class _EdgeAccumulator:
    """Edge list plus an unordered-pair index, bounded by a fixed cap."""

    def __init__(self, cap: int) -> None:
        self.cap = cap
        self.edges: List[GraphEdge] = []
        self._seen: set[tuple[int, int]] = set()

    @property
    def full(self) -> bool:
        return len(self.edges) >= self.cap

    def add(self, source: int, target: int) -> bool:
        """Insert ``source -> target``; return ``False`` if rejected."""
        if self.full or source == target:
            return False
        key = (source, target) if source < target else (target, source)
        if key in self._seen:
            return False
        self._seen.add(key)
        self.edges.append(GraphEdge(source=source, target=target))
        return True


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

def _dirname(path: str) -> str:
    idx = path.rfind("/")
    return "" if idx == -1 else path[:idx]


def _basename(name: str) -> str:
    """Name up to the first dot: ``Button.module.css`` -> ``Button``."""
    idx = name.find(".")
    return name if idx == -1 else name[:idx]


def _core_name(name: str) -> str:
    """Lower-cased basename with a hook-style ``use`` prefix stripped."""
    base = _basename(name).lower()
    if base.startswith("use") and len(base) > 3:
        return base[3:]
    return base


def _group_by_dir(nodes: Sequence[GraphNode]) -> Dict[str, List[int]]:
    groups: Dict[str, List[int]] = {}
    for i, node in enumerate(nodes):
        groups.setdefault(_dirname(node.path), []).append(i)
    return groups


def _group_by_basename(nodes: Sequence[GraphNode]) -> Dict[str, List[int]]:
    groups: Dict[str, List[int]] = {}
    for i, node in enumerate(nodes):
        base = _basename(node.name)
        if base:
            groups.setdefault(base, []).append(i)
    return groups


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def _related_files_rule(by_basename: Dict[str, List[int]], acc: _EdgeAccumulator) -> None:
    for indices in by_basename.values():
        if not 2 <= len(indices) <= MAX_BASENAME_GROUP:
            continue
        for a in range(len(indices)):
            for b in range(a + 1, len(indices)):
                if acc.full:
                    return
                acc.add(indices[a], indices[b])


def _index_hub_rule(
    nodes: Sequence[GraphNode],
    by_dir: Dict[str, List[int]],
    acc: _EdgeAccumulator,
) -> None:
    for i, node in enumerate(nodes):
        if node.name.lower() not in INDEX_FILENAMES:
            continue
        for sibling in by_dir.get(_dirname(node.path), ()):
            if acc.full:
                return
            acc.add(i, sibling)


def _sibling_rule(by_dir: Dict[str, List[int]], acc: _EdgeAccumulator) -> None:
    for indices in by_dir.values():
        if len(indices) < 2:
            continue
        for a, source in enumerate(indices):
            if acc.full:
                return
            added = 0
            for b, target in enumerate(indices):
                if added >= SIBLING_LINKS:
                    break
                if a != b and acc.add(source, target):
                    added += 1


def _fuzzy_match_rule(
    nodes: Sequence[GraphNode],
    acc: _EdgeAccumulator,
    min_core: int,
) -> None:
    if len(nodes) > FUZZY_NODE_LIMIT:
        return

    # Precompute once; the inner loop is O(n^2)
    cores = [_core_name(n.name) for n in nodes]
    dirs = [_dirname(n.path) for n in nodes]
    long_enough = [len(_basename(n.name)) >= MIN_FUZZY_BASENAME for n in nodes]

    for i in range(len(nodes)):
        if acc.full:
            return
        if not long_enough[i]:
            continue
        core_i = cores[i]
        matches = 0
        for j in range(i + 1, len(nodes)):
            if matches >= FUZZY_MATCHES_PER_NODE:
                break
            if dirs[i] == dirs[j] or not long_enough[j]:
                continue
            core_j = cores[j]
            if (
                core_i == core_j
                or (len(core_i) >= min_core and core_i in core_j)
                or (len(core_j) >= min_core and core_j in core_i)
            ):
                if acc.add(i, j):
                    matches += 1


def _config_fan_rule(
    nodes: Sequence[GraphNode],
    by_dir: Dict[str, List[int]],
    acc: _EdgeAccumulator,
) -> None:
    for i, node in enumerate(nodes):
        if node.name not in CONFIG_FILENAMES:
            continue
        if acc.full:
            return
        added = 0
        for sibling in by_dir.get(_dirname(node.path), ()):
            if added >= CONFIG_FAN_LINKS:
                break
            if acc.full:
                return
            if acc.add(i, sibling):
                added += 1


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def infer_dependencies(
    nodes: Sequence[GraphNode],
    *,
    min_fuzzy_core: int = DEFAULT_MIN_FUZZY_CORE,
) -> List[GraphEdge]:
    """Infer edges between *nodes* from their paths and names.

    Args:
        nodes: Classified graph nodes; edge endpoints are indices into this
            sequence.
        min_fuzzy_core: Shortest core name allowed to match as a substring
            in the fuzzy cross-directory rule.  Raising it trades recall for
            fewer coincidental links between generic names.

    Returns:
        A new list of :class:`GraphEdge` with no self-loops, no duplicate
        unordered pairs and at most :func:`edge_cap` entries.
    """
    if len(nodes) <= 1:
        return []

    acc = _EdgeAccumulator(edge_cap(len(nodes)))
    by_dir = _group_by_dir(nodes)

    _related_files_rule(_group_by_basename(nodes), acc)
    _index_hub_rule(nodes, by_dir, acc)
    _sibling_rule(by_dir, acc)
    _fuzzy_match_rule(nodes, acc, min_fuzzy_core)
    _config_fan_rule(nodes, by_dir, acc)

    return acc.edges
