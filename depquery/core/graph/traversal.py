"""Sub-graph extraction using BFS traversal."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depquery.core.graph.base import DepGraph


def search_subgraph(graph: DepGraph, start: str, target: str) -> dict[str, list[str]]:
    """All direct-import edges on some path from start to target.

    Maps each package to its imports that lead toward target. Empty when
    start does not depend on target. O(V + E) in subgraph.
    """
    if target not in graph.all_deps(start):
        return {}

    result: dict[str, list[str]] = {}
    queue: deque[str] = deque([start])
    visited: set[str] = {start}

    while queue:
        current = queue.popleft()
        for package in sorted(graph.direct_imports(current)):
            if package == target:
                result.setdefault(current, []).append(package)
                continue
            if target in graph.all_deps(package):
                if package not in visited:
                    visited.add(package)
                    queue.append(package)
                result.setdefault(current, []).append(package)

    return result


def subgraph_edges(subgraph: dict[str, list[str]]) -> list[tuple[str, str]]:
    """Flatten a sub-graph mapping into sorted (importer, imported) pairs."""
    return sorted((src, dst) for src, targets in subgraph.items() for dst in targets)
