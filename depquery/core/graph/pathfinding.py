"""Chain reconstruction using DFS over direct imports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from depquery.core.graph.models import Chain
from depquery.core.graph.search import search_main
from depquery.core.models import PLACEHOLDER, ROOT_LABEL

if TYPE_CHECKING:
    from depquery.core.graph.base import DepGraph


def find_path(
    graph: DepGraph,
    start: str,
    target: str,
    visited: set[str] | None = None,
) -> list[str] | None:
    """Find a chain of direct imports from start to target.

    Returns the packages after start, ending with target, or None. The first
    path found wins; it is not necessarily the shortest. Imports are tried in
    sorted order and each package is expanded at most once, so cyclic import
    data terminates.
    """
    if visited is None:
        visited = set()

    if target not in graph.all_deps(start):
        return None
    if target in graph.direct_imports(start):
        return [target]

    visited.add(start)
    for package in sorted(graph.direct_imports(start)):
        if package in visited:
            continue
        rest = find_path(graph, package, target, visited)
        if rest is not None:
            return [package, *rest]

    return None


def search_chain(graph: DepGraph, target: str) -> list[Chain]:
    """One chain per main package that depends on target."""
    chains: list[Chain] = []

    for binary in search_main(graph, target):
        if binary == target:
            chains.append(Chain(binary, target, [ROOT_LABEL, target]))
            continue

        rest = find_path(graph, binary, target)
        if rest is None:
            # Dependency is known but an intermediate package was never
            # ingested (e.g. the standard library)
            rest = [PLACEHOLDER, target]
        chains.append(Chain(binary, target, [ROOT_LABEL, binary, *rest]))

    return chains
