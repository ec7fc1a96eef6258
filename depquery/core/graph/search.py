"""Reverse dependency search and unused package detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depquery.core.graph.base import DepGraph


def search_all(graph: DepGraph, target: str) -> list[str]:
    """All packages that depend on target. O(V)."""
    return sorted(p for p in graph.packages if target in graph.all_deps(p))


def search_main(graph: DepGraph, target: str) -> list[str]:
    """Main packages that depend on target.

    A main package counts as depending on itself, so target is included
    when it is a main package.
    """
    return sorted(
        p for p in graph.main_packages if p == target or target in graph.all_deps(p)
    )


def search_test(graph: DepGraph, target: str) -> list[str]:
    """Test binaries that depend on target.

    Unlike search_main, target itself is never included.
    """
    return sorted(p for p in graph.test_packages if target in graph.all_deps(p))


def list_unused(graph: DepGraph) -> list[str]:
    """Packages no other package depends on, excluding main and test. O(V^2).

    Always sorted by import path.
    """
    packages = graph.packages
    unused: list[str] = []

    for candidate in packages:
        if graph.is_main(candidate) or graph.is_test(candidate):
            continue
        if not any(candidate in graph.all_deps(other) for other in packages):
            unused.append(candidate)

    unused.sort()
    return unused
