"""
Package graph data structures and query algorithms.

This module provides in-memory queries over a Go package import graph:

Data Structures:
    - DepGraph: Direct-import and transitive-dependency maps with O(1) lookups
    - Chain: A witness sequence from a binary root to a target package

Algorithms:
    - search: Reverse dependency search, unused package detection
    - pathfinding: DFS chain reconstruction (search_chain)
    - traversal: BFS sub-graph extraction (search_subgraph)

Loading:
    - load_deps(): Build a graph from a ``go list -json`` stream
    - load_file(): Same, from a file on disk
"""

from depquery.core.graph.base import DepGraph
from depquery.core.graph.loader import (
    iter_records,
    iter_stream_records,
    load_deps,
    load_file,
    resolve_deps_path,
)
from depquery.core.graph.models import Chain

__all__ = [
    "DepGraph",
    "Chain",
    "iter_records",
    "iter_stream_records",
    "load_deps",
    "load_file",
    "resolve_deps_path",
]
