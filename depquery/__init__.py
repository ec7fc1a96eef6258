"""
depquery: Dependency queries over a Go package import graph.

depquery reads the package records produced by ``go list -json -deps`` and
answers questions about them, enabling you to:
- Find the main or test binaries that depend on a package
- List packages nothing depends on
- Show how a binary reaches a package through direct imports

Usage:
    from depquery.core.graph import load_file
    from depquery.core.graph.pathfinding import search_chain

    graph = load_file(Path("deps.json"))
    for chain in search_chain(graph, "golang.org/x/net/http2"):
        print(chain)
"""

__version__ = "0.1.0"
