"""
MCP server for depquery.

Exposes dependency queries to LLMs via the Model Context Protocol.

Tools:
    - depquery_main: Find main binaries depending on a package
    - depquery_test: Find test binaries depending on a package
    - depquery_all: Find every package depending on a package
    - depquery_chain: Show how main binaries reach a package
    - depquery_graph: Show all import edges between two packages
    - depquery_unused: List packages nothing depends on
    - depquery_stats: Get package counts

Usage:
    Install: pip install depquery
    Run: mcp-server-depquery
"""

import asyncio

from depquery.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
