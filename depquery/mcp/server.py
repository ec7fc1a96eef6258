"""MCP server implementation for depquery."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from depquery.core.exceptions import DepQueryError
from depquery.core.graph import DepGraph, load_file, resolve_deps_path
from depquery.core.graph.pathfinding import search_chain
from depquery.core.graph.search import list_unused, search_all, search_main, search_test
from depquery.core.graph.traversal import search_subgraph

server = Server("depquery")

_FILE_PROPERTY = {
    "type": "string",
    "description": "Path to 'go list -json -deps' output (default: $DEPQUERY_DEPS or deps.json)",
}


def _get_graph(file: str | None) -> DepGraph:
    """Load the graph for a tool call."""
    return load_file(resolve_deps_path(Path(file) if file else None))


def _package_tool(name: str, description: str) -> Tool:
    return Tool(
        name=name,
        description=description,
        inputSchema={
            "type": "object",
            "properties": {
                "package": {
                    "type": "string",
                    "description": "Import path of the package to search for",
                },
                "file": _FILE_PROPERTY,
            },
            "required": ["package"],
        },
    )


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        _package_tool(
            "depquery_main",
            "Find main binaries that depend on a package, directly or transitively.",
        ),
        _package_tool(
            "depquery_test",
            "Find test binaries that depend on a package, directly or transitively.",
        ),
        _package_tool(
            "depquery_all",
            "Find every package that depends on a package, directly or transitively.",
        ),
        _package_tool(
            "depquery_chain",
            (
                "Show, for each main binary depending on a package, one chain of direct "
                "imports from the binary to the package. '...' marks a gap where "
                "intermediate packages were not loaded."
            ),
        ),
        Tool(
            name="depquery_graph",
            description=(
                "Find every direct-import edge on some path from one package to another. "
                "Returns a mapping of package to the imports that lead to the target."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "start": {
                        "type": "string",
                        "description": "Import path to start from",
                    },
                    "target": {
                        "type": "string",
                        "description": "Import path to reach",
                    },
                    "file": _FILE_PROPERTY,
                },
                "required": ["start", "target"],
            },
        ),
        Tool(
            name="depquery_unused",
            description="List packages that no other package depends on.",
            inputSchema={
                "type": "object",
                "properties": {"file": _FILE_PROPERTY},
            },
        ),
        Tool(
            name="depquery_stats",
            description="Get package, main binary and test binary counts.",
            inputSchema={
                "type": "object",
                "properties": {"file": _FILE_PROPERTY},
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        result = handle_tool(name, arguments)
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except (DepQueryError, KeyError) as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]


def handle_tool(name: str, arguments: dict[str, Any]) -> dict[str, Any]:
    """Dispatch a tool call to its handler."""
    file = arguments.get("file")

    if name == "depquery_main":
        return _handle_search(_get_graph(file), arguments["package"], search_main, "main")
    if name == "depquery_test":
        return _handle_search(_get_graph(file), arguments["package"], search_test, "test")
    if name == "depquery_all":
        return _handle_search(_get_graph(file), arguments["package"], search_all, "packages")
    if name == "depquery_chain":
        return _handle_chain(_get_graph(file), arguments["package"])
    if name == "depquery_graph":
        return _handle_graph(_get_graph(file), arguments["start"], arguments["target"])
    if name == "depquery_unused":
        return {"unused": list_unused(_get_graph(file))}
    if name == "depquery_stats":
        return _get_graph(file).stats().as_dict()
    return {"error": f"Unknown tool: {name}"}


def _handle_search(
    graph: DepGraph, package: str, search: Callable[[DepGraph, str], list[str]], label: str
) -> dict[str, Any]:
    """Handle the reverse dependency tools."""
    packages = search(graph, package)
    result: dict[str, Any] = {"package": package, label: packages}
    if not packages and not graph.exists(package):
        result["error"] = f"No package found matching '{package}'"
    return result


def _handle_chain(graph: DepGraph, package: str) -> dict[str, Any]:
    """Handle depquery_chain tool."""
    return {
        "package": package,
        "chains": [
            {"binary": c.binary, "complete": c.complete, "chain": c.packages}
            for c in search_chain(graph, package)
        ],
    }


def _handle_graph(graph: DepGraph, start: str, target: str) -> dict[str, Any]:
    """Handle depquery_graph tool."""
    return {"start": start, "target": target, "graph": search_subgraph(graph, start, target)}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
