"""CLI entry point for depquery."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from depquery.core.exceptions import DepQueryError
from depquery.core.graph import DepGraph, load_deps, load_file, resolve_deps_path
from depquery.core.graph.loader import DEPS_ENV_VAR
from depquery.core.graph.pathfinding import search_chain
from depquery.core.graph.search import list_unused, search_all, search_main, search_test
from depquery.core.graph.traversal import search_subgraph, subgraph_edges

app = typer.Typer(
    name="depquery",
    help="Dependency queries over a Go package import graph.",
    no_args_is_help=True,
)
console = Console()

_STDIN = "-"

FileOption = Annotated[
    Path | None,
    typer.Option(
        "--file",
        "-f",
        envvar=DEPS_ENV_VAR,
        help="Output of 'go list -json -deps' ('-' for stdin)",
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


def get_graph(file: Path | None) -> DepGraph:
    """Load the graph, exiting with an error message on failure."""
    try:
        if file is not None and str(file) == _STDIN:
            return load_deps(sys.stdin)
        return load_file(resolve_deps_path(file))
    except DepQueryError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def print_packages(
    packages: list[str],
    package: str,
    graph: DepGraph,
    label: str,
    noun: str,
    output_json: bool,
) -> None:
    """Print a package list result, noting unknown packages."""
    if output_json:
        print(json.dumps({"package": package, label: packages}))
        return

    if not packages:
        # Unloaded packages (e.g. std) may still have dependents
        if not graph.exists(package):
            console.print(f"[yellow]Package '[cyan]{escape(package)}[/cyan]' not found[/]")
        console.print(f"  [dim]No {noun} depend on {escape(package)}[/]")
        return
    for p in packages:
        console.print(f"[cyan]{escape(p)}[/cyan]")
    console.print(f"\n[dim]{noun.capitalize()}: {len(packages)}[/]")


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
) -> None:
    """Dependency queries over a Go package import graph."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
        )


@app.command()
def stats(file: FileOption = None, output_json: JsonOption = False) -> None:
    """Show package counts."""
    graph = get_graph(file)
    result = graph.stats()

    if output_json:
        print(json.dumps(result.as_dict()))
    else:
        console.print(f"Packages: {result.packages}")
        console.print(f"Main binaries: {result.main}")
        console.print(f"Test binaries: {result.test}")


@app.command("main")
def main_cmd(
    package: Annotated[str, typer.Argument(help="Import path to search for")],
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show main binaries that depend on a package."""
    graph = get_graph(file)
    print_packages(
        search_main(graph, package), package, graph, "main", "main binaries", output_json
    )


@app.command("test")
def test_cmd(
    package: Annotated[str, typer.Argument(help="Import path to search for")],
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show test binaries that depend on a package."""
    graph = get_graph(file)
    print_packages(
        search_test(graph, package), package, graph, "test", "test binaries", output_json
    )


@app.command("all")
def all_cmd(
    package: Annotated[str, typer.Argument(help="Import path to search for")],
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show every package that depends on a package."""
    graph = get_graph(file)
    print_packages(
        search_all(graph, package), package, graph, "packages", "packages", output_json
    )


@app.command()
def unused(file: FileOption = None, output_json: JsonOption = False) -> None:
    """List packages nothing depends on."""
    graph = get_graph(file)
    packages = list_unused(graph)

    if output_json:
        print(json.dumps({"unused": packages}))
        return

    if not packages:
        console.print("[green]No unused packages[/green]")
        return
    for p in packages:
        console.print(f"[cyan]{escape(p)}[/cyan]")
    console.print(f"\n[dim]{len(packages)} unused[/]")


@app.command()
def chain(
    package: Annotated[str, typer.Argument(help="Import path to trace to")],
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show how each main binary reaches a package."""
    graph = get_graph(file)
    chains = search_chain(graph, package)

    if output_json:
        result = [
            {"binary": c.binary, "complete": c.complete, "chain": c.packages} for c in chains
        ]
        print(json.dumps({"package": package, "chains": result}))
        return

    if not chains:
        console.print(f"No main binary depends on '[cyan]{escape(package)}[/cyan]'")
        return

    for c in chains:
        console.print(f"\n[bold cyan]{escape(c.binary)}[/]")
        last = len(c.packages) - 1
        for i, p in enumerate(c.packages):
            indent = "  " * i
            if i == 0:
                console.print(f"  [dim]{escape(p)}[/]")
            elif i == last:
                console.print(f"  {indent}└─ [bold yellow]{escape(p)}[/]")
            else:
                console.print(f"  {indent}└─ [cyan]{escape(p)}[/]")
        if not c.complete:
            console.print("  [dim]Chain incomplete: intermediate packages were not loaded[/]")


@app.command()
def graph(
    start: Annotated[str, typer.Argument(help="Import path to start from")],
    target: Annotated[str, typer.Argument(help="Import path to reach")],
    file: FileOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show every direct-import edge between two packages."""
    dep_graph = get_graph(file)
    subgraph = search_subgraph(dep_graph, start, target)

    if output_json:
        print(json.dumps({"start": start, "target": target, "graph": subgraph}))
        return

    if not subgraph:
        console.print(
            f"'[cyan]{escape(start)}[/cyan]' does not depend on '[cyan]{escape(target)}[/cyan]'"
        )
        return

    edges = subgraph_edges(subgraph)
    for src, dst in edges:
        color = "bold yellow" if dst == target else "cyan"
        console.print(f"[cyan]{escape(src)}[/] -> [{color}]{escape(dst)}[/]")
    console.print(f"\n[dim]Packages: {len(subgraph)} | Edges: {len(edges)}[/]")


if __name__ == "__main__":
    app()
