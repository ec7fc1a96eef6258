"""Integration tests for loading, the CLI and the MCP handlers."""

import io
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from depquery.cli import app
from depquery.core.exceptions import DecodeError, DepsFileNotFoundError
from depquery.core.graph import (
    DepGraph,
    iter_records,
    iter_stream_records,
    load_deps,
    load_file,
)
from depquery.core.graph.loader import DEPS_ENV_VAR
from depquery.core.graph.pathfinding import search_chain
from depquery.core.graph.search import list_unused, search_all, search_main, search_test
from depquery.core.models import PLACEHOLDER, ROOT_LABEL
from depquery.mcp.server import handle_tool

SERVER = "example.com/app/cmd/server"
UTIL = "example.com/app/internal/util"
UTIL_TEST = "example.com/app/internal/util.test"
LEGACY = "example.com/app/internal/legacy"

# Shaped like `go list -json -deps -test ./...`: concatenated objects, extra keys
SAMPLE = """
{
	"Dir": "/usr/lib/go/src/strings",
	"ImportPath": "strings",
	"Name": "strings",
	"Standard": true
}
{
	"Dir": "/src/app/internal/util",
	"ImportPath": "example.com/app/internal/util",
	"Name": "util",
	"GoFiles": ["util.go"],
	"Imports": ["strings"],
	"Deps": ["strings"]
}
{
	"ImportPath": "example.com/app/cmd/server",
	"Name": "main",
	"Imports": ["example.com/app/internal/util", "fmt"],
	"Deps": ["example.com/app/internal/util", "fmt", "strings", "unicode"]
}
{
	"ImportPath": "example.com/app/internal/util [example.com/app/internal/util.test]",
	"Name": "util",
	"Imports": ["strings"],
	"Deps": ["strings"]
}
{
	"ImportPath": "example.com/app/internal/util.test",
	"Name": "main",
	"Imports": ["example.com/app/internal/util [example.com/app/internal/util.test]", "testing"],
	"Deps": ["example.com/app/internal/util [example.com/app/internal/util.test]", "strings", "testing"]
}
{
	"ImportPath": "example.com/app/internal/legacy",
	"Name": "legacy",
	"Imports": null,
	"Deps": null
}
"""


@pytest.fixture
def deps_file(tmp_path: Path) -> Path:
    """Write the sample dump to disk."""
    path = tmp_path / "deps.json"
    path.write_text(SAMPLE)
    return path


@pytest.fixture
def graph() -> DepGraph:
    return load_deps(io.StringIO(SAMPLE))


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestLoader:
    """Tests for decoding `go list -json` output."""

    def test_iter_records(self) -> None:
        records = list(iter_records(SAMPLE))
        assert len(records) == 6
        assert records[1].import_path == UTIL
        assert records[1].name == "util"
        assert records[1].imports == ["strings"]
        assert records[5].imports == []
        assert records[5].deps == []

    def test_counts(self, graph: DepGraph) -> None:
        assert graph.stats().as_dict() == {"packages": 5, "main": 1, "test": 1}

    def test_variant_dropped(self, graph: DepGraph) -> None:
        assert not graph.exists(f"{UTIL} [{UTIL_TEST}]")
        assert graph.is_test(UTIL_TEST)
        assert graph.is_main(SERVER)

    def test_load_file(self, deps_file: Path) -> None:
        graph = load_file(deps_file)
        assert graph.count_all() == 5

    def test_objects_split_across_chunks(self) -> None:
        records = list(iter_stream_records(io.StringIO(SAMPLE), chunk_size=7))
        assert [r.import_path for r in records] == [
            r.import_path for r in iter_records(SAMPLE)
        ]
        assert records[2].deps == [UTIL, "fmt", "strings", "unicode"]

    @pytest.mark.parametrize("chunk_size", [4, 1024])
    def test_error_offset_is_stream_offset(self, chunk_size: int) -> None:
        stream = io.StringIO('{"ImportPath": "a"}\n{"ImportPath": ')
        records = iter_stream_records(stream, chunk_size=chunk_size)
        assert next(records).import_path == "a"
        with pytest.raises(DecodeError) as exc_info:
            next(records)

        assert "offset 35" in str(exc_info.value)


class TestQueries:
    """End-to-end queries over the sample."""

    def test_search(self, graph: DepGraph) -> None:
        assert search_all(graph, "strings") == [SERVER, UTIL, UTIL_TEST]
        assert search_main(graph, "strings") == [SERVER]
        assert search_test(graph, "strings") == [UTIL_TEST]

    def test_unused(self, graph: DepGraph) -> None:
        assert list_unused(graph) == [LEGACY]

    def test_chain(self, graph: DepGraph) -> None:
        chains = search_chain(graph, "strings")
        assert [c.packages for c in chains] == [[ROOT_LABEL, SERVER, UTIL, "strings"]]

    def test_chain_through_missing_package(self, graph: DepGraph) -> None:
        chains = search_chain(graph, "unicode")
        assert [c.packages for c in chains] == [[ROOT_LABEL, SERVER, PLACEHOLDER, "unicode"]]


class TestCli:
    """Tests for the command line interface."""

    def test_stats_json(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["stats", "--file", str(deps_file), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"packages": 5, "main": 1, "test": 1}

    def test_stats_text(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["stats", "-f", str(deps_file)])
        assert result.exit_code == 0
        assert "Packages: 5" in result.stdout

    def test_env_var(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["unused", "--json"], env={DEPS_ENV_VAR: str(deps_file)})
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"unused": [LEGACY]}

    def test_stdin(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["main", "strings", "--file", "-", "--json"], input=SAMPLE)
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"package": "strings", "main": [SERVER]}

    def test_test_and_all(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["test", "strings", "-f", str(deps_file), "-j"])
        assert json.loads(result.stdout)["test"] == [UTIL_TEST]

        result = runner.invoke(app, ["all", UTIL, "-f", str(deps_file), "-j"])
        assert json.loads(result.stdout)["packages"] == [SERVER]

    def test_chain(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["chain", "unicode", "-f", str(deps_file), "--json"])
        assert result.exit_code == 0
        chains = json.loads(result.stdout)["chains"]
        assert chains == [
            {
                "binary": SERVER,
                "complete": False,
                "chain": [ROOT_LABEL, SERVER, PLACEHOLDER, "unicode"],
            }
        ]

    def test_graph(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["graph", SERVER, "strings", "-f", str(deps_file), "-j"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["graph"] == {SERVER: [UTIL], UTIL: ["strings"]}

    def test_unknown_package(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["main", "nope", "-f", str(deps_file)])
        assert result.exit_code == 0
        assert "not found" in result.stdout
        assert "No main binaries depend on nope" in result.stdout

    def test_unloaded_dependency(self, runner: CliRunner, deps_file: Path) -> None:
        """A dependency that was never loaded itself still has dependents."""
        result = runner.invoke(app, ["main", "fmt", "-f", str(deps_file)])
        assert result.exit_code == 0
        assert "not found" not in result.stdout
        assert SERVER in result.stdout
        assert "Main binaries: 1" in result.stdout

    def test_no_test_binaries(self, runner: CliRunner, deps_file: Path) -> None:
        result = runner.invoke(app, ["test", "fmt", "-f", str(deps_file)])
        assert result.exit_code == 0
        assert "No test binaries depend on fmt" in result.stdout

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["stats", "-f", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "No dependency file found" in result.stdout

    def test_invalid_file(self, runner: CliRunner, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{")
        result = runner.invoke(app, ["unused", "-f", str(bad)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.stdout


class TestMcpHandlers:
    """Tests for the MCP tool handlers."""

    def test_stats(self, deps_file: Path) -> None:
        assert handle_tool("depquery_stats", {"file": str(deps_file)}) == {
            "packages": 5,
            "main": 1,
            "test": 1,
        }

    def test_main(self, deps_file: Path) -> None:
        result = handle_tool("depquery_main", {"package": "strings", "file": str(deps_file)})
        assert result == {"package": "strings", "main": [SERVER]}

    def test_unknown_package(self, deps_file: Path) -> None:
        result = handle_tool("depquery_all", {"package": "nope", "file": str(deps_file)})
        assert result["packages"] == []
        assert "nope" in result["error"]

    def test_unloaded_dependency(self, deps_file: Path) -> None:
        result = handle_tool("depquery_main", {"package": "fmt", "file": str(deps_file)})
        assert result == {"package": "fmt", "main": [SERVER]}

    def test_chain(self, deps_file: Path) -> None:
        result = handle_tool("depquery_chain", {"package": "strings", "file": str(deps_file)})
        assert result["chains"][0]["chain"] == [ROOT_LABEL, SERVER, UTIL, "strings"]
        assert result["chains"][0]["complete"] is True

    def test_graph_and_unused(self, deps_file: Path) -> None:
        args = {"start": SERVER, "target": "strings", "file": str(deps_file)}
        assert handle_tool("depquery_graph", args)["graph"] == {SERVER: [UTIL], UTIL: ["strings"]}
        assert handle_tool("depquery_unused", {"file": str(deps_file)}) == {"unused": [LEGACY]}

    def test_unknown_tool(self) -> None:
        assert handle_tool("nope", {}) == {"error": "Unknown tool: nope"}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DepsFileNotFoundError):
            handle_tool("depquery_stats", {"file": str(tmp_path / "missing.json")})


class TestCliBracketedNames:
    """Import paths with brackets are printed literally."""

    @pytest.fixture
    def bracket_file(self, tmp_path: Path) -> Path:
        path = tmp_path / "deps.json"
        path.write_text(
            json.dumps(
                {
                    "ImportPath": "cmd/app",
                    "Name": "main",
                    "Imports": ["x [bold]"],
                    "Deps": ["x [bold]", "x [/]"],
                }
            )
        )
        return path

    def test_unknown_variant_name(self, runner: CliRunner, bracket_file: Path) -> None:
        result = runner.invoke(app, ["main", "a [a.test]", "-f", str(bracket_file)])
        assert result.exit_code == 0
        assert "Package 'a [a.test]' not found" in result.stdout
        assert "No main binaries depend on a [a.test]" in result.stdout

    def test_closing_tag_name(self, runner: CliRunner, bracket_file: Path) -> None:
        result = runner.invoke(app, ["all", "x [/]", "-f", str(bracket_file)])
        assert result.exit_code == 0
        assert "cmd/app" in result.stdout

    def test_chain(self, runner: CliRunner, bracket_file: Path) -> None:
        result = runner.invoke(app, ["chain", "x [bold]", "-f", str(bracket_file)])
        assert result.exit_code == 0
        assert "└─ x [bold]" in result.stdout

    def test_graph(self, runner: CliRunner, bracket_file: Path) -> None:
        result = runner.invoke(app, ["graph", "cmd/app", "x [bold]", "-f", str(bracket_file)])
        assert result.exit_code == 0
        assert "cmd/app -> x [bold]" in result.stdout

        result = runner.invoke(app, ["graph", "cmd/app", "y [/cyan]", "-f", str(bracket_file)])
        assert result.exit_code == 0
        assert "does not depend on 'y [/cyan]'" in result.stdout
