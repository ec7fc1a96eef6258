"""Load DepGraph from ``go list -json`` output."""

from __future__ import annotations

import io
import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import TextIO

from depquery.core.exceptions import DecodeError, DepsFileNotFoundError
from depquery.core.graph.base import DepGraph
from depquery.core.models import Record

logger = logging.getLogger(__name__)

DEPS_ENV_VAR = "DEPQUERY_DEPS"
DEFAULT_DEPS_FILE = "deps.json"

_CHUNK_SIZE = 64 * 1024

_decoder = json.JSONDecoder()


def resolve_deps_path(path: Path | None = None) -> Path:
    """Pick the dependency file: explicit path, then $DEPQUERY_DEPS, then ./deps.json."""
    if path is not None:
        return path
    env = os.environ.get(DEPS_ENV_VAR)
    if env:
        return Path(env)
    return Path.cwd() / DEFAULT_DEPS_FILE


def iter_records(text: str) -> Iterator[Record]:
    """Decode a string of concatenated JSON objects into Records."""
    return iter_stream_records(io.StringIO(text))


def iter_stream_records(stream: TextIO, chunk_size: int = _CHUNK_SIZE) -> Iterator[Record]:
    """Decode a stream of concatenated JSON objects into Records.

    ``go list -json`` writes one object per package back to back, not a
    JSON array. The stream is read in chunks; an object that straddles a
    chunk boundary is retried once more text has arrived.
    """
    buf = ""
    pos = 0
    offset = 0  # stream offset of buf[0]
    eof = False

    while True:
        while pos < len(buf) and buf[pos].isspace():
            pos += 1

        if pos >= len(buf):
            if eof:
                return
            offset += len(buf)
            buf, pos = stream.read(chunk_size), 0
            eof = not buf
            continue

        try:
            value, next_pos = _decoder.raw_decode(buf, pos)
        except json.JSONDecodeError as e:
            if eof:
                raise DecodeError(f"Invalid JSON at offset {offset + e.pos}: {e.msg}") from e
            chunk = stream.read(chunk_size)
            eof = not chunk
            offset += pos
            buf, pos = buf[pos:] + chunk, 0
            continue

        if not isinstance(value, dict):
            raise DecodeError(
                f"Expected a package object at offset {offset + pos}, "
                f"got {type(value).__name__}"
            )

        yield Record.from_dict(value)
        pos = next_pos


def load_deps(stream: TextIO) -> DepGraph:
    """Build a graph from a text stream, decoding as it reads. O(total deps)."""
    graph = DepGraph()
    admitted = graph.insert_many(iter_stream_records(stream))
    logger.debug("Loaded %d package records: %r", admitted, graph)
    return graph


def load_file(path: Path) -> DepGraph:
    """Build a graph from a ``go list -json`` dump on disk."""
    if not path.exists():
        raise DepsFileNotFoundError(
            f"No dependency file found. Run 'go list -json -deps ./... > {DEFAULT_DEPS_FILE}' "
            f"first.\nExpected: {path}"
        )
    with path.open(encoding="utf-8") as f:
        return load_deps(f)
