"""Data models for graph queries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from depquery.core.models import PLACEHOLDER


@dataclass
class Chain:
    """A witness chain from the binary root to a target package.

    ``packages`` reads ``ROOT_LABEL, binary, ..., target``.
    """

    binary: str
    target: str
    packages: list[str]

    @property
    def complete(self) -> bool:
        """False when the direct-import data could not bridge the gap."""
        return PLACEHOLDER not in self.packages

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[str]:
        return iter(self.packages)

    def __str__(self) -> str:
        return " -> ".join(self.packages)

    def __repr__(self) -> str:
        return f"Chain({self})"
