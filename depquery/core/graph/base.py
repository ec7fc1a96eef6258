"""Core DepGraph class: ingestion and membership queries."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from depquery.core.models import GraphStats, Record

logger = logging.getLogger(__name__)

_EMPTY: frozenset[str] = frozenset()


class DepGraph:
    """Package import graph built from ``Record``s.

    Built once with ``insert`` and queried read-only afterwards. Insertion is
    not thread-safe; concurrent reads of a fully built graph are.
    """

    __slots__ = ("_imports", "_deps", "_main", "_test")

    def __init__(self) -> None:
        self._imports: dict[str, frozenset[str]] = {}
        self._deps: dict[str, frozenset[str]] = {}
        self._main: set[str] = set()
        self._test: set[str] = set()

    def insert(self, record: Record) -> None:
        """Add one package, replacing any previous entry for its path. O(deps)."""
        if record.is_variant:
            logger.debug("Skipping build variant %s", record.import_path)
            return

        # Classification is additive: a later record never removes a path
        if record.is_main:
            if record.is_test_binary:
                self._test.add(record.import_path)
            else:
                self._main.add(record.import_path)

        self._imports[record.import_path] = frozenset(record.imports_set())
        self._deps[record.import_path] = frozenset(record.deps_set())

    def insert_many(self, records: Iterable[Record]) -> int:
        """Insert records in order. Returns how many were admitted."""
        admitted = 0
        for record in records:
            if not record.is_variant:
                admitted += 1
            self.insert(record)
        return admitted

    def exists(self, package: str) -> bool:
        """Whether a package was ingested. O(1)."""
        return package in self._deps

    def is_main(self, package: str) -> bool:
        return package in self._main

    def is_test(self, package: str) -> bool:
        return package in self._test

    def count_all(self) -> int:
        return len(self._deps)

    def count_main(self) -> int:
        return len(self._main)

    def count_test(self) -> int:
        return len(self._test)

    def stats(self) -> GraphStats:
        return GraphStats(
            packages=self.count_all(),
            main=self.count_main(),
            test=self.count_test(),
        )

    def direct_imports(self, package: str) -> frozenset[str]:
        """Direct imports of a package. Empty if unknown."""
        return self._imports.get(package, _EMPTY)

    def all_deps(self, package: str) -> frozenset[str]:
        """Transitive dependencies of a package. Empty if unknown."""
        return self._deps.get(package, _EMPTY)

    @property
    def packages(self) -> frozenset[str]:
        return frozenset(self._deps)

    @property
    def main_packages(self) -> frozenset[str]:
        return frozenset(self._main)

    @property
    def test_packages(self) -> frozenset[str]:
        return frozenset(self._test)

    def __len__(self) -> int:
        return self.count_all()

    def __contains__(self, package: object) -> bool:
        return package in self._deps

    def __repr__(self) -> str:
        return (
            f"DepGraph(packages={self.count_all()}, main={self.count_main()}, "
            f"test={self.count_test()})"
        )
