"""Data models for depquery."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

MAIN_NAME = "main"
TEST_SUFFIX = ".test"
VARIANT_SUFFIX = "]"

# Labels used when rendering chains
ROOT_LABEL = "main"
PLACEHOLDER = "..."


@dataclass
class Record:
    """One package as reported by ``go list -json``."""

    import_path: str
    name: str = ""
    imports: list[str] = field(default_factory=list)
    deps: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Record:
        """Create a Record from a decoded ``go list -json`` object."""
        return cls(
            import_path=data.get("ImportPath") or "",
            name=data.get("Name") or "",
            imports=list(data.get("Imports") or []),
            deps=list(data.get("Deps") or []),
        )

    def imports_set(self) -> set[str]:
        return set(self.imports)

    def deps_set(self) -> set[str]:
        return set(self.deps)

    @property
    def is_main(self) -> bool:
        return self.name == MAIN_NAME

    @property
    def is_test_binary(self) -> bool:
        return self.import_path.endswith(TEST_SUFFIX)

    @property
    def is_variant(self) -> bool:
        """True for synthesized build variants such as ``pkg [pkg.test]``."""
        return self.import_path.endswith(VARIANT_SUFFIX)


@dataclass(frozen=True)
class GraphStats:
    """Package counts of a built graph."""

    packages: int
    main: int
    test: int

    def as_dict(self) -> dict[str, int]:
        return {"packages": self.packages, "main": self.main, "test": self.test}
