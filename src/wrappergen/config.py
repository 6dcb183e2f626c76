from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Iterable


@dataclass(frozen=True)
class GeneratorConfig:
    """Exclusion policy for one generation run.

    `exclude_files` holds file base names (e.g. "mocks.go"); `exclude_interfaces`
    holds exact interface names.
    """

    exclude_files: frozenset[str] = frozenset()
    exclude_interfaces: frozenset[str] = frozenset()

    @classmethod
    def from_lists(
        cls,
        *,
        exclude_files: Iterable[str] = (),
        exclude_interfaces: Iterable[str] = (),
    ) -> "GeneratorConfig":
        return cls(exclude_files=frozenset(exclude_files), exclude_interfaces=frozenset(exclude_interfaces))

    def with_ignore_file_names(self, names: Iterable[str]) -> "GeneratorConfig":
        return replace(self, exclude_files=self.exclude_files | frozenset(names))

    def with_ignore_interface_names(self, names: Iterable[str]) -> "GeneratorConfig":
        return replace(self, exclude_interfaces=self.exclude_interfaces | frozenset(names))


def go_binary() -> str:
    """Return the Go toolchain binary to run.

    Override with `WRAPPERGEN_GO`.
    """
    return os.environ.get("WRAPPERGEN_GO") or "go"
