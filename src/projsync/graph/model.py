"""Module graph data model: modules, provenance, and the graph snapshot."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


class Provenance(enum.Enum):
    """Where a module's sources originate."""

    PROJECT_LOCAL = "project_local"
    EMBEDDED = "embedded"
    LOCAL = "local"
    REGISTRY = "registry"
    GIT = "git"
    BUILTIN = "builtin"
    LOCAL_TARBALL = "local_tarball"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> Provenance:
        """Map a YAML value to a provenance; unrecognized strings become UNKNOWN."""
        if value is None or value == "":
            return cls.PROJECT_LOCAL
        normalized = str(value).strip().lower().replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


# Provenances controlled by a configuration toggle (everything but project code).
PACKAGE_PROVENANCES: tuple[Provenance, ...] = tuple(
    p for p in Provenance if p is not Provenance.PROJECT_LOCAL
)


@dataclass(frozen=True)
class Module:
    """A compilable unit exposed by the host build system."""

    name: str
    source_files: tuple[str, ...] = ()
    compiled_references: tuple[str, ...] = ()
    module_references: tuple[str, ...] = ()
    provenance: Provenance = Provenance.PROJECT_LOCAL


@dataclass(frozen=True)
class Package:
    """A package root declared by the host's package manager."""

    name: str
    path: str
    source: Provenance


@dataclass
class ModuleGraph:
    """Snapshot of the host's modules, in the order the host exposes them."""

    modules: list[Module] = field(default_factory=list)
    packages: list[Package] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._by_name: dict[str, Module] = {}
        for module in self.modules:
            self._by_name.setdefault(module.name, module)

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def get(self, name: str) -> Module | None:
        return self._by_name.get(name)

    def provenance(self, source_path: str) -> Provenance:
        """Resolve the provenance of *source_path* from declared packages.

        The longest matching package path wins. Paths outside every package
        are project code.
        """
        normalized = _normalize(source_path)
        best: Package | None = None
        for package in self.packages:
            prefix = _normalize(package.path).rstrip("/")
            if not prefix:
                continue
            if normalized == prefix or normalized.startswith(prefix + "/"):
                if best is None or len(prefix) > len(_normalize(best.path).rstrip("/")):
                    best = package
        if best is None:
            return Provenance.PROJECT_LOCAL
        return best.source


def _normalize(path: str) -> str:
    """Use forward slashes and drop leading ``./`` segments."""
    normalized = path.replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized
