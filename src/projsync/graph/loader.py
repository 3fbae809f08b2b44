"""YAML module graph parser.

Reads ``.projsync/_graph/*.yml`` files exported by the host build system and
builds a :class:`ModuleGraph`.  Validates module-name uniqueness and reports
references to modules that are not part of the snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from projsync.graph.model import Module, ModuleGraph, Package, Provenance

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

STATE_DIR = ".projsync"
GRAPH_DIR = "_graph"


class GraphError(Exception):
    """Raised when a graph file is structurally invalid."""


@dataclass
class ParsedFile:
    """Result of parsing a single YAML graph file."""

    modules: list[dict[str, Any]] = field(default_factory=list)
    packages: list[dict[str, Any]] = field(default_factory=list)


def graph_dir_for(workspace_root: Path) -> Path:
    """Return the directory holding the exported module graph."""
    return workspace_root / STATE_DIR / GRAPH_DIR


def parse_graph_file(path: Path) -> ParsedFile:
    """Parse a single YAML graph file into raw module and package entries."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise GraphError(f"{path.name}: not valid UTF-8 ({exc.reason})") from exc
    data = yaml.safe_load(text)
    if data is None:
        return ParsedFile()
    if not isinstance(data, dict):
        raise GraphError(f"{path.name}: expected a mapping at the root")

    modules = data.get("modules") or []
    packages = data.get("packages") or []
    if not isinstance(modules, list) or not isinstance(packages, list):
        raise GraphError(f"{path.name}: 'modules' and 'packages' must be lists")
    return ParsedFile(modules=modules, packages=packages)


def _as_str_tuple(value: Any, *, key: str, owner: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise GraphError(f"Module '{owner}': '{key}' must be a list")
    return tuple(str(item) for item in value)


def load_graph(graph_dir: Path) -> ModuleGraph:
    """Load all ``*.yml`` files from *graph_dir* into a :class:`ModuleGraph`.

    Two-pass approach:
    1. Parse all files, collecting packages and modules in file order.
    2. Resolve each module's provenance and check references by name.

    A missing *graph_dir* yields an empty graph with a warning.
    """
    if not graph_dir.is_dir():
        graph = ModuleGraph()
        graph.warnings.append(f"Graph directory {graph_dir} not found, using empty graph")
        logger.warning("Graph directory %s not found", graph_dir)
        return graph

    raw_modules: list[dict[str, Any]] = []
    raw_packages: list[dict[str, Any]] = []
    for yml_path in sorted(graph_dir.glob("*.yml")):
        parsed = parse_graph_file(yml_path)
        raw_modules.extend(parsed.modules)
        raw_packages.extend(parsed.packages)

    errors: list[str] = []
    warnings: list[str] = []

    packages: list[Package] = []
    for entry in raw_packages:
        if not isinstance(entry, dict) or not entry.get("path"):
            errors.append("Package missing path, skipped")
            continue
        packages.append(
            Package(
                name=str(entry.get("name", entry["path"])),
                path=str(entry["path"]),
                source=Provenance.parse(entry.get("source", "unknown")),
            )
        )

    # --- Pass 1: collect modules ---
    lookup = ModuleGraph(packages=packages)
    modules: list[Module] = []
    seen_names: set[str] = set()
    for entry in raw_modules:
        if not isinstance(entry, dict):
            errors.append("Module entry is not a mapping, skipped")
            continue
        name = str(entry.get("name") or "")
        if not name:
            errors.append("Module missing name, skipped")
            continue
        if "/" in name or "\\" in name or name in {".", ".."}:
            errors.append(f"Module '{name}' is not a valid file name, skipped")
            continue
        if name in seen_names:
            errors.append(f"Duplicate module '{name}', skipped")
            continue
        seen_names.add(name)

        sources = _as_str_tuple(entry.get("sources"), key="sources", owner=name)
        if "provenance" in entry:
            provenance = Provenance.parse(entry.get("provenance"))
        elif sources:
            # The first source file decides which package the module belongs to.
            provenance = lookup.provenance(sources[0])
        else:
            provenance = Provenance.PROJECT_LOCAL

        modules.append(
            Module(
                name=name,
                source_files=sources,
                compiled_references=_as_str_tuple(
                    entry.get("references"), key="references", owner=name
                ),
                module_references=_as_str_tuple(
                    entry.get("modules"), key="modules", owner=name
                ),
                provenance=provenance,
            )
        )

    # --- Pass 2: check module references ---
    for module in modules:
        for ref in module.module_references:
            if ref not in seen_names:
                warnings.append(f"Module '{module.name}' references unknown module '{ref}'")

    logger.debug("Loaded %d modules and %d packages from %s", len(modules), len(packages), graph_dir)
    return ModuleGraph(modules=modules, packages=packages, errors=errors, warnings=warnings)


class YamlGraphProvider:
    """Module graph provider backed by the exported YAML graph of a workspace."""

    def __init__(self, workspace_root: Path) -> None:
        self.graph_dir = graph_dir_for(workspace_root)

    def load(self) -> ModuleGraph:
        return load_graph(self.graph_dir)
