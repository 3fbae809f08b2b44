"""Doctor: validation checks for the exported module graph."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING

from projsync.generation.filtering import FilterPolicy

if TYPE_CHECKING:
    from projsync.graph.model import ModuleGraph
    from projsync.infrastructure.config import Configuration


class Severity(enum.Enum):
    """Severity level for a check result."""

    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Check:
    """Result of a single validation check."""

    name: str
    severity: Severity
    description: str


def _check_load_errors(graph: ModuleGraph) -> list[Check]:
    """Entries the loader had to skip."""
    if not graph.errors:
        return [Check("load_errors", Severity.OK, "All graph entries loaded.")]
    return [Check("load_errors", Severity.ERROR, err) for err in graph.errors]


def _check_dangling_references(graph: ModuleGraph) -> list[Check]:
    """References to modules missing from the snapshot."""
    results: list[Check] = []
    for module in graph:
        for ref in module.module_references:
            if graph.get(ref) is None:
                results.append(
                    Check(
                        "dangling_references",
                        Severity.WARNING,
                        f"Module '{module.name}' references unknown module '{ref}'.",
                    )
                )
    if not results:
        return [Check("dangling_references", Severity.OK, "All module references resolve.")]
    return results


def find_cycles(graph: ModuleGraph) -> list[list[str]]:
    """Return reference cycles as name paths that start and end on the same module.

    Iterative DFS with a visited set; each cycle is reported once, from the
    first module on it in graph order.
    """
    done: set[str] = set()
    cycles: list[list[str]] = []
    seen_cycles: set[frozenset[str]] = set()

    for root in graph:
        if root.name in done:
            continue
        path: list[str] = []
        on_path: set[str] = set()
        stack: list[tuple[str, int]] = [(root.name, 0)]
        while stack:
            name, index = stack.pop()
            module = graph.get(name)
            refs = module.module_references if module is not None else ()
            if index == 0:
                path.append(name)
                on_path.add(name)
            if index < len(refs):
                stack.append((name, index + 1))
                ref = refs[index]
                if ref in on_path:
                    cycle = [*path[path.index(ref):], ref]
                    key = frozenset(cycle)
                    if key not in seen_cycles:
                        seen_cycles.add(key)
                        cycles.append(cycle)
                elif ref not in done and graph.get(ref) is not None:
                    stack.append((ref, 0))
            else:
                path.pop()
                on_path.discard(name)
                done.add(name)
    return cycles


def _check_cycles(graph: ModuleGraph) -> list[Check]:
    cycles = find_cycles(graph)
    if not cycles:
        return [Check("reference_cycles", Severity.OK, "Module references are acyclic.")]
    return [
        Check("reference_cycles", Severity.ERROR, f"Reference cycle: {' -> '.join(cycle)}")
        for cycle in cycles
    ]


def _check_empty_modules(graph: ModuleGraph) -> list[Check]:
    """Modules without sources never get a project."""
    empty = [m.name for m in graph if not m.source_files]
    if not empty:
        return [Check("empty_modules", Severity.OK, "All modules have source files.")]
    return [
        Check("empty_modules", Severity.INFO, f"Module '{name}' has no source files.")
        for name in empty
    ]


def _check_pruned_references(graph: ModuleGraph, config: Configuration) -> list[Check]:
    """Included modules whose references point at excluded modules."""
    policy = FilterPolicy(config)
    results: list[Check] = []
    for module in graph:
        if not policy.include(module):
            continue
        for ref in module.module_references:
            target = graph.get(ref)
            if target is not None and not policy.include(target):
                results.append(
                    Check(
                        "pruned_references",
                        Severity.INFO,
                        f"Module '{module.name}' references excluded module "
                        f"'{ref}' ({target.provenance.value}); reference omitted.",
                    )
                )
    if not results:
        return [Check("pruned_references", Severity.OK, "No references are pruned.")]
    return results


def run_checks(graph: ModuleGraph, config: Configuration) -> list[Check]:
    """Run all validation checks and return results."""
    results: list[Check] = []
    results.extend(_check_load_errors(graph))
    results.extend(_check_dangling_references(graph))
    results.extend(_check_cycles(graph))
    results.extend(_check_empty_modules(graph))
    results.extend(_check_pruned_references(graph, config))
    return results
