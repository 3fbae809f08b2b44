"""Sync engine: decide whether to regenerate, then write projects and solution.

Every regeneration recomputes the included-module set and all output from
scratch; nothing is patched in place.  Callers are expected to serialize
invocations for one workspace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Protocol

import yaml

from projsync.generation.descriptor import build_descriptor, descriptor_filename, render_descriptor
from projsync.generation.filtering import FilterPolicy
from projsync.generation.settings import SETTINGS_DIR, SETTINGS_FILE, render_settings
from projsync.generation.solution import INDEX_EXTENSION, serialize_index
from projsync.graph.loader import GraphError, YamlGraphProvider
from projsync.infrastructure.config import ConfigStore

if TYPE_CHECKING:
    from collections.abc import Iterable

    from projsync.graph.model import ModuleGraph
    from projsync.infrastructure.config import Configuration

logger = logging.getLogger(__name__)

# Changes to these files alter the solution contents.
SOLUTION_EXTENSIONS = frozenset({".cs", ".asmdef", ".shader"})
# Reimporting these files alters module references.
REIMPORT_EXTENSIONS = frozenset({".dll", ".asmdef"})


class GraphProvider(Protocol):
    """Anything that can produce the current module graph."""

    def load(self) -> ModuleGraph: ...


class StaticGraphProvider:
    """Provider returning a fixed, already-built graph."""

    def __init__(self, graph: ModuleGraph) -> None:
        self.graph = graph

    def load(self) -> ModuleGraph:
        return self.graph


@dataclass
class SyncResult:
    """Summary of a sync invocation."""

    regenerated: bool = False
    modules_included: int = 0
    modules_excluded: int = 0
    written: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def skipped(self) -> bool:
        return not self.regenerated and not self.errors


def _extension(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).suffix


def is_solution_file(path: str) -> bool:
    return _extension(path) in SOLUTION_EXTENSIONS


def should_sync_on_reimport(path: str) -> bool:
    return _extension(path) in REIMPORT_EXTENSIONS


def needs_sync(
    changed_paths: Iterable[str],
    reimported_paths: Iterable[str],
    *,
    index_exists: bool,
) -> bool:
    """Return True when the change batch requires regeneration."""
    if not index_exists:
        return True
    if any(is_solution_file(p) for p in changed_paths):
        return True
    return any(should_sync_on_reimport(p) for p in reimported_paths)


class SyncEngine:
    """Generates project descriptors, the solution index and editor settings."""

    def __init__(
        self,
        workspace_root: Path,
        *,
        provider: GraphProvider | None = None,
        config_store: ConfigStore | None = None,
        config: Configuration | None = None,
    ) -> None:
        self.workspace_root = workspace_root
        self.provider: GraphProvider = provider or YamlGraphProvider(workspace_root)
        self.config_store = config_store or ConfigStore(workspace_root)
        self._config = config

    @property
    def config(self) -> Configuration:
        if self._config is not None:
            return self._config
        return self.config_store.config

    def _reload_config(self) -> Configuration:
        # The stored settings may change between syncs of a long-lived engine.
        if self._config is not None:
            return self._config
        return self.config_store.reload()

    @property
    def index_path(self) -> Path:
        return self.workspace_root / f"{self.workspace_root.resolve().name}{INDEX_EXTENSION}"

    @property
    def settings_path(self) -> Path:
        return self.workspace_root / SETTINGS_DIR / SETTINGS_FILE

    def has_index_been_written(self) -> bool:
        return self.index_path.is_file()

    def sync_if_needed(
        self,
        changed_paths: Iterable[str],
        reimported_paths: Iterable[str] = (),
    ) -> SyncResult:
        """Regenerate only when the change batch can affect generated files."""
        if not needs_sync(
            list(changed_paths),
            list(reimported_paths),
            index_exists=self.has_index_been_written(),
        ):
            logger.debug("No solution-relevant changes, skipping sync")
            return SyncResult()
        return self.sync_always()

    def sync_always(self) -> SyncResult:
        """Regenerate every descriptor, the index and the settings document."""
        result = SyncResult(regenerated=True)

        try:
            graph = self.provider.load()
            config = self._reload_config()
        except (GraphError, yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
            logger.error("Failed to load module graph: %s", exc)
            result.errors.append(f"Failed to load module graph: {exc}")
            return result

        # Skipped graph entries do not stop generation for the rest.
        result.warnings.extend(graph.errors)
        result.warnings.extend(graph.warnings)

        policy = FilterPolicy(config)

        # Render everything before touching the disk.
        outputs: list[tuple[Path, str]] = []
        for module in graph:
            if not policy.include(module):
                result.modules_excluded += 1
                continue
            result.modules_included += 1
            descriptor = build_descriptor(module, graph, policy)
            outputs.append((
                self.workspace_root / descriptor_filename(module.name),
                render_descriptor(descriptor),
            ))
        outputs.append((self.index_path, serialize_index(graph, policy)))
        outputs.append((
            self.settings_path,
            render_settings(meta_files_visible=config.meta_files_visible),
        ))

        for path, content in outputs:
            try:
                _write(path, content)
            except OSError as exc:
                logger.error("Failed to write %s: %s", path, exc)
                result.errors.append(f"Failed to write {path.name}: {exc}")
                break
            result.written.append(path)

        logger.info(
            "Synced %d project(s), %d excluded, %d file(s) written",
            result.modules_included,
            result.modules_excluded,
            len(result.written),
        )
        return result


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Bytes keep CRLF line endings intact on every platform.
    path.write_bytes(content.encode("utf-8"))
