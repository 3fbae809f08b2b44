"""File watcher: feed change batches into the sync engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from projsync.generation.engine import REIMPORT_EXTENSIONS
from projsync.graph.loader import GRAPH_DIR, STATE_DIR

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from projsync.generation.engine import SyncEngine

DEFAULT_DEBOUNCE_MS = 500

# Host directories holding generated or cached content.
_IGNORED_DIRS = frozenset({"Library", "Temp", "Logs", "obj", "Obj", "Build", "build"})


def _is_graph_file(path_str: str, workspace_root: Path) -> bool:
    """Check if *path_str* is inside the ``.projsync/_graph/`` directory."""
    graph_prefix = str(workspace_root / STATE_DIR / GRAPH_DIR) + "/"
    return path_str.startswith(graph_prefix)


def _filter_relevant(
    changes: Iterable[tuple[object, str]],
    workspace_root: Path,
) -> list[tuple[object, str]]:
    """Drop temp files, hidden directories and host cache directories."""
    result: list[tuple[object, str]] = []

    for change_type, path_str in changes:
        p = Path(path_str)

        # Ignore temp files (name starts with ~ or ends with .tmp).
        if p.name.startswith("~") or p.name.endswith(".tmp"):
            continue

        try:
            rel = p.relative_to(workspace_root)
        except ValueError:
            continue

        # Hidden directories are skipped, except our own state directory.
        skip = False
        for part in rel.parts[:-1]:
            if (part.startswith(".") and part != STATE_DIR) or part in _IGNORED_DIRS:
                skip = True
                break
        if skip:
            continue

        result.append((change_type, path_str))

    return result


def _split_batch(
    changes: list[tuple[object, str]],
    workspace_root: Path,
) -> tuple[list[str], list[str]]:
    """Split a batch into (changed, reimported) workspace-relative paths.

    Added or modified binaries and module definitions count as reimports.
    """
    from watchfiles import Change

    changed: list[str] = []
    reimported: list[str] = []
    for change_type, path_str in changes:
        rel = Path(path_str).relative_to(workspace_root).as_posix()
        changed.append(rel)
        imported = change_type in (Change.added, Change.modified)
        if imported and Path(rel).suffix in REIMPORT_EXTENSIONS:
            reimported.append(rel)
    return changed, reimported


def _format_time() -> str:
    """Return current time as ``HH:MM:SS`` string."""
    return datetime.now(tz=timezone.utc).strftime("%H:%M:%S")


@dataclass(frozen=True)
class WatchEvent:
    """A single watch event after filtering and debounce."""

    files_changed: int
    is_graph_change: bool
    sync_type: str  # "full" | "incremental" | "skipped"
    ok: bool = True


def watch(
    engine: SyncEngine,
    debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    callback: Callable[[WatchEvent], None] | None = None,
) -> None:
    """Watch the workspace and sync generated projects on changes.

    Graph changes always regenerate; other batches go through
    ``sync_if_needed``.

    Requires ``watchfiles`` (optional dependency).
    """
    from rich.console import Console
    from watchfiles import watch as fs_watch

    console = Console()
    workspace_root = engine.workspace_root.resolve()

    console.print(f"[bold blue]Watching:[/bold blue] {workspace_root}")
    console.print(f"[dim]Debounce: {debounce_ms}ms  |  Press Ctrl+C to stop[/dim]")
    console.print()

    try:
        for batch in fs_watch(workspace_root, debounce=debounce_ms):
            relevant = _filter_relevant(batch, workspace_root)
            if not relevant:
                continue

            graph_changed = any(_is_graph_file(path_str, workspace_root) for _, path_str in relevant)

            if graph_changed:
                result = engine.sync_always()
                sync_type = "full"
            else:
                changed, reimported = _split_batch(relevant, workspace_root)
                result = engine.sync_if_needed(changed, reimported)
                sync_type = "incremental" if result.regenerated else "skipped"

            if sync_type != "skipped":
                timestamp = _format_time()
                status = "[green]ok[/green]" if result.ok else "[red]failed[/red]"
                console.print(
                    f"[dim]{timestamp}[/dim] "
                    f"{sync_type} sync {status} "
                    f"({len(relevant)} file{'s' if len(relevant) != 1 else ''} changed)"
                )
                for err in result.errors:
                    console.print(f"  [red][ERR][/red] {err}")

            if callback is not None:
                callback(
                    WatchEvent(
                        files_changed=len(relevant),
                        is_graph_change=graph_changed,
                        sync_type=sync_type,
                        ok=result.ok,
                    )
                )

    except KeyboardInterrupt:
        console.print("\n[yellow]Watch stopped.[/yellow]")
