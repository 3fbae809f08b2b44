"""projsync CLI entry point."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml

from projsync import __version__

if TYPE_CHECKING:
    from projsync.generation.engine import SyncResult

_PROJECT_OPTION = click.option(
    "--project",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Workspace root (default: current directory).",
)


def _configure_logging(*, verbose: bool, quiet: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logger = logging.getLogger("projsync")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=verbose, show_time=verbose)
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False


@click.group()
@click.version_option(version=__version__, prog_name="projsync")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Minimal output (errors only).")
@click.pass_context
def main(ctx: click.Context, *, verbose: bool, quiet: bool) -> None:
    """projsync - IDE project and solution generator."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    _configure_logging(verbose=verbose, quiet=quiet)


def _report(result: SyncResult, *, quiet: bool) -> None:
    if not quiet:
        if result.skipped:
            click.echo("No relevant changes. Projects are up to date.")
        else:
            click.echo(f"Projects: {result.modules_included}")
            click.echo(f"Excluded: {result.modules_excluded}")
            click.echo(f"Written:  {len(result.written)}")
        for warn in result.warnings:
            click.echo(f"  [warn] {warn}")
    for err in result.errors:
        click.echo(f"  [ERR] {err}", err=True)
    if not result.ok:
        sys.exit(1)


@main.command()
@_PROJECT_OPTION
def init(*, project: Path | None) -> None:
    """Create the .projsync state directory with default settings."""
    from projsync.graph.loader import graph_dir_for
    from projsync.infrastructure.config import ConfigStore

    workspace_root = project or Path.cwd()
    graph_dir = graph_dir_for(workspace_root)
    graph_dir.mkdir(parents=True, exist_ok=True)

    store = ConfigStore(workspace_root)
    if not store.path.exists():
        store.save(store.config)
    click.echo(f"Graph:  {graph_dir}")
    click.echo(f"Config: {store.path}")


@main.command()
@_PROJECT_OPTION
@click.pass_context
def sync(ctx: click.Context, *, project: Path | None) -> None:
    """Regenerate all projects, the solution and editor settings."""
    from projsync.generation.engine import SyncEngine

    engine = SyncEngine(project or Path.cwd())
    _report(engine.sync_always(), quiet=ctx.obj["quiet"])


@main.command("sync-if-needed")
@click.argument("changed", nargs=-1)
@click.option(
    "--reimported",
    "reimported",
    multiple=True,
    help="Reimported asset path (repeatable).",
)
@_PROJECT_OPTION
@click.pass_context
def sync_if_needed(
    ctx: click.Context,
    changed: tuple[str, ...],
    *,
    reimported: tuple[str, ...],
    project: Path | None,
) -> None:
    """Regenerate only if CHANGED or reimported paths affect the solution."""
    from projsync.generation.engine import SyncEngine

    engine = SyncEngine(project or Path.cwd())
    _report(engine.sync_if_needed(changed, reimported), quiet=ctx.obj["quiet"])


@main.command()
@_PROJECT_OPTION
@click.option("--json", "output_json", is_flag=True, help="Output as JSON.")
def status(*, project: Path | None, output_json: bool) -> None:
    """Show modules, their provenance and whether they get a project."""
    from projsync.generation.engine import SyncEngine
    from projsync.generation.filtering import FilterPolicy
    from projsync.generation.identifiers import derive_id
    from projsync.graph.loader import GraphError

    engine = SyncEngine(project or Path.cwd())
    try:
        graph = engine.provider.load()
    except (GraphError, yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    policy = FilterPolicy(engine.config)
    rows = [
        {
            "name": m.name,
            "provenance": m.provenance.value,
            "sources": len(m.source_files),
            "included": policy.include(m),
            "guid": derive_id(m.name),
        }
        for m in graph
    ]

    if output_json:
        data = {
            "solution": str(engine.index_path),
            "generated": engine.has_index_been_written(),
            "modules": rows,
        }
        click.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return

    from rich.console import Console
    from rich.table import Table

    console = Console()
    generated = "yes" if engine.has_index_been_written() else "no"
    console.print(f"Solution: [bold]{engine.index_path.name}[/] (generated: {generated})")
    console.print()

    table = Table(title="Modules", box=None, padding=(0, 1))
    table.add_column("module", style="cyan")
    table.add_column("provenance")
    table.add_column("sources", justify="right")
    table.add_column("project")
    table.add_column("guid", style="dim")
    for row in rows:
        table.add_row(
            str(row["name"]),
            str(row["provenance"]),
            str(row["sources"]),
            "[green]yes[/]" if row["included"] else "[dim]no[/]",
            str(row["guid"]),
        )
    console.print(table)


@main.command()
@_PROJECT_OPTION
def doctor(*, project: Path | None) -> None:
    """Run validation checks on the module graph."""
    from projsync.generation.engine import SyncEngine
    from projsync.graph.loader import GraphError
    from projsync.infrastructure.doctor import Severity, run_checks

    engine = SyncEngine(project or Path.cwd())
    try:
        graph = engine.provider.load()
    except (GraphError, yaml.YAMLError, OSError, UnicodeDecodeError) as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    checks = run_checks(graph, engine.config)

    icons = {
        Severity.OK: "[ok]",
        Severity.INFO: "[info]",
        Severity.WARNING: "[warn]",
        Severity.ERROR: "[ERR]",
    }

    for check in checks:
        icon = icons.get(check.severity, "[?]")
        click.echo(f"  {icon} {check.description}")

    if any(c.severity == Severity.ERROR for c in checks):
        sys.exit(1)


@main.group()
def config() -> None:
    """Show or change generation settings."""


@config.command("show")
@_PROJECT_OPTION
def config_show(*, project: Path | None) -> None:
    """Print the effective settings."""
    from projsync.graph.model import PACKAGE_PROVENANCES
    from projsync.infrastructure.config import ConfigStore

    current = ConfigStore(project or Path.cwd()).config
    for provenance in PACKAGE_PROVENANCES:
        click.echo(f"{provenance.value + ':':15s}{str(current.is_enabled(provenance)).lower()}")
    click.echo(f"{'meta_files:':15s}{str(current.meta_files_visible).lower()}")
    if current.editor_path:
        click.echo(f"{'editor:':15s}{current.editor_path}")


@config.command("set")
@click.argument("key")
@click.argument("value")
@_PROJECT_OPTION
def config_set(key: str, value: str, *, project: Path | None) -> None:
    """Set KEY (a provenance, meta_files or editor) to VALUE."""
    from dataclasses import replace

    from projsync.graph.model import PACKAGE_PROVENANCES, Provenance
    from projsync.infrastructure.config import META_FILES_KEY, ConfigStore, parse_bool

    store = ConfigStore(project or Path.cwd())
    normalized = key.strip().lower().replace("-", "_")

    if normalized == "editor":
        store.save(replace(store.config, editor_path=value or None))
        click.echo(f"editor = {value}")
        return

    enabled = parse_bool(value)
    if enabled is None:
        click.echo(f"Error: '{value}' is not a boolean.", err=True)
        sys.exit(1)

    if normalized == META_FILES_KEY:
        store.set_meta_files(enabled)
    else:
        valid = {p.value: p for p in PACKAGE_PROVENANCES}
        if normalized not in valid:
            names = ", ".join([*valid, META_FILES_KEY, "editor"])
            click.echo(f"Error: unknown key '{key}'. Expected one of: {names}", err=True)
            sys.exit(1)
        provenance: Provenance = valid[normalized]
        store.set_toggle(provenance, enabled)
    click.echo(f"{normalized} = {str(enabled).lower()}")


@main.command("open")
@click.argument("file_path", required=False, default=None)
@click.option("--line", default=1, type=int, help="Line to jump to.")
@click.option("--column", default=1, type=int, help="Column to jump to.")
@click.option("--editor", "editor_path", default=None, help="Editor executable to use.")
@_PROJECT_OPTION
def open_cmd(
    file_path: str | None,
    *,
    line: int,
    column: int,
    editor_path: str | None,
    project: Path | None,
) -> None:
    """Open the workspace in the editor, optionally at FILE_PATH:LINE:COLUMN."""
    from projsync.infrastructure.config import ConfigStore
    from projsync.infrastructure.launcher import Target, open_in_editor

    workspace_root = project or Path.cwd()
    installation = editor_path or ConfigStore(workspace_root).config.editor_path
    target = Target(file_path, line, column) if file_path else None

    if not open_in_editor(workspace_root, target, installation=installation):
        click.echo("Editor not opened.", err=True)
        sys.exit(1)


@main.command("watch")
@click.option(
    "--debounce",
    default=500,
    type=int,
    help="Debounce delay in milliseconds (default: 500).",
)
@_PROJECT_OPTION
def watch_cmd(*, debounce: int, project: Path | None) -> None:
    """Watch the workspace and keep generated projects in sync.

    Graph changes trigger a full sync; other changes sync only when needed.
    Requires watchfiles: pip install projsync[watch]
    """
    try:
        from projsync.infrastructure.watcher import watch
    except ImportError:
        click.echo(
            "Error: watch requires 'watchfiles'. "
            "Install with: pip install projsync[watch]",
            err=True,
        )
        sys.exit(1)

    from projsync.generation.engine import SyncEngine

    try:
        watch(SyncEngine(project or Path.cwd()), debounce_ms=debounce)
    except ImportError:
        click.echo(
            "Error: watch requires 'watchfiles'. "
            "Install with: pip install projsync[watch]",
            err=True,
        )
        sys.exit(1)
