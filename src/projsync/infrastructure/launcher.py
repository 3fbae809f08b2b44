"""External editor launcher: open the workspace, optionally at a file position."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

EDITOR_NAME = "Antigravity"

# Host asset formats that the host edits itself.
UNHANDLED_EXTENSIONS = frozenset(
    {
        ".unity",
        ".prefab",
        ".asset",
        ".mat",
        ".meta",
        ".anim",
        ".controller",
        ".overridecontroller",
        ".physicmaterial",
        ".mask",
        ".mixer",
        ".playable",
        ".signal",
        ".spriteatlas",
        ".terrainlayer",
        ".lighting",
        ".rendertexture",
    }
)


@dataclass(frozen=True)
class Installation:
    """A located editor executable."""

    name: str
    path: str


@dataclass(frozen=True)
class Target:
    """A position to jump to once the editor is open."""

    file_path: str
    line: int = 1
    column: int = 1


def known_paths(platform: str | None = None) -> list[str]:
    """Candidate install locations for the current (or given) platform."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        local_app_data = os.environ.get("LOCALAPPDATA", "")
        program_files = os.environ.get("ProgramFiles", r"C:\Program Files")
        return [
            str(Path(local_app_data, "Programs", EDITOR_NAME, f"{EDITOR_NAME}.exe")),
            str(Path(program_files, EDITOR_NAME, f"{EDITOR_NAME}.exe")),
        ]
    if platform == "darwin":
        return [
            f"/Applications/{EDITOR_NAME}.app",
            f"/Applications/{EDITOR_NAME}.app/Contents/MacOS/{EDITOR_NAME}",
        ]
    on_path = shutil.which(EDITOR_NAME.lower())
    return [on_path] if on_path else []


def find_installations(platform: str | None = None) -> list[Installation]:
    """Return the known install locations that exist on this machine."""
    platform = platform or sys.platform
    found: list[Installation] = []
    for candidate in known_paths(platform):
        path = Path(candidate)
        if path.is_file() or (platform == "darwin" and path.is_dir()):
            found.append(Installation(name=EDITOR_NAME, path=candidate))
    return found


def installation_for_path(editor_path: str) -> Installation | None:
    """Recognize a user-chosen editor path as this editor."""
    if EDITOR_NAME.lower() in editor_path.lower():
        return Installation(name=EDITOR_NAME, path=editor_path)
    return None


def is_handled(file_path: str) -> bool:
    return PurePosixPath(file_path.replace("\\", "/")).suffix.lower() not in UNHANDLED_EXTENSIONS


def build_command(
    installation: str,
    workspace_root: Path,
    target: Target | None = None,
    *,
    platform: str | None = None,
) -> list[str]:
    """Build the argv that opens *workspace_root* and jumps to *target*."""
    platform = platform or sys.platform
    arguments = [str(workspace_root)]
    if target is not None:
        line = max(target.line, 1)
        column = max(target.column, 1)
        arguments.extend(["-g", f"{target.file_path}:{line}:{column}"])

    if platform == "darwin" and installation.endswith(".app"):
        return ["/usr/bin/open", "-a", installation, "-n", "--args", *arguments]
    return [installation, *arguments]


def open_in_editor(
    workspace_root: Path,
    target: Target | None = None,
    *,
    installation: str | None = None,
    platform: str | None = None,
) -> bool:
    """Start the editor; return False when the request is not handled.

    Not handled means: the target is a host asset format, no installation
    could be located, or the process failed to start.
    """
    if target is not None and not is_handled(target.file_path):
        logger.debug("Not opening %s: asset format handled by the host", target.file_path)
        return False

    if installation is None:
        installations = find_installations(platform)
        if not installations:
            logger.error("No %s installation found", EDITOR_NAME)
            return False
        installation = installations[0].path

    command = build_command(installation, workspace_root, target, platform=platform)
    logger.debug("Launching editor: %s", command)
    try:
        subprocess.Popen(  # noqa: S603
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as exc:
        logger.error("Failed to open %s: %s", EDITOR_NAME, exc)
        return False
    return True
