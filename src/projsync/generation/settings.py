"""Editor workspace settings (``.vscode/settings.json``)."""

from __future__ import annotations

import json

SETTINGS_DIR = ".vscode"
SETTINGS_FILE = "settings.json"
META_PATTERN = "**/*.meta"

# Hidden from the editor's file tree. ``META_PATTERN`` is toggled separately.
EXCLUDE_PATTERNS: tuple[str, ...] = (
    "**/.DS_Store",
    "**/.git",
    "**/.gitignore",
    "**/.gitmodules",
    "**/*.booproj",
    "**/*.pidb",
    "**/*.suo",
    "**/*.user",
    "**/*.userprefs",
    "**/*.unityproj",
    "**/*.dll",
    "**/*.exe",
    "**/*.pdf",
    "**/*.mid",
    "**/*.midi",
    "**/*.wav",
    "**/*.gif",
    "**/*.ico",
    "**/*.jpg",
    "**/*.jpeg",
    "**/*.png",
    "**/*.psd",
    "**/*.tga",
    "**/*.tif",
    "**/*.tiff",
    "**/*.3ds",
    "**/*.3DS",
    "**/*.fbx",
    "**/*.FBX",
    "**/*.lxo",
    "**/*.LXO",
    "**/*.ma",
    "**/*.MA",
    "**/*.obj",
    "**/*.OBJ",
    "**/*.asset",
    "**/*.cubemap",
    "**/*.flare",
    "**/*.mat",
    META_PATTERN,
    "**/*.prefab",
    "**/*.unity",
    "build/",
    "Build/",
    "Library/",
    "library/",
    "obj/",
    "Obj/",
    "ProjectSettings/",
    "temp/",
    "Temp/",
)


def render_settings(*, meta_files_visible: bool) -> str:
    """Render the settings document; visible meta files are not excluded."""
    excludes = {
        pattern: (not meta_files_visible) if pattern == META_PATTERN else True
        for pattern in EXCLUDE_PATTERNS
    }
    return json.dumps({"files.exclude": excludes}, indent=4) + "\n"
