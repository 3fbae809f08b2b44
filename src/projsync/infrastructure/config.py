"""Generation preferences: provenance toggles and meta-file visibility.

Stored in ``.projsync/config.yml``::

    include:
      embedded: true
      registry: false
    meta_files: true
    editor: /opt/antigravity/bin/antigravity
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import yaml

from projsync.graph.loader import STATE_DIR
from projsync.graph.model import PACKAGE_PROVENANCES, Provenance

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE = "config.yml"

DEFAULT_TOGGLES: dict[Provenance, bool] = {
    Provenance.EMBEDDED: True,
    Provenance.LOCAL: True,
    Provenance.REGISTRY: False,
    Provenance.GIT: False,
    Provenance.BUILTIN: False,
    Provenance.LOCAL_TARBALL: False,
    Provenance.UNKNOWN: False,
}

META_FILES_KEY = "meta_files"


@dataclass(frozen=True)
class Configuration:
    """Inclusion toggle per package provenance plus meta-file visibility.

    A provenance absent from ``toggles`` is treated as excluded.
    """

    toggles: Mapping[Provenance, bool] = field(default_factory=lambda: dict(DEFAULT_TOGGLES))
    meta_files_visible: bool = True
    editor_path: str | None = None

    def is_enabled(self, provenance: Provenance) -> bool:
        return bool(self.toggles.get(provenance, False))

    def with_toggle(self, provenance: Provenance, enabled: bool) -> Configuration:
        toggles = dict(self.toggles)
        toggles[provenance] = enabled
        return replace(self, toggles=toggles)


def parse_bool(value: Any) -> bool | None:
    """Parse a YAML/CLI boolean; ``None`` when the value is not recognizable."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "on", "1"}:
            return True
        if lowered in {"false", "no", "off", "0"}:
            return False
    return None


class ConfigStore:
    """Lazily loaded, explicitly saved configuration for one workspace."""

    def __init__(self, workspace_root: Path) -> None:
        self.path = workspace_root / STATE_DIR / CONFIG_FILE
        self._config: Configuration | None = None

    @property
    def config(self) -> Configuration:
        if self._config is None:
            self._config = self._load()
        return self._config

    def reload(self) -> Configuration:
        """Drop the cached value and read the file again."""
        self._config = None
        return self.config

    def _load(self) -> Configuration:
        if not self.path.is_file():
            return Configuration()

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, UnicodeDecodeError, yaml.YAMLError):
            logger.warning("Failed to read %s, using default settings", self.path)
            return Configuration()

        if not isinstance(data, dict):
            return Configuration()

        toggles = dict(DEFAULT_TOGGLES)
        include = data.get("include")
        if isinstance(include, dict):
            for key, value in include.items():
                provenance = Provenance.parse(str(key))
                if provenance is Provenance.PROJECT_LOCAL:
                    continue
                if provenance is Provenance.UNKNOWN and str(key).lower() != "unknown":
                    logger.warning("Ignoring unknown provenance '%s' in %s", key, self.path)
                    continue
                parsed = parse_bool(value)
                if parsed is None:
                    logger.warning("Ignoring non-boolean value for '%s' in %s", key, self.path)
                    continue
                toggles[provenance] = parsed

        meta = parse_bool(data.get(META_FILES_KEY, True))
        editor = data.get("editor")
        return Configuration(
            toggles=toggles,
            meta_files_visible=True if meta is None else meta,
            editor_path=str(editor) if editor else None,
        )

    def save(self, config: Configuration) -> None:
        """Persist *config* and make it the current value."""
        data: dict[str, Any] = {
            "include": {p.value: config.is_enabled(p) for p in PACKAGE_PROVENANCES},
            META_FILES_KEY: config.meta_files_visible,
        }
        if config.editor_path:
            data["editor"] = config.editor_path

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        self._config = config

    def set_toggle(self, provenance: Provenance, enabled: bool) -> Configuration:
        updated = self.config.with_toggle(provenance, enabled)
        self.save(updated)
        return updated

    def set_meta_files(self, visible: bool) -> Configuration:
        updated = replace(self.config, meta_files_visible=visible)
        self.save(updated)
        return updated
