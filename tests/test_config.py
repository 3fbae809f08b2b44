"""Tests for projsync.infrastructure.config: generation preferences."""

from __future__ import annotations

from typing import TYPE_CHECKING

import yaml

from projsync.graph.model import Provenance
from projsync.infrastructure.config import DEFAULT_TOGGLES, Configuration, ConfigStore, parse_bool

if TYPE_CHECKING:
    from pathlib import Path


class TestConfiguration:
    def test_defaults(self) -> None:
        config = Configuration()
        assert config.is_enabled(Provenance.EMBEDDED)
        assert not config.is_enabled(Provenance.REGISTRY)
        assert config.meta_files_visible

    def test_missing_toggle_disabled(self) -> None:
        assert not Configuration(toggles={}).is_enabled(Provenance.EMBEDDED)

    def test_with_toggle_copies(self) -> None:
        config = Configuration()
        updated = config.with_toggle(Provenance.REGISTRY, True)
        assert updated.is_enabled(Provenance.REGISTRY)
        assert not config.is_enabled(Provenance.REGISTRY)


class TestConfigStore:
    def test_missing_file_defaults(self, workspace: Path) -> None:
        store = ConfigStore(workspace)
        assert dict(store.config.toggles) == DEFAULT_TOGGLES

    def test_reads_overrides(self, workspace: Path) -> None:
        (workspace / ".projsync" / "config.yml").write_text(
            "include:\n  registry: true\n  embedded: false\nmeta_files: false\neditor: /opt/ag\n"
        )
        config = ConfigStore(workspace).config
        assert config.is_enabled(Provenance.REGISTRY)
        assert not config.is_enabled(Provenance.EMBEDDED)
        assert config.is_enabled(Provenance.LOCAL)
        assert not config.meta_files_visible
        assert config.editor_path == "/opt/ag"

    def test_malformed_file_defaults(self, workspace: Path) -> None:
        (workspace / ".projsync" / "config.yml").write_text("include: [\n")
        config = ConfigStore(workspace).config
        assert dict(config.toggles) == DEFAULT_TOGGLES

    def test_non_utf8_file_defaults(self, workspace: Path) -> None:
        (workspace / ".projsync" / "config.yml").write_bytes(b"editor: C:\\Caf\xe9\n")
        config = ConfigStore(workspace).config
        assert dict(config.toggles) == DEFAULT_TOGGLES
        assert config.editor_path is None

    def test_ignores_bad_entries(self, workspace: Path) -> None:
        (workspace / ".projsync" / "config.yml").write_text(
            "include:\n  svn: true\n  registry: maybe\n"
        )
        config = ConfigStore(workspace).config
        assert not config.is_enabled(Provenance.REGISTRY)
        assert not config.is_enabled(Provenance.UNKNOWN)

    def test_loaded_lazily_once(self, workspace: Path) -> None:
        store = ConfigStore(workspace)
        first = store.config
        (workspace / ".projsync" / "config.yml").write_text("meta_files: false\n")
        assert store.config is first

    def test_reload_reads_file_again(self, workspace: Path) -> None:
        store = ConfigStore(workspace)
        assert store.config.meta_files_visible
        (workspace / ".projsync" / "config.yml").write_text("meta_files: false\n")
        assert not store.reload().meta_files_visible
        assert not store.config.meta_files_visible

    def test_set_toggle_persists(self, workspace: Path) -> None:
        store = ConfigStore(workspace)
        store.set_toggle(Provenance.GIT, True)
        data = yaml.safe_load(store.path.read_text(encoding="utf-8"))
        assert data["include"]["git"] is True
        assert ConfigStore(workspace).config.is_enabled(Provenance.GIT)

    def test_set_meta_files_persists(self, workspace: Path) -> None:
        store = ConfigStore(workspace)
        store.set_meta_files(False)
        assert not ConfigStore(workspace).config.meta_files_visible


class TestParseBool:
    def test_values(self) -> None:
        assert parse_bool(True) is True
        assert parse_bool("yes") is True
        assert parse_bool("Off") is False
        assert parse_bool("maybe") is None
        assert parse_bool(1) is None
