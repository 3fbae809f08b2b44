"""Tests for projsync.infrastructure.watcher (unit tests for helpers)."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from unittest import mock

import pytest

from projsync.infrastructure.watcher import (
    DEFAULT_DEBOUNCE_MS,
    WatchEvent,
    _filter_relevant,
    _format_time,
    _is_graph_file,
    _split_batch,
    watch,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestIsGraphFile:
    def test_graph_file(self, tmp_path: Path) -> None:
        path = str(tmp_path / ".projsync" / "_graph" / "modules.yml")
        assert _is_graph_file(path, tmp_path)

    def test_other_file(self, tmp_path: Path) -> None:
        assert not _is_graph_file(str(tmp_path / "Assets" / "A.cs"), tmp_path)


class TestFilterRelevant:
    def test_keeps_sources(self, tmp_path: Path) -> None:
        changes = [(1, str(tmp_path / "Assets" / "A.cs"))]
        assert _filter_relevant(changes, tmp_path) == changes

    def test_drops_temp_files(self, tmp_path: Path) -> None:
        changes = [
            (1, str(tmp_path / "Assets" / "~A.cs")),
            (1, str(tmp_path / "Assets" / "A.cs.tmp")),
        ]
        assert _filter_relevant(changes, tmp_path) == []

    def test_drops_hidden_and_cache_dirs(self, tmp_path: Path) -> None:
        changes = [
            (1, str(tmp_path / ".git" / "index")),
            (1, str(tmp_path / "Library" / "ScriptAssemblies" / "Game.dll")),
            (1, str(tmp_path / "Temp" / "x.cs")),
        ]
        assert _filter_relevant(changes, tmp_path) == []

    def test_keeps_state_dir(self, tmp_path: Path) -> None:
        changes = [(1, str(tmp_path / ".projsync" / "_graph" / "modules.yml"))]
        assert _filter_relevant(changes, tmp_path) == changes

    def test_drops_outside_root(self, tmp_path: Path) -> None:
        assert _filter_relevant([(1, "/elsewhere/A.cs")], tmp_path / "ws") == []


class TestSplitBatch:
    def test_added_or_modified_binary_is_reimport(self, tmp_path: Path) -> None:
        watchfiles = pytest.importorskip("watchfiles")
        changes = [
            (watchfiles.Change.modified, str(tmp_path / "Plugins" / "Lib.dll")),
            (watchfiles.Change.added, str(tmp_path / "Plugins" / "New.dll")),
            (watchfiles.Change.modified, str(tmp_path / "Assets" / "A.cs")),
        ]
        changed, reimported = _split_batch(changes, tmp_path)
        assert changed == ["Plugins/Lib.dll", "Plugins/New.dll", "Assets/A.cs"]
        assert reimported == ["Plugins/Lib.dll", "Plugins/New.dll"]


class TestWatch:
    def test_graph_change_runs_full_sync(self, tmp_path: Path) -> None:
        pytest.importorskip("watchfiles")
        engine = mock.Mock()
        engine.workspace_root = tmp_path
        engine.sync_always.return_value = mock.Mock(ok=True, errors=[], regenerated=True)
        batch = {(2, str(tmp_path / ".projsync" / "_graph" / "modules.yml"))}
        events: list[WatchEvent] = []

        with mock.patch("watchfiles.watch", return_value=iter([batch])):
            watch(engine, callback=events.append)

        engine.sync_always.assert_called_once()
        engine.sync_if_needed.assert_not_called()
        assert events == [WatchEvent(files_changed=1, is_graph_change=True, sync_type="full")]

    def test_source_change_goes_through_decision(self, tmp_path: Path) -> None:
        pytest.importorskip("watchfiles")
        engine = mock.Mock()
        engine.workspace_root = tmp_path
        engine.sync_if_needed.return_value = mock.Mock(ok=True, errors=[], regenerated=False)
        batch = {(2, str(tmp_path / "Assets" / "Foo.meta"))}
        events: list[WatchEvent] = []

        with mock.patch("watchfiles.watch", return_value=iter([batch])):
            watch(engine, callback=events.append)

        engine.sync_if_needed.assert_called_once_with(["Assets/Foo.meta"], [])
        assert events[0].sync_type == "skipped"


class TestFormatTime:
    def test_format(self) -> None:
        assert re.match(r"^\d{2}:\d{2}:\d{2}$", _format_time())


class TestDefaults:
    def test_debounce(self) -> None:
        assert DEFAULT_DEBOUNCE_MS == 500
