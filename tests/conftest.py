"""Shared test fixtures for projsync."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
import yaml

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Create a workspace with an empty graph directory."""
    root = tmp_path / "Game"
    (root / ".projsync" / "_graph").mkdir(parents=True)
    return root


def _write_graph(
    workspace: Path,
    modules: list[dict[str, Any]],
    packages: list[dict[str, Any]] | None = None,
    filename: str = "modules.yml",
) -> Path:
    """Write a graph file into *workspace* and return its path."""
    path = workspace / ".projsync" / "_graph" / filename
    data: dict[str, Any] = {"modules": modules}
    if packages is not None:
        data["packages"] = packages
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture()
def write_graph() -> Callable[..., Path]:
    return _write_graph
