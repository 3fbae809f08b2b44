"""Tests for projsync.generation.solution: solution index rendering."""

from __future__ import annotations

import re

from projsync.generation.filtering import FilterPolicy
from projsync.generation.identifiers import derive_id
from projsync.generation.solution import CSHARP_PROJECT_TYPE, build_index, serialize_index
from projsync.graph.model import Module, Provenance
from projsync.infrastructure.config import Configuration

_PROJECT_RE = re.compile(r'^Project\("([^"]+)"\) = "([^"]+)", "([^"]+)", "\{([^}]+)\}"$')

_MODULES = [
    Module("Zeta", ("z.cs",)),
    Module("Vendor", ("v.cs",), provenance=Provenance.REGISTRY),
    Module("Alpha", ("a.cs",)),
    Module("Empty", ()),
]


def _policy() -> FilterPolicy:
    return FilterPolicy(Configuration())


class TestBuildIndex:
    def test_filters_and_keeps_order(self) -> None:
        entries = build_index(_MODULES, _policy())
        assert [e.name for e in entries] == ["Zeta", "Alpha"]
        assert entries[0].filename == "Zeta.csproj"
        assert entries[0].identifier == derive_id("Zeta")


class TestSerializeIndex:
    def test_header(self) -> None:
        lines = serialize_index(_MODULES, _policy()).split("\r\n")
        assert lines[0] == "Microsoft Visual Studio Solution File, Format Version 12.00"
        assert lines[1] == "# Visual Studio 15"

    def test_project_lines(self) -> None:
        lines = serialize_index(_MODULES, _policy()).split("\r\n")
        projects = [m for m in (_PROJECT_RE.match(line) for line in lines) if m]
        assert [(m.group(2), m.group(3), m.group(4)) for m in projects] == [
            ("Zeta", "Zeta.csproj", derive_id("Zeta")),
            ("Alpha", "Alpha.csproj", derive_id("Alpha")),
        ]
        assert all(m.group(1) == CSHARP_PROJECT_TYPE for m in projects)
        assert lines.count("EndProject") == 2

    def test_configurations(self) -> None:
        text = serialize_index(_MODULES, _policy())
        assert "        Debug|Any CPU = Debug|Any CPU\r\n" in text
        assert "        Release|Any CPU = Release|Any CPU\r\n" in text

    def test_project_configuration_mapping(self) -> None:
        text = serialize_index(_MODULES, _policy())
        guid = f"{{{derive_id('Alpha')}}}"
        for cfg in ("Debug|Any CPU", "Release|Any CPU"):
            assert f"        {guid}.{cfg}.ActiveCfg = {cfg}\r\n" in text
            assert f"        {guid}.{cfg}.Build.0 = {cfg}\r\n" in text
        assert derive_id("Vendor") not in text

    def test_empty_graph(self) -> None:
        text = serialize_index([], _policy())
        assert "Project(" not in text
        assert text.endswith("EndGlobal\r\n")
