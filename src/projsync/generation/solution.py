"""Workspace solution index (``.sln``) rendering."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from projsync.generation.descriptor import NEWLINE, descriptor_filename
from projsync.generation.identifiers import braced, derive_id

if TYPE_CHECKING:
    from collections.abc import Iterable

    from projsync.generation.filtering import FilterPolicy
    from projsync.graph.model import Module

INDEX_EXTENSION = ".sln"
# Project type GUID for C# projects.
CSHARP_PROJECT_TYPE = "{FAE04EC0-301F-11D3-BF4B-00C04F79EFBC}"
CONFIGURATIONS: tuple[str, ...] = ("Debug|Any CPU", "Release|Any CPU")


@dataclass(frozen=True)
class IndexEntry:
    """One project registration in the solution."""

    name: str
    filename: str
    identifier: str


def build_index(modules: Iterable[Module], policy: FilterPolicy) -> list[IndexEntry]:
    """Entries for included modules, in enumeration order."""
    return [
        IndexEntry(
            name=module.name,
            filename=descriptor_filename(module.name),
            identifier=derive_id(module.name),
        )
        for module in modules
        if policy.include(module)
    ]


def render_index(entries: list[IndexEntry]) -> str:
    lines: list[str] = [
        "Microsoft Visual Studio Solution File, Format Version 12.00",
        "# Visual Studio 15",
    ]

    for entry in entries:
        lines.append(
            f'Project("{CSHARP_PROJECT_TYPE}") = "{entry.name}", '
            f'"{entry.filename}", "{braced(entry.identifier)}"'
        )
        lines.append("EndProject")

    lines.append("Global")
    lines.append("    GlobalSection(SolutionConfigurationPlatforms) = preSolution")
    for configuration in CONFIGURATIONS:
        lines.append(f"        {configuration} = {configuration}")
    lines.append("    EndGlobalSection")

    lines.append("    GlobalSection(ProjectConfigurationPlatforms) = postSolution")
    for entry in entries:
        guid = braced(entry.identifier)
        for configuration in CONFIGURATIONS:
            lines.append(f"        {guid}.{configuration}.ActiveCfg = {configuration}")
            lines.append(f"        {guid}.{configuration}.Build.0 = {configuration}")
    lines.append("    EndGlobalSection")
    lines.append("EndGlobal")
    return NEWLINE.join(lines) + NEWLINE


def serialize_index(modules: Iterable[Module], policy: FilterPolicy) -> str:
    return render_index(build_index(modules, policy))
