"""Per-module project descriptor (MSBuild ``.csproj``) rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape, quoteattr

from projsync.generation.identifiers import braced, derive_id

if TYPE_CHECKING:
    from projsync.generation.filtering import FilterPolicy
    from projsync.graph.model import Module, ModuleGraph

MSBUILD_NAMESPACE = "http://schemas.microsoft.com/developer/msbuild/2003"
DESCRIPTOR_EXTENSION = ".csproj"
TARGET_FRAMEWORK_VERSION = "v4.7.1"
LANG_VERSION = "latest"
NEWLINE = "\r\n"


@dataclass(frozen=True)
class Descriptor:
    """A module prepared for rendering."""

    module: Module
    identifier: str
    included_references: tuple[Module, ...] = field(default_factory=tuple)


def descriptor_filename(name: str) -> str:
    return f"{name}{DESCRIPTOR_EXTENSION}"


def build_descriptor(module: Module, graph: ModuleGraph, policy: FilterPolicy) -> Descriptor:
    """Resolve the module references of *module* that may be linked.

    References to unknown or excluded modules are dropped.  Each target is
    visited once, so a repeated or self-referencing entry cannot loop.
    """
    visited: set[str] = {module.name}
    linked: list[Module] = []
    for ref_name in module.module_references:
        if ref_name in visited:
            continue
        visited.add(ref_name)
        target = graph.get(ref_name)
        if target is not None and policy.include(target):
            linked.append(target)
    return Descriptor(
        module=module,
        identifier=derive_id(module.name),
        included_references=tuple(linked),
    )


def _text(value: str) -> str:
    return escape(value)


def _attr(value: str) -> str:
    return quoteattr(value)


def render_descriptor(descriptor: Descriptor) -> str:
    """Render *descriptor* as a complete XML document."""
    module = descriptor.module
    lines: list[str] = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<Project ToolsVersion="4.0" DefaultTargets="Build" xmlns="{MSBUILD_NAMESPACE}">',
    ]

    # Identity.
    lines.extend([
        "  <PropertyGroup>",
        f"    <LangVersion>{LANG_VERSION}</LangVersion>",
        "    <CscToolPath>$(CscToolPath)</CscToolPath>",
        "    <CscToolExe>$(CscToolExe)</CscToolExe>",
        f"    <ProjectGuid>{braced(descriptor.identifier)}</ProjectGuid>",
        "    <OutputType>Library</OutputType>",
        f"    <AssemblyName>{_text(module.name)}</AssemblyName>",
        f"    <TargetFrameworkVersion>{TARGET_FRAMEWORK_VERSION}</TargetFrameworkVersion>",
        "    <FileAlignment>512</FileAlignment>",
        "    <BaseDirectory>.</BaseDirectory>",
        "  </PropertyGroup>",
    ])

    # External binaries.
    lines.append("  <ItemGroup>")
    for reference in module.compiled_references:
        lines.append(f"    <Reference Include={_attr(PureWindowsPath(reference).stem)}>")
        lines.append(f"      <HintPath>{_text(reference)}</HintPath>")
        lines.append("    </Reference>")
    lines.append("  </ItemGroup>")

    # Sources.
    lines.append("  <ItemGroup>")
    for source in module.source_files:
        lines.append(f"    <Compile Include={_attr(source)} />")
    lines.append("  </ItemGroup>")

    # Module references.
    lines.append("  <ItemGroup>")
    for target in descriptor.included_references:
        lines.append(f"    <ProjectReference Include={_attr(descriptor_filename(target.name))}>")
        lines.append(f"      <Project>{braced(derive_id(target.name))}</Project>")
        lines.append(f"      <Name>{_text(target.name)}</Name>")
        lines.append("    </ProjectReference>")
    lines.append("  </ItemGroup>")

    lines.append('  <Import Project="$(MSBuildToolsPath)\\Microsoft.CSharp.targets" />')
    lines.append("</Project>")
    return NEWLINE.join(lines) + NEWLINE


def serialize_descriptor(module: Module, graph: ModuleGraph, policy: FilterPolicy) -> str:
    return render_descriptor(build_descriptor(module, graph, policy))
