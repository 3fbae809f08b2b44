"""Tests for projsync.generation.filtering: module inclusion policy."""

from __future__ import annotations

import pytest

from projsync.generation.filtering import FilterPolicy
from projsync.graph.model import PACKAGE_PROVENANCES, Module, Provenance
from projsync.infrastructure.config import Configuration


def _module(provenance: Provenance, sources: tuple[str, ...] = ("A.cs",)) -> Module:
    return Module(name="M", source_files=sources, provenance=provenance)


def _all(enabled: bool) -> Configuration:
    return Configuration(toggles={p: enabled for p in PACKAGE_PROVENANCES})


class TestProjectLocal:
    @pytest.mark.parametrize("enabled", [True, False])
    def test_always_included(self, enabled: bool) -> None:
        policy = FilterPolicy(_all(enabled))
        assert policy.include(_module(Provenance.PROJECT_LOCAL))

    def test_empty_configuration(self) -> None:
        policy = FilterPolicy(Configuration(toggles={}))
        assert policy.include(_module(Provenance.PROJECT_LOCAL))


class TestNoSources:
    @pytest.mark.parametrize("provenance", list(Provenance))
    def test_excluded_regardless_of_provenance(self, provenance: Provenance) -> None:
        policy = FilterPolicy(_all(True))
        assert not policy.include(_module(provenance, sources=()))


class TestPackageProvenance:
    @pytest.mark.parametrize("provenance", PACKAGE_PROVENANCES)
    def test_follows_toggle(self, provenance: Provenance) -> None:
        assert FilterPolicy(_all(True)).include(_module(provenance))
        assert not FilterPolicy(_all(False)).include(_module(provenance))

    def test_missing_toggle_excludes(self) -> None:
        config = Configuration(toggles={Provenance.EMBEDDED: True})
        policy = FilterPolicy(config)
        assert policy.include(_module(Provenance.EMBEDDED))
        assert not policy.include(_module(Provenance.REGISTRY))

    def test_defaults(self) -> None:
        policy = FilterPolicy(Configuration())
        assert policy.include(_module(Provenance.EMBEDDED))
        assert policy.include(_module(Provenance.LOCAL))
        assert not policy.include(_module(Provenance.REGISTRY))
        assert not policy.include(_module(Provenance.GIT))
        assert not policy.include(_module(Provenance.BUILTIN))

    def test_none_module(self) -> None:
        assert not FilterPolicy(Configuration()).include(None)


class TestIncluded:
    def test_keeps_order(self) -> None:
        modules = [
            Module("C", ("c.cs",)),
            Module("R", ("r.cs",), provenance=Provenance.REGISTRY),
            Module("A", ("a.cs",)),
        ]
        policy = FilterPolicy(Configuration())
        assert [m.name for m in policy.included(modules)] == ["C", "A"]
