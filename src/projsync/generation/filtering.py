"""Decide which modules take part in generated projects."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from projsync.graph.model import Provenance

if TYPE_CHECKING:
    from collections.abc import Iterable

    from projsync.graph.model import Module
    from projsync.infrastructure.config import Configuration

logger = logging.getLogger(__name__)


class FilterPolicy:
    """Inclusion rule for modules under a given configuration.

    - A module without source files is never included.
    - Project code (no package provenance) is always included.
    - Package modules follow the configured toggle for their provenance;
      a provenance with no toggle is excluded.
    """

    def __init__(self, config: Configuration) -> None:
        self.config = config

    def include(self, module: Module | None) -> bool:
        if module is None:
            return False
        if not module.source_files:
            return False

        provenance = module.provenance
        if provenance is None or provenance is Provenance.PROJECT_LOCAL:
            return True

        if provenance not in self.config.toggles:
            logger.debug("No toggle for provenance %s, excluding %s", provenance.value, module.name)
            return False
        return bool(self.config.toggles[provenance])

    def included(self, modules: Iterable[Module]) -> list[Module]:
        """Return included modules, keeping the input order."""
        return [m for m in modules if self.include(m)]
