"""Generation domain: identifiers, filtering, project/solution rendering, sync engine."""

from projsync.generation.descriptor import (
    Descriptor,
    build_descriptor,
    descriptor_filename,
    render_descriptor,
    serialize_descriptor,
)
from projsync.generation.engine import (
    REIMPORT_EXTENSIONS,
    SOLUTION_EXTENSIONS,
    StaticGraphProvider,
    SyncEngine,
    SyncResult,
    needs_sync,
)
from projsync.generation.filtering import FilterPolicy
from projsync.generation.identifiers import derive_id
from projsync.generation.settings import render_settings
from projsync.generation.solution import IndexEntry, build_index, render_index, serialize_index

__all__ = [
    "REIMPORT_EXTENSIONS",
    "SOLUTION_EXTENSIONS",
    "Descriptor",
    "FilterPolicy",
    "IndexEntry",
    "StaticGraphProvider",
    "SyncEngine",
    "SyncResult",
    "build_descriptor",
    "build_index",
    "derive_id",
    "descriptor_filename",
    "needs_sync",
    "render_descriptor",
    "render_index",
    "render_settings",
    "serialize_descriptor",
    "serialize_index",
]
