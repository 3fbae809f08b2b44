"""Graph domain: module model and YAML graph loader."""

from projsync.graph.loader import (
    GraphError,
    ParsedFile,
    YamlGraphProvider,
    graph_dir_for,
    load_graph,
    parse_graph_file,
)
from projsync.graph.model import (
    PACKAGE_PROVENANCES,
    Module,
    ModuleGraph,
    Package,
    Provenance,
)

__all__ = [
    "PACKAGE_PROVENANCES",
    "GraphError",
    "Module",
    "ModuleGraph",
    "Package",
    "ParsedFile",
    "Provenance",
    "YamlGraphProvider",
    "graph_dir_for",
    "load_graph",
    "parse_graph_file",
]
