"""Catalog engine - catalogs of tagged records, predicate queries, and graph projection."""

from .catalog import Catalog, CatalogEntry, CatalogLoader, CatalogStore, TagMode, load_catalogs
from .errors import (
    CatalogEngineError,
    CatalogLoadError,
    InvalidTagModeError,
    SchemaMismatchError,
    UsageError,
)
from .graph import Graph, GraphEdge, GraphNode, load_graph
from .operators import (
    OperatorEngine,
    ProjectOptions,
    QueryMatch,
    QueryOptions,
    ValidationResult,
    matches,
    stats,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogLoader",
    "CatalogStore",
    "TagMode",
    "load_catalogs",
    "CatalogEngineError",
    "CatalogLoadError",
    "InvalidTagModeError",
    "SchemaMismatchError",
    "UsageError",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "load_graph",
    "OperatorEngine",
    "ProjectOptions",
    "QueryMatch",
    "QueryOptions",
    "ValidationResult",
    "matches",
    "stats",
    "validate",
]
