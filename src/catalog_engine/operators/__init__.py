"""Catalog operators - predicates, queries, projection, validation, stats."""

from .predicate import (
    OPERATORS,
    FilterPredicate,
    filter_entries,
    matches,
    strict_equals,
    validate_predicate,
)
from .query import CatalogQueryEngine, QueryMatch, QueryOptions
from .projector import GraphProjector, ProjectOptions, parse_tag_mode
from .validator import IssueCode, RegistryValidator, ValidationResult, validate
from .stats import CatalogStats, EngineStats, RegistryStats, stats
from .engine import OperatorEngine

__all__ = [
    # Predicates
    "OPERATORS",
    "FilterPredicate",
    "filter_entries",
    "matches",
    "strict_equals",
    "validate_predicate",
    # Queries
    "CatalogQueryEngine",
    "QueryMatch",
    "QueryOptions",
    # Projection
    "GraphProjector",
    "ProjectOptions",
    "parse_tag_mode",
    # Validation
    "IssueCode",
    "RegistryValidator",
    "ValidationResult",
    "validate",
    # Stats
    "CatalogStats",
    "EngineStats",
    "RegistryStats",
    "stats",
    # Facade
    "OperatorEngine",
]
