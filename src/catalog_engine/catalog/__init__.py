"""Catalog system - versioned collections of tagged records."""

from .types import Catalog, CatalogEntry, SchemaType, TagMode
from .store import CatalogStore, find_schema_mismatches
from .loader import CatalogLoader, load_catalogs

__all__ = [
    "Catalog",
    "CatalogEntry",
    "SchemaType",
    "TagMode",
    "CatalogStore",
    "find_schema_mismatches",
    "CatalogLoader",
    "load_catalogs",
]
