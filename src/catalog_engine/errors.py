"""Exception hierarchy for the catalog engine.

Queries and projections never raise for missing or imperfect data; these
exceptions cover the request boundary (bad options), loaders, and the
optional strict schema check on registration.
"""

from __future__ import annotations

from typing import Any


class CatalogEngineError(Exception):
    """Base class for all catalog engine errors."""


class SchemaMismatchError(CatalogEngineError):
    """An entry attribute does not match the type its catalog schema declares."""

    def __init__(
        self,
        catalog_id: str,
        entry_id: str,
        attribute: str,
        expected: str,
        actual: Any,
    ):
        self.catalog_id = catalog_id
        self.entry_id = entry_id
        self.attribute = attribute
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"catalog[{catalog_id}].entries[{entry_id}].{attribute}: "
            f"expected {expected}, got {type(actual).__name__}"
        )


class UsageError(CatalogEngineError):
    """A caller supplied a malformed request."""


class InvalidTagModeError(UsageError, ValueError):
    """Tag mode is neither 'any' nor 'all'."""

    def __init__(self, mode: Any):
        self.mode = mode
        super().__init__(f"Invalid tag mode {mode!r}: expected 'any' or 'all'")


class CatalogLoadError(CatalogEngineError):
    """Catalog or graph source data could not be turned into engine values."""
