"""Catalog query engine - runs predicates across one catalog or the registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from ..catalog.store import CatalogStore
from ..catalog.types import CatalogEntry
from ..errors import UsageError
from .predicate import EntryPredicate, compile_predicate


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class QueryOptions:
    """Restricts a query to one catalog and/or caps the number of results."""
    catalog_id: str | None = None
    limit: int | None = None

    def __post_init__(self):
        if self.limit is not None and self.limit < 0:
            raise UsageError(f"Query limit must be non-negative, got {self.limit}")


@dataclass(frozen=True, slots=True)
class QueryMatch:
    """A matching entry together with the catalog it came from."""
    catalog_id: str
    entry: CatalogEntry

    def to_dict(self) -> dict[str, Any]:
        return {"catalogId": self.catalog_id, "entry": self.entry.to_dict()}


class CatalogQueryEngine:
    """
    Evaluates predicates over a catalog store.

    Result order is a contract: catalogs in registration order, entries in
    catalog order. The engine only reads the store.
    """

    def __init__(self, store: CatalogStore):
        self._store = store

    def _iter_matches(self, predicate: EntryPredicate, options: QueryOptions) -> Iterator[QueryMatch]:
        if options.catalog_id is not None:
            if not self._store.has(options.catalog_id):
                logger.debug("Query against unknown catalog %s", options.catalog_id)
                return
            catalog_ids = [options.catalog_id]
        else:
            catalog_ids = self._store.catalog_ids()

        test = compile_predicate(predicate)
        for catalog_id in catalog_ids:
            for entry in self._store.get_entries(catalog_id):
                if test(entry):
                    yield QueryMatch(catalog_id=catalog_id, entry=entry)

    def query(self, predicate: EntryPredicate, options: QueryOptions | None = None) -> list[QueryMatch]:
        """All matches in result order; empty when nothing matches."""
        options = options or QueryOptions()
        results = []
        for match in self._iter_matches(predicate, options):
            if options.limit is not None and len(results) >= options.limit:
                break
            results.append(match)
        return results

    def count(self, predicate: EntryPredicate, options: QueryOptions | None = None) -> int:
        """Number of matches, without building the result list."""
        options = options or QueryOptions()
        total = 0
        for _ in self._iter_matches(predicate, options):
            if options.limit is not None and total >= options.limit:
                break
            total += 1
        return total
