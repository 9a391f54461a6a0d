"""Catalog store - in-memory registry of catalogs with entry lookup."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping

from ..errors import SchemaMismatchError
from .types import Catalog, CatalogEntry, parse_schema_type, value_matches_type


logger = logging.getLogger(__name__)


def find_schema_mismatches(catalog: Catalog) -> list[SchemaMismatchError]:
    """
    Check every entry of a catalog against its declared schema.

    Attributes the entry does not carry, and type names the schema does not
    recognise, are not mismatches.
    """
    if not catalog.schema:
        return []

    declared = []
    for attribute, type_name in catalog.schema.items():
        schema_type = parse_schema_type(type_name)
        if schema_type is not None:
            declared.append((attribute, type_name, schema_type))

    mismatches = []
    for entry in catalog.entries:
        for attribute, type_name, schema_type in declared:
            if not entry.has(attribute):
                continue
            value = entry.get(attribute)
            if not value_matches_type(value, schema_type):
                mismatches.append(
                    SchemaMismatchError(catalog.id, entry.id, attribute, type_name, value)
                )
    return mismatches


class CatalogStore(Mapping[str, Catalog]):
    """
    Holds the catalogs of one engine instance.

    Behaves as a read-only mapping of registry key -> Catalog in
    registration order. The key is the catalog id unless registered
    otherwise. Lookups never raise for unknown ids; they return None or empty
    lists. Mutations are serialised with a lock so a multi-threaded host can
    register catalogs while readers query.
    """

    def __init__(self, catalogs: Iterable[Catalog] = ()):
        self._catalogs: dict[str, Catalog] = {}
        # catalog_id -> {entry_id: entry}; first occurrence of an id wins
        self._entry_index: dict[str, dict[str, CatalogEntry]] = {}
        self._lock = threading.RLock()

        for catalog in catalogs:
            self.register(catalog)

    # -- Mapping protocol ---------------------------------------------------

    def __getitem__(self, catalog_id: str) -> Catalog:
        return self._catalogs[catalog_id]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._catalogs))

    def __len__(self) -> int:
        return len(self._catalogs)

    def __contains__(self, catalog_id: object) -> bool:
        return catalog_id in self._catalogs

    # -- Mutation -----------------------------------------------------------

    def register(
        self,
        catalog: Catalog,
        strict: bool = False,
        key: str | None = None,
    ) -> list[SchemaMismatchError]:
        """
        Insert or replace a catalog under ``key`` (default: its id).

        A registry key that differs from ``catalog.id`` is kept as the lookup
        key, so node refs written against the key still resolve and the
        validator can report the mismatch.

        Schema violations do not block registration: they are logged and
        returned. With ``strict`` the first violation is raised instead and
        the store is left unchanged.
        """
        mismatches = find_schema_mismatches(catalog)
        if strict and mismatches:
            raise mismatches[0]

        key = catalog.id if key is None else key
        with self._lock:
            replaced = key in self._catalogs
            self._catalogs[key] = catalog
            self._entry_index[key] = self._index_entries(catalog.entries)

        for mismatch in mismatches:
            logger.warning("Schema mismatch: %s", mismatch)

        logger.debug(
            "%s catalog %s (%d entries)",
            "Replaced" if replaced else "Registered",
            key,
            len(catalog.entries),
        )
        return mismatches

    def put_entry(self, catalog_id: str, entry: CatalogEntry) -> bool:
        """
        Replace the entry with the same id, or append it.

        Returns False if the catalog is unknown.
        """
        with self._lock:
            catalog = self._catalogs.get(catalog_id)
            if catalog is None:
                return False

            index = self._entry_index[catalog_id]
            if entry.id in index:
                catalog.entries = [entry if e.id == entry.id else e for e in catalog.entries]
            else:
                catalog.entries = [*catalog.entries, entry]
            index[entry.id] = entry
        return True

    def unregister(self, catalog_id: str) -> Catalog | None:
        with self._lock:
            self._entry_index.pop(catalog_id, None)
            return self._catalogs.pop(catalog_id, None)

    def clear(self) -> None:
        with self._lock:
            self._catalogs.clear()
            self._entry_index.clear()

    @staticmethod
    def _index_entries(entries: Iterable[CatalogEntry]) -> dict[str, CatalogEntry]:
        index: dict[str, CatalogEntry] = {}
        for entry in entries:
            index.setdefault(entry.id, entry)
        return index

    # -- Lookup -------------------------------------------------------------

    def has(self, catalog_id: str) -> bool:
        return catalog_id in self._catalogs

    def get(self, catalog_id: str, default: Catalog | None = None) -> Catalog | None:
        return self._catalogs.get(catalog_id, default)

    def catalog_ids(self) -> list[str]:
        return list(self._catalogs)

    def all_catalogs(self) -> list[Catalog]:
        return list(self._catalogs.values())

    def get_entries(self, catalog_id: str) -> list[CatalogEntry]:
        catalog = self._catalogs.get(catalog_id)
        return list(catalog.entries) if catalog else []

    def get_entry(self, catalog_id: str, entry_id: str) -> CatalogEntry | None:
        index = self._entry_index.get(catalog_id)
        return index.get(entry_id) if index else None

    def get_entries_by_ids(self, catalog_id: str, entry_ids: Iterable[str]) -> list[CatalogEntry]:
        """Resolve ids in the order given, skipping ids that do not resolve."""
        index = self._entry_index.get(catalog_id)
        if not index:
            return []
        return [index[eid] for eid in entry_ids if eid in index]

    def filter_by_tags(
        self,
        catalog_id: str,
        tags: Iterable[str],
        mode: str = "any",
    ) -> list[CatalogEntry]:
        """
        Entries whose tags intersect ``tags`` (mode "any") or contain all of
        them (mode "all"). An empty tag set matches nothing.
        """
        wanted = frozenset(tags)
        if not wanted:
            return []
        if mode == "all":
            return [e for e in self.get_entries(catalog_id) if wanted <= e.tag_set]
        return [e for e in self.get_entries(catalog_id) if wanted & e.tag_set]

    def total_entries(self) -> int:
        return sum(len(c.entries) for c in self._catalogs.values())
