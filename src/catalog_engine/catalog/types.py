"""Catalog types - entries, schemas, and catalogs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..errors import CatalogLoadError


class SchemaType(str, Enum):
    """Type names a catalog schema may declare for an attribute."""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"
    ANY = "any"


def is_number(value: Any) -> bool:
    """True for int/float values. Booleans are not numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_matches_type(value: Any, type_name: SchemaType) -> bool:
    """Check a value against a declared schema type."""
    if type_name is SchemaType.ANY:
        return True
    if type_name is SchemaType.STRING:
        return isinstance(value, str)
    if type_name is SchemaType.NUMBER:
        return is_number(value)
    if type_name is SchemaType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if type_name is SchemaType.BOOLEAN:
        return isinstance(value, bool)
    if type_name is SchemaType.ARRAY:
        return isinstance(value, (list, tuple))
    if type_name is SchemaType.OBJECT:
        return isinstance(value, Mapping)
    return value is None


def parse_schema_type(name: str) -> SchemaType | None:
    """Parse a declared type name, or None if it is not recognised."""
    try:
        return SchemaType(str(name).lower())
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """
    One record within a catalog.

    ``id`` and ``tags`` are first-class; everything else lives in the
    open-ended ``attributes`` map. ``get`` resolves all three uniformly,
    which is what predicates see.
    """
    id: str
    tags: tuple[str, ...] = ()
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)

    def get(self, name: str, default: Any = None) -> Any:
        """Look up an attribute by name, including ``id`` and ``tags``."""
        if name == "id":
            return self.id
        if name == "tags":
            return self.tags
        return self.attributes.get(name, default)

    def has(self, name: str) -> bool:
        return name in ("id", "tags") or name in self.attributes

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.tags:
            data["tags"] = list(self.tags)
        data.update(self.attributes)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CatalogEntry:
        if not isinstance(data, Mapping):
            raise CatalogLoadError(f"Catalog entry must be a mapping, got {type(data).__name__}")

        # scalars are kept as written; a non-string id is reported by the validator
        entry_id = data.get("id", "")
        if isinstance(entry_id, (list, dict)):
            raise CatalogLoadError(f"Catalog entry id must be a scalar, got {entry_id!r}")

        tags = data.get("tags") or ()
        if not isinstance(tags, (list, tuple)):
            raise CatalogLoadError(f"Tags of entry '{entry_id}' must be a list")

        attributes = {k: v for k, v in data.items() if k not in ("id", "tags")}
        return cls(id=entry_id, tags=tuple(str(t) for t in tags), attributes=attributes)


@dataclass(slots=True)
class Catalog:
    """
    A named, versioned collection of entries.

    Entry order is insertion order and is the order every query and
    projection reports results in.
    """
    id: str
    entries: list[CatalogEntry] = field(default_factory=list)
    version: str | None = None
    description: str | None = None

    # Attribute name -> declared type name. Advisory only.
    schema: dict[str, str] | None = None

    def entry_ids(self) -> list[str]:
        return [entry.id for entry in self.entries]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        if self.version is not None:
            data["version"] = self.version
        if self.description is not None:
            data["description"] = self.description
        if self.schema is not None:
            data["schema"] = dict(self.schema)
        data["entries"] = [entry.to_dict() for entry in self.entries]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], catalog_id: str | None = None) -> Catalog:
        """
        Build a catalog from its inline definition.

        ``catalog_id`` is the registry key; it is only used when the
        definition has no ``id`` of its own. A differing ``id`` is kept as
        written so the validator can report the mismatch.
        """
        if not isinstance(data, Mapping):
            raise CatalogLoadError(
                f"Catalog '{catalog_id}' must be a mapping, got {type(data).__name__}"
            )

        cid = data.get("id", catalog_id)
        if not isinstance(cid, str):
            raise CatalogLoadError(f"Catalog id must be a string, got {cid!r}")

        raw_entries = data.get("entries", [])
        if not isinstance(raw_entries, list):
            raise CatalogLoadError(f"catalog[{cid}].entries must be a list")

        schema = data.get("schema")
        if schema is not None and not isinstance(schema, Mapping):
            raise CatalogLoadError(f"catalog[{cid}].schema must be a mapping if provided")

        version = data.get("version")
        return cls(
            id=cid,
            entries=[CatalogEntry.from_dict(e) for e in raw_entries],
            version=str(version) if version is not None else None,
            description=data.get("description"),
            schema={str(k): str(v) for k, v in schema.items()} if schema is not None else None,
        )


class TagMode(str, Enum):
    """How a node's tags must relate to an entry's tags to match."""
    ANY = "any"  # non-empty intersection
    ALL = "all"  # node tags are a subset of entry tags
