"""Registry validator - structural and referential checks over catalogs and graph."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..catalog.store import find_schema_mismatches
from ..catalog.types import Catalog, parse_schema_type
from ..graph.types import Graph


class IssueCode(str, Enum):
    """Distinct codes prefixed to every validation message."""
    # Errors
    REGISTRY_KEY_MISMATCH = "registry-key-mismatch"
    EMPTY_ENTRY_ID = "empty-entry-id"
    DUPLICATE_ENTRY_ID = "duplicate-entry-id"
    # Warnings
    UNKNOWN_CATALOG_REF = "unknown-catalog-ref"
    DANGLING_ENTRY_REF = "dangling-entry-ref"
    SCHEMA_TYPE_MISMATCH = "schema-type-mismatch"
    UNKNOWN_SCHEMA_TYPE = "unknown-schema-type"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a validation run. Only errors make a result invalid."""
    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    def has_code(self, code: IssueCode) -> bool:
        prefix = f"{code.value}:"
        return any(m.startswith(prefix) for m in (*self.errors, *self.warnings))

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


@dataclass
class _Report:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def error(self, code: IssueCode, message: str) -> None:
        self.errors.append(f"{code.value}: {message}")

    def warn(self, code: IssueCode, message: str) -> None:
        self.warnings.append(f"{code.value}: {message}")

    def result(self) -> ValidationResult:
        return ValidationResult(
            valid=not self.errors,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
        )


class RegistryValidator:
    """
    Checks a catalog registry, and optionally a graph, for consistency.

    Structural problems (key/id mismatch, bad or duplicate entry ids) are
    errors. Referential problems (dangling refs, schema type mismatches) are
    warnings, since projection skips them. Validation never mutates its
    inputs and gives identical results on unchanged input.
    """

    def validate(self, registry: Mapping[str, Catalog], graph: Graph | None = None) -> ValidationResult:
        report = _Report()

        for key, catalog in registry.items():
            self._check_catalog(key, catalog, report)

        if graph is not None:
            self._check_graph_refs(registry, graph, report)

        return report.result()

    def _check_catalog(self, key: str, catalog: Catalog, report: _Report) -> None:
        prefix = f"catalog[{key}]"

        if catalog.id != key:
            report.error(
                IssueCode.REGISTRY_KEY_MISMATCH,
                f'{prefix}.id "{catalog.id}" does not match registry key "{key}"',
            )

        seen: set[str] = set()
        for i, entry in enumerate(catalog.entries):
            if not isinstance(entry.id, str) or not entry.id:
                report.error(
                    IssueCode.EMPTY_ENTRY_ID,
                    f"{prefix}.entries[{i}].id must be a non-empty string",
                )
                continue
            if entry.id in seen:
                report.error(
                    IssueCode.DUPLICATE_ENTRY_ID,
                    f'{prefix}.entries[{i}].id "{entry.id}" is already used in this catalog',
                )
            seen.add(entry.id)

        if catalog.schema:
            for attribute, type_name in catalog.schema.items():
                if parse_schema_type(type_name) is None:
                    report.warn(
                        IssueCode.UNKNOWN_SCHEMA_TYPE,
                        f'{prefix}.schema.{attribute} declares unknown type "{type_name}"',
                    )

        for mismatch in find_schema_mismatches(catalog):
            report.warn(IssueCode.SCHEMA_TYPE_MISMATCH, str(mismatch))

    def _check_graph_refs(self, registry: Mapping[str, Catalog], graph: Graph, report: _Report) -> None:
        entry_ids = {key: set(catalog.entry_ids()) for key, catalog in registry.items()}

        for node in graph.nodes:
            for catalog_id, refs in node.catalog_refs.items():
                known = entry_ids.get(catalog_id)
                if known is None:
                    report.warn(
                        IssueCode.UNKNOWN_CATALOG_REF,
                        f'node[{node.id}].catalogRefs references unknown catalog "{catalog_id}"',
                    )
                    continue
                for entry_id in refs:
                    if entry_id not in known:
                        report.warn(
                            IssueCode.DANGLING_ENTRY_REF,
                            f'node[{node.id}].catalogRefs.{catalog_id} references '
                            f'missing entry "{entry_id}"',
                        )


def validate(registry: Mapping[str, Catalog], graph: Graph | None = None) -> ValidationResult:
    """Validate a registry (and graph) with a default validator."""
    return RegistryValidator().validate(registry, graph)
