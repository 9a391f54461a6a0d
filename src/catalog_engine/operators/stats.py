"""Stats aggregator - summary counts over the registry and graph."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..catalog.types import Catalog
from ..graph.types import Graph


@dataclass(frozen=True, slots=True)
class CatalogStats:
    entry_count: int
    has_schema: bool

    def to_dict(self) -> dict[str, Any]:
        return {"entryCount": self.entry_count, "hasSchema": self.has_schema}


@dataclass(frozen=True, slots=True)
class RegistryStats:
    catalog_count: int
    total_entries: int
    catalogs: dict[str, CatalogStats] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "catalogCount": self.catalog_count,
            "totalEntries": self.total_entries,
            "catalogs": {cid: s.to_dict() for cid, s in self.catalogs.items()},
        }


@dataclass(frozen=True, slots=True)
class EngineStats:
    graph_nodes: int
    graph_edges: int
    catalogs: RegistryStats

    def to_dict(self) -> dict[str, Any]:
        return {
            "graphNodes": self.graph_nodes,
            "graphEdges": self.graph_edges,
            "catalogs": self.catalogs.to_dict(),
        }


def registry_stats(registry: Mapping[str, Catalog]) -> RegistryStats:
    per_catalog = {
        catalog_id: CatalogStats(
            entry_count=len(catalog.entries),
            has_schema=catalog.schema is not None,
        )
        for catalog_id, catalog in registry.items()
    }
    return RegistryStats(
        catalog_count=len(per_catalog),
        total_entries=sum(s.entry_count for s in per_catalog.values()),
        catalogs=per_catalog,
    )


def stats(registry: Mapping[str, Catalog], graph: Graph | None = None) -> EngineStats:
    """Fresh counts on every call; nothing is cached."""
    return EngineStats(
        graph_nodes=len(graph.nodes) if graph is not None else 0,
        graph_edges=len(graph.edges) if graph is not None else 0,
        catalogs=registry_stats(registry),
    )
