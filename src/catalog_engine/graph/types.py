"""Graph types - the external node/edge structure catalogs are projected onto."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..errors import CatalogLoadError

CAPABILITY_PREFIX = "cap:"


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


@dataclass(frozen=True, slots=True)
class GraphNode:
    """
    A graph node as the engine sees it.

    Ordinary ``tags`` classify the node. ``pointer_tags`` are capability
    markers (``cap:<name>``) and never take part in tag matching unless a
    projection asks for it.
    """
    id: str
    type: str = ""
    tags: tuple[str, ...] = ()
    pointer_tags: tuple[str, ...] = ()

    # catalog id -> ordered entry ids the node references explicitly
    catalog_refs: dict[str, tuple[str, ...]] = field(default_factory=dict)

    # Anything else the graph carries
    data: dict[str, Any] = field(default_factory=dict)

    def has_capability(self, name: str) -> bool:
        return f"{CAPABILITY_PREFIX}{name}" in self.pointer_tags

    def refs_for(self, catalog_id: str) -> tuple[str, ...]:
        return self.catalog_refs.get(catalog_id, ())

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "type": self.type}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.pointer_tags:
            data["pointerTags"] = list(self.pointer_tags)
        if self.catalog_refs:
            data["catalogRefs"] = {k: list(v) for k, v in self.catalog_refs.items()}
        data.update(self.data)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GraphNode:
        if not isinstance(data, Mapping):
            raise CatalogLoadError(f"Graph node must be a mapping, got {type(data).__name__}")

        node_id = data.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise CatalogLoadError(f"Graph node id must be a non-empty string, got {node_id!r}")

        refs = _first(data, "catalogRefs", "catalog_refs") or {}
        if not isinstance(refs, Mapping):
            raise CatalogLoadError(f"catalogRefs of node '{node_id}' must be a mapping")

        catalog_refs = {}
        for catalog_id, entry_ids in refs.items():
            if not isinstance(entry_ids, (list, tuple)):
                raise CatalogLoadError(
                    f"catalogRefs[{catalog_id}] of node '{node_id}' must be a list"
                )
            catalog_refs[str(catalog_id)] = tuple(str(e) for e in entry_ids)

        tags = data.get("tags") or ()
        pointer_tags = _first(data, "pointerTags", "pointer_tags") or ()
        for name, value in (("tags", tags), ("pointerTags", pointer_tags)):
            if not isinstance(value, (list, tuple)):
                raise CatalogLoadError(f"{name} of node '{node_id}' must be a list")

        known = {"id", "type", "tags", "pointerTags", "pointer_tags", "catalogRefs", "catalog_refs"}
        return cls(
            id=node_id,
            type=str(data.get("type", "")),
            tags=tuple(str(t) for t in tags),
            pointer_tags=tuple(str(t) for t in pointer_tags),
            catalog_refs=catalog_refs,
            data={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """An undirected-for-traversal link between two nodes."""
    source: str
    target: str
    type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GraphEdge:
        try:
            return cls(
                source=str(data["source"]),
                target=str(data["target"]),
                type=str(data.get("type", "")),
            )
        except (KeyError, TypeError) as e:
            raise CatalogLoadError(f"Graph edge needs 'source' and 'target': {data!r}") from e


class Graph:
    """
    Read-only view over nodes and edges.

    Nodes keep their definition order; a repeated node id keeps its first
    definition for lookups.
    """

    def __init__(self, nodes: Iterable[GraphNode] = (), edges: Iterable[GraphEdge] = ()):
        self._nodes = list(nodes)
        self._edges = list(edges)
        self._by_id: dict[str, GraphNode] = {}
        for node in self._nodes:
            self._by_id.setdefault(node.id, node)

        self._adjacency: dict[str, list[str]] = {}
        for edge in self._edges:
            self._link(edge.source, edge.target)
            self._link(edge.target, edge.source)

    def _link(self, a: str, b: str) -> None:
        neighbors = self._adjacency.setdefault(a, [])
        if b not in neighbors:
            neighbors.append(b)

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes)

    @property
    def edges(self) -> list[GraphEdge]:
        return list(self._edges)

    def get_node(self, node_id: str) -> GraphNode | None:
        return self._by_id.get(node_id)

    def neighbor_ids(self, node_id: str) -> list[str]:
        """Ids linked to ``node_id`` by an edge in either direction."""
        return list(self._adjacency.get(node_id, ()))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id
