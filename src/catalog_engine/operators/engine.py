"""Operator engine - one entry point over a graph and its catalog store.

Operators never change the graph or the store; they produce views:

- project: catalog entries associated with a node
- filter / query / count: predicate evaluation
- expand: neighbourhood of a node
- intersect / union: set operations on entry lists, by entry id
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Mapping, Sequence

from ..catalog.store import CatalogStore
from ..catalog.types import Catalog, CatalogEntry
from ..graph.types import Graph, GraphNode
from .predicate import EntryPredicate, filter_entries
from .projector import GraphProjector, ProjectOptions, dedupe_by_id
from .query import CatalogQueryEngine, QueryMatch, QueryOptions
from .stats import EngineStats, stats
from .validator import RegistryValidator, ValidationResult


logger = logging.getLogger(__name__)


class OperatorEngine:
    """
    Binds a graph to a catalog store.

    ``defaults`` are the projection options used when a call passes none.
    """

    def __init__(
        self,
        graph: Graph,
        store: CatalogStore,
        defaults: ProjectOptions | None = None,
    ):
        if graph is None:
            raise ValueError("OperatorEngine requires a graph")
        if store is None:
            raise ValueError("OperatorEngine requires a catalog store")

        self.graph = graph
        self.store = store
        self.defaults = defaults or ProjectOptions()

        self._projector = GraphProjector(store)
        self._queries = CatalogQueryEngine(store)
        self._validator = RegistryValidator()

    def _resolve_node(self, node: GraphNode | str) -> GraphNode | None:
        if isinstance(node, GraphNode):
            return node
        return self.graph.get_node(node)

    # -- Projection ---------------------------------------------------------

    def project(
        self,
        node: GraphNode | str,
        options: ProjectOptions | None = None,
    ) -> dict[str, list[CatalogEntry]]:
        """Project a node (or node id) onto every catalog. Unknown ids give {}."""
        resolved = self._resolve_node(node)
        if resolved is None:
            return {}
        return self._projector.project(resolved, options or self.defaults)

    def project_catalog(
        self,
        node: GraphNode | str,
        catalog_id: str,
        options: ProjectOptions | None = None,
    ) -> list[CatalogEntry]:
        resolved = self._resolve_node(node)
        if resolved is None:
            return []
        return self._projector.project_catalog(resolved, catalog_id, options or self.defaults)

    def project_and_filter(
        self,
        node: GraphNode | str,
        catalog_id: str,
        predicate: EntryPredicate,
        options: ProjectOptions | None = None,
    ) -> list[CatalogEntry]:
        return self.filter(self.project_catalog(node, catalog_id, options), predicate)

    def project_multiple(
        self,
        nodes: Iterable[GraphNode | str],
        catalog_id: str,
        options: ProjectOptions | None = None,
    ) -> list[CatalogEntry]:
        """Union of the projections of several nodes, first node's entries first."""
        result: list[CatalogEntry] = []
        for node in nodes:
            result = self.union(result, self.project_catalog(node, catalog_id, options))
        return result

    # -- Filtering ----------------------------------------------------------

    def filter(self, entries: Iterable[CatalogEntry], predicate: EntryPredicate) -> list[CatalogEntry]:
        return filter_entries(entries, predicate)

    def query(self, predicate: EntryPredicate, options: QueryOptions | None = None) -> list[QueryMatch]:
        return self._queries.query(predicate, options)

    def count(self, predicate: EntryPredicate, options: QueryOptions | None = None) -> int:
        return self._queries.count(predicate, options)

    # -- Graph traversal ----------------------------------------------------

    def expand(self, node_id: str, depth: int = 1) -> list[str]:
        """
        Ids of nodes within ``depth`` hops of ``node_id``, nearest first.

        The start node itself is never included.
        """
        if depth < 1 or node_id not in self.graph:
            return []

        visited = {node_id}
        result: list[str] = []
        queue = deque([(node_id, 0)])
        while queue:
            current, distance = queue.popleft()
            if distance >= depth:
                continue
            for neighbor in self.graph.neighbor_ids(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    result.append(neighbor)
                    queue.append((neighbor, distance + 1))
        return result

    # -- Set operations -----------------------------------------------------

    @staticmethod
    def intersect(first: Sequence[CatalogEntry], second: Iterable[CatalogEntry]) -> list[CatalogEntry]:
        """Entries of ``first`` whose id also appears in ``second``."""
        ids = {entry.id for entry in second}
        return [entry for entry in first if entry.id in ids]

    @staticmethod
    def union(first: Iterable[CatalogEntry], second: Iterable[CatalogEntry]) -> list[CatalogEntry]:
        """``first`` then ``second``, each entry id once."""
        return dedupe_by_id(first, second)

    # -- Observability ------------------------------------------------------

    def validate(self, registry: Mapping[str, Catalog] | None = None) -> ValidationResult:
        """Validate ``registry`` (default: the engine's store) against the graph."""
        target = registry if registry is not None else self.store
        result = self._validator.validate(target, self.graph)
        if not result.valid:
            logger.warning("Catalog validation failed with %d errors", len(result.errors))
        return result

    def stats(self) -> EngineStats:
        return stats(self.store, self.graph)
