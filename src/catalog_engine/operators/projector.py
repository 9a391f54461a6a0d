"""Graph projector - resolves the catalog entries associated with a graph node."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..catalog.store import CatalogStore
from ..catalog.types import CatalogEntry, TagMode
from ..errors import InvalidTagModeError
from ..graph.types import CAPABILITY_PREFIX, GraphNode


logger = logging.getLogger(__name__)


def parse_tag_mode(mode: TagMode | str) -> TagMode:
    if isinstance(mode, TagMode):
        return mode
    try:
        return TagMode(mode)
    except ValueError:
        raise InvalidTagModeError(mode) from None


@dataclass(frozen=True, slots=True)
class ProjectOptions:
    """
    How a node is projected onto catalogs.

    ``use_refs`` follows the node's explicit ``catalog_refs``; ``use_tags``
    matches entry tags against node tags under ``tag_mode``. With
    ``require_capability`` a catalog is only projected when the node carries
    a ``cap:<catalog_id>`` pointer tag. ``catalog_ids`` limits which catalogs
    are projected at all.
    """
    use_refs: bool = True
    use_tags: bool = True
    tag_mode: TagMode = TagMode.ANY
    require_capability: bool = False
    pointer_tags_as_tags: bool = False
    catalog_ids: tuple[str, ...] | None = None

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "tag_mode", parse_tag_mode(self.tag_mode))
        if isinstance(self.catalog_ids, str):
            object.__setattr__(self, "catalog_ids", (self.catalog_ids,))
        elif self.catalog_ids is not None:
            object.__setattr__(self, "catalog_ids", tuple(self.catalog_ids))


def dedupe_by_id(*groups: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    """Concatenate entry groups, keeping the first entry seen for each id."""
    seen: set[str] = set()
    result = []
    for group in groups:
        for entry in group:
            if entry.id not in seen:
                seen.add(entry.id)
                result.append(entry)
    return result


class GraphProjector:
    """
    Projects graph nodes onto the catalogs of a store.

    Per catalog, entries reached through explicit references come first in
    reference order, then tag matches in catalog order, each entry once.
    Unresolvable references are skipped; reporting them is the validator's
    job.
    """

    def __init__(self, store: CatalogStore):
        self._store = store

    def node_tags(self, node: GraphNode, options: ProjectOptions) -> frozenset[str]:
        tags = set(node.tags)
        if options.pointer_tags_as_tags:
            for pt in node.pointer_tags:
                tags.add(pt[len(CAPABILITY_PREFIX):] if pt.startswith(CAPABILITY_PREFIX) else pt)
        return frozenset(tags)

    def project_catalog(
        self,
        node: GraphNode,
        catalog_id: str,
        options: ProjectOptions | None = None,
    ) -> list[CatalogEntry]:
        """Entries of one catalog associated with ``node``."""
        options = options or ProjectOptions()

        if not self._store.has(catalog_id):
            return []

        if options.require_capability and not node.has_capability(catalog_id):
            logger.debug("Node %s lacks capability for catalog %s", node.id, catalog_id)
            return []

        ref_entries: Sequence[CatalogEntry] = ()
        if options.use_refs:
            ref_entries = self._store.get_entries_by_ids(catalog_id, node.refs_for(catalog_id))

        tag_entries: Sequence[CatalogEntry] = ()
        if options.use_tags:
            tags = self.node_tags(node, options)
            if tags:
                tag_entries = self._store.filter_by_tags(catalog_id, tags, options.tag_mode)

        return dedupe_by_id(ref_entries, tag_entries)

    def project(
        self,
        node: GraphNode,
        options: ProjectOptions | None = None,
    ) -> dict[str, list[CatalogEntry]]:
        """
        Map every projected catalog id to the entries associated with ``node``.

        Keys follow registry order, or the order of ``options.catalog_ids``
        when given. Catalogs with nothing associated map to an empty list.
        """
        options = options or ProjectOptions()
        catalog_ids = (
            options.catalog_ids if options.catalog_ids is not None
            else self._store.catalog_ids()
        )
        return {cid: self.project_catalog(node, cid, options) for cid in catalog_ids}
