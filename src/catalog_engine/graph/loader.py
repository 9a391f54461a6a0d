"""Graph loader - builds a Graph from YAML/JSON node and edge lists."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ..catalog.loader import read_data_file
from ..errors import CatalogLoadError
from .types import Graph, GraphEdge, GraphNode


logger = logging.getLogger(__name__)


def graph_from_dict(data: Mapping[str, Any]) -> Graph:
    """
    Build a graph from ``{"nodes": [...], "edges": [...]}``.

    Node keys may use either camelCase (``catalogRefs``, ``pointerTags``)
    or snake_case.
    """
    if not isinstance(data, Mapping):
        raise CatalogLoadError(f"Graph definition must be a mapping, got {type(data).__name__}")

    raw_nodes = data.get("nodes") or []
    raw_edges = data.get("edges") or data.get("links") or []
    if not isinstance(raw_nodes, list) or not isinstance(raw_edges, list):
        raise CatalogLoadError("Graph 'nodes' and 'edges' must be lists")

    graph = Graph(
        nodes=[GraphNode.from_dict(n) for n in raw_nodes],
        edges=[GraphEdge.from_dict(e) for e in raw_edges],
    )
    logger.info(f"Loaded graph with {len(graph.nodes)} nodes and {len(graph.edges)} edges")
    return graph


def load_graph(source: str | Path | Mapping[str, Any] | None) -> Graph:
    """
    Load a graph from a dictionary or a YAML/JSON file.

    ``None`` gives an empty graph, for engines that only serve queries.
    """
    if source is None:
        return Graph()

    if isinstance(source, Mapping):
        return graph_from_dict(source)

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Graph file not found: {path}")

    try:
        data = read_data_file(path)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Cannot parse graph file {path}: {e}") from e

    return graph_from_dict(data or {})
