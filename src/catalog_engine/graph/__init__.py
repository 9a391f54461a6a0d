"""Graph model consumed by the operator engine."""

from .types import CAPABILITY_PREFIX, Graph, GraphEdge, GraphNode
from .loader import graph_from_dict, load_graph

__all__ = [
    "CAPABILITY_PREFIX",
    "Graph",
    "GraphEdge",
    "GraphNode",
    "graph_from_dict",
    "load_graph",
]
