import pytest

from catalog_engine.catalog.store import CatalogStore
from catalog_engine.catalog.types import Catalog, CatalogEntry
from catalog_engine.graph.types import Graph, GraphEdge, GraphNode
from catalog_engine.operators.engine import OperatorEngine


@pytest.fixture
def people() -> Catalog:
    return Catalog(
        id="people",
        schema={"age": "number"},
        entries=[
            CatalogEntry(id="a", tags=("x",), attributes={"age": 30}),
            CatalogEntry(id="b", tags=("y",), attributes={"age": 20}),
        ],
    )


@pytest.fixture
def tools() -> Catalog:
    return Catalog(
        id="tools",
        version="1.0",
        description="Production tools",
        entries=[
            CatalogEntry(id="synth", tags=("audio", "x"), attributes={"kind": "instrument", "price": 900,
                                                                     "platforms": ["mac", "win"]}),
            CatalogEntry(id="daw", tags=("audio", "editing"), attributes={"kind": "software", "price": 200,
                                                                         "platforms": ["mac"]}),
            CatalogEntry(id="mic", tags=("recording",), attributes={"kind": "hardware", "price": 150}),
        ],
    )


@pytest.fixture
def store(people, tools) -> CatalogStore:
    return CatalogStore([people, tools])


@pytest.fixture
def graph() -> Graph:
    return Graph(
        nodes=[
            GraphNode(id="n1", type="character", tags=("x",), catalog_refs={"people": ("b",)}),
            GraphNode(id="n2", type="concept", tags=("audio",), pointer_tags=("cap:tools",)),
            GraphNode(id="n3", type="concept", pointer_tags=("cap:recording",),
                      catalog_refs={"people": ("ghost",), "planets": ("earth",)}),
            GraphNode(id="n4", type="concept"),
        ],
        edges=[
            GraphEdge(source="n1", target="n2"),
            GraphEdge(source="n2", target="n3"),
            GraphEdge(source="n3", target="n4"),
        ],
    )


@pytest.fixture
def engine(graph, store) -> OperatorEngine:
    return OperatorEngine(graph, store)
