from catalog_engine.catalog.types import Catalog, CatalogEntry
from catalog_engine.graph.types import Graph
from catalog_engine.operators.stats import stats


def test_stats_shape(store, graph):
    assert stats(store, graph).to_dict() == {
        "graphNodes": 4,
        "graphEdges": 3,
        "catalogs": {
            "catalogCount": 2,
            "totalEntries": 5,
            "catalogs": {
                "people": {"entryCount": 2, "hasSchema": True},
                "tools": {"entryCount": 3, "hasSchema": False},
            },
        },
    }


def test_stats_are_fresh_after_mutation(store, graph):
    assert stats(store, graph).catalogs.total_entries == 5
    store.put_entry("people", CatalogEntry(id="c"))
    store.register(Catalog(id="empty", schema={}))

    result = stats(store, graph)

    assert result.catalogs.total_entries == 6
    assert result.catalogs.catalog_count == 3
    assert result.catalogs.catalogs["empty"].has_schema


def test_stats_without_graph_or_catalogs():
    result = stats({}, Graph())
    assert result.graph_nodes == 0
    assert result.catalogs.catalog_count == 0
    assert stats({}).graph_edges == 0
