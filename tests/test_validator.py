from catalog_engine.catalog.store import CatalogStore
from catalog_engine.catalog.types import Catalog, CatalogEntry
from catalog_engine.graph.types import Graph, GraphNode
from catalog_engine.operators.validator import IssueCode, RegistryValidator, validate


def test_valid_registry_and_graph(people, tools):
    graph = Graph(nodes=[GraphNode(id="n1", catalog_refs={"people": ("a", "b")})])
    result = validate({"people": people, "tools": tools}, graph)

    assert result.valid
    assert result.errors == ()
    assert result.warnings == ()


def test_registry_key_mismatch_is_an_error():
    registry = {"people": Catalog(id="humans", entries=[CatalogEntry(id="a")])}

    result = validate(registry)

    assert not result.valid
    assert len(result.errors) == 1
    assert result.has_code(IssueCode.REGISTRY_KEY_MISMATCH)
    assert '"humans"' in result.errors[0]
    assert result.to_dict()["valid"] is False


def test_duplicate_entry_id_is_an_error():
    registry = {"c": Catalog(id="c", entries=[CatalogEntry(id="d"), CatalogEntry(id="e"), CatalogEntry(id="d")])}

    result = validate(registry)

    assert not result.valid
    assert result.errors[0].startswith("duplicate-entry-id:")
    assert "entries[2]" in result.errors[0]


def test_empty_entry_id_is_an_error():
    result = validate({"c": Catalog(id="c", entries=[CatalogEntry(id="")])})
    assert not result.valid
    assert result.has_code(IssueCode.EMPTY_ENTRY_ID)


def test_dangling_refs_are_warnings(store, graph):
    result = validate(store, graph)

    assert result.valid
    assert result.has_code(IssueCode.DANGLING_ENTRY_REF)
    assert result.has_code(IssueCode.UNKNOWN_CATALOG_REF)
    assert any('"ghost"' in w for w in result.warnings)
    assert any('"planets"' in w for w in result.warnings)


def test_schema_problems_are_warnings():
    catalog = Catalog(
        id="c",
        schema={"age": "number", "shape": "tensor"},
        entries=[CatalogEntry(id="e", attributes={"age": "old"})],
    )

    result = validate({"c": catalog})

    assert result.valid
    assert result.has_code(IssueCode.SCHEMA_TYPE_MISMATCH)
    assert result.has_code(IssueCode.UNKNOWN_SCHEMA_TYPE)
    assert result.errors == ()
    assert "schema-type-mismatch: catalog[c].entries[e].age: expected number, got str" in result.warnings


def test_each_check_has_a_distinct_code():
    assert len({code.value for code in IssueCode}) == len(IssueCode)


def test_validation_is_idempotent_and_pure(store, graph):
    validator = RegistryValidator()
    before = store.catalog_ids()

    first = validator.validate(store, graph)
    second = validator.validate(store, graph)

    assert first == second
    assert store.catalog_ids() == before


def test_without_graph_refs_are_not_checked(store):
    assert validate(store).warnings == ()


def test_store_keyed_by_registry_key_reports_mismatch(people):
    store = CatalogStore()
    store.register(people, key="humans")

    result = validate(store)

    assert not result.valid
    assert result.errors == ('registry-key-mismatch: catalog[humans].id "people" does not match registry key "humans"',)
