import logging

import pytest

from catalog_engine.catalog.store import CatalogStore, find_schema_mismatches
from catalog_engine.catalog.types import Catalog, CatalogEntry
from catalog_engine.errors import SchemaMismatchError


def test_lookups_never_raise(store):
    assert store.get("nope") is None
    assert store.get_entry("nope", "a") is None
    assert store.get_entry("people", "nope") is None
    assert store.get_entries("nope") == []
    assert store.get_entries_by_ids("nope", ["a"]) == []


def test_get_and_get_entry(store, people):
    assert store.get("people") is people
    assert store.get_entry("people", "b").get("age") == 20
    assert store.has("tools")
    assert "tools" in store
    assert store["people"] is people


def test_registration_order_is_kept(store):
    assert store.catalog_ids() == ["people", "tools"]
    assert list(store) == ["people", "tools"]
    assert len(store) == 2


def test_register_replaces_by_id_in_place(store):
    replacement = Catalog(id="people", entries=[CatalogEntry(id="z")])
    store.register(replacement)

    assert store.catalog_ids() == ["people", "tools"]
    assert store.get_entry("people", "z") is not None
    assert store.get_entry("people", "a") is None


def test_get_entries_by_ids_keeps_request_order_and_skips_unknown(store):
    entries = store.get_entries_by_ids("people", ["b", "ghost", "a"])
    assert [e.id for e in entries] == ["b", "a"]


def test_get_entries_returns_a_copy(store):
    store.get_entries("people").clear()
    assert len(store.get_entries("people")) == 2


def test_filter_by_tags(store):
    assert [e.id for e in store.filter_by_tags("tools", ["audio"])] == ["synth", "daw"]
    assert [e.id for e in store.filter_by_tags("tools", ["audio", "x"], "all")] == ["synth"]
    assert store.filter_by_tags("tools", []) == []


def test_put_entry_replaces_or_appends(store):
    assert store.put_entry("people", CatalogEntry(id="a", attributes={"age": 31}))
    assert store.put_entry("people", CatalogEntry(id="c", attributes={"age": 5}))

    assert store.get_entry("people", "a").get("age") == 31
    assert [e.id for e in store.get_entries("people")] == ["a", "b", "c"]
    assert not store.put_entry("nope", CatalogEntry(id="x"))


def test_unregister_and_clear(store):
    assert store.unregister("people").id == "people"
    assert store.unregister("people") is None
    assert store.catalog_ids() == ["tools"]

    store.clear()
    assert len(store) == 0


def test_duplicate_entry_id_first_wins_for_lookup():
    store = CatalogStore([Catalog(id="c", entries=[
        CatalogEntry(id="d", attributes={"n": 1}),
        CatalogEntry(id="d", attributes={"n": 2}),
    ])])
    assert store.get_entry("c", "d").get("n") == 1


def test_schema_mismatch_is_reported_but_registered(caplog: pytest.LogCaptureFixture):
    catalog = Catalog(
        id="people",
        schema={"age": "number", "name": "string"},
        entries=[
            CatalogEntry(id="a", attributes={"age": "thirty", "name": "Ada"}),
            CatalogEntry(id="b", attributes={"age": 20}),
        ],
    )
    store = CatalogStore()
    caplog.set_level("WARNING")

    mismatches = store.register(catalog)

    assert store.has("people")
    assert len(mismatches) == 1
    assert isinstance(mismatches[0], SchemaMismatchError)
    assert mismatches[0].entry_id == "a"
    assert mismatches[0].attribute == "age"
    assert any("Schema mismatch" in r.message for r in caplog.records)


def test_strict_register_raises_and_leaves_store_unchanged():
    catalog = Catalog(id="c", schema={"n": "integer"}, entries=[CatalogEntry(id="e", attributes={"n": 1.5})])
    store = CatalogStore()

    with pytest.raises(SchemaMismatchError):
        store.register(catalog, strict=True)
    assert not store.has("c")


def test_schema_check_skips_absent_attributes_and_unknown_types():
    catalog = Catalog(
        id="c",
        schema={"n": "number", "flag": "boolean", "weird": "tensor"},
        entries=[CatalogEntry(id="e", attributes={"weird": 1, "flag": True})],
    )
    assert find_schema_mismatches(catalog) == []


def test_booleans_do_not_satisfy_number_schema():
    catalog = Catalog(id="c", schema={"n": "number"}, entries=[CatalogEntry(id="e", attributes={"n": True})])
    assert len(find_schema_mismatches(catalog)) == 1


def test_register_logs_at_debug(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger="catalog_engine.catalog.store")
    CatalogStore([Catalog(id="c")])
    assert any("Registered catalog c" in r.getMessage() for r in caplog.records)


def test_register_under_a_registry_key(people):
    store = CatalogStore()
    store.register(people, key="humans")

    assert store.catalog_ids() == ["humans"]
    assert store.get("people") is None
    assert store.get_entry("humans", "a").get("age") == 30
    assert dict(store.items()) == {"humans": people}
