import json
from pathlib import Path

import pytest
import yaml

from catalog_engine.catalog.loader import CatalogLoader, load_catalogs, resolve_path
from catalog_engine.errors import CatalogLoadError
from catalog_engine.graph.loader import load_graph
from catalog_engine.operators.validator import IssueCode, validate


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_dict_inline_catalogs():
    registry = load_catalogs({
        "people": {
            "id": "people",
            "version": 2,
            "schema": {"age": "number"},
            "entries": [{"id": "a", "tags": ["x"], "age": 30}],
        },
    })

    people = registry["people"]
    assert people.version == "2"
    assert people.schema == {"age": "number"}
    assert people.entries[0].tags == ("x",)
    assert people.entries[0].get("age") == 30


def test_load_dict_skips_reserved_keys_and_accepts_catalogs_wrapper():
    registry = CatalogLoader().load_dict({
        "version": "1.0",
        "description": "World catalogs",
        "catalogs": {
            "$schema": "catalogs.schema.json",
            "tools": {"id": "tools", "entries": []},
        },
    })
    assert list(registry) == ["tools"]


def test_mismatched_key_is_preserved_for_validation():
    registry = load_catalogs({"people": {"id": "humans", "entries": []}})
    assert registry["people"].id == "humans"


def test_missing_id_falls_back_to_key():
    assert load_catalogs({"tools": {"entries": []}})["tools"].id == "tools"


def test_file_references_resolve_against_registry_dir(tmp_path: Path):
    write_json(tmp_path / "catalogs" / "tools.json", {"id": "tools", "entries": [{"id": "synth"}]})
    registry_file = tmp_path / "catalogs.yaml"
    registry_file.write_text(yaml.safe_dump({
        "catalogs": {
            "tools": "./catalogs/tools.json",
            "people": {"id": "people", "entries": [{"id": "a"}]},
        },
    }), encoding="utf-8")

    registry = load_catalogs(registry_file)

    assert list(registry) == ["tools", "people"]
    assert registry["tools"].entry_ids() == ["synth"]


def test_unreadable_reference_is_skipped(tmp_path: Path, caplog: pytest.LogCaptureFixture):
    registry_file = write_json(tmp_path / "catalogs.json", {"catalogs": {"gone": "missing.json"}})
    caplog.set_level("WARNING")

    registry = load_catalogs(registry_file)

    assert registry == {}
    assert any("Skipping catalog 'gone'" in r.message for r in caplog.records)


def test_load_directory_one_catalog_per_file(tmp_path: Path):
    write_json(tmp_path / "b_tools.json", {"id": "tools", "entries": [{"id": "synth"}]})
    (tmp_path / "a_people.yaml").write_text(
        "id: people\nentries:\n  - id: a\n    age: 30\n", encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    registry = load_catalogs(tmp_path)

    assert list(registry) == ["people", "tools"]


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_catalogs(tmp_path / "nope.yaml")


def test_not_a_directory(tmp_path: Path):
    with pytest.raises(NotADirectoryError):
        CatalogLoader().load_directory(tmp_path / "nope")


@pytest.mark.parametrize(
    "data",
    [
        {"c": ["not", "a", "catalog"]},
        {"c": {"id": 5, "entries": []}},
        {"c": {"id": "c", "entries": {"a": {}}}},
        {"c": {"id": "c", "entries": [{"id": [7]}]}},
        {"c": {"id": "c", "entries": [{"id": "a", "tags": "x"}]}},
        {"c": {"id": "c", "schema": ["age"], "entries": []}},
    ],
)
def test_malformed_catalogs_raise(data):
    with pytest.raises(CatalogLoadError):
        load_catalogs(data)


def test_non_string_entry_id_loads_and_is_reported():
    registry = load_catalogs({"people": {"id": "people", "entries": [{"id": 1}, {"id": "b"}]}})

    assert registry["people"].entry_ids() == [1, "b"]
    result = validate(registry)
    assert not result.valid
    assert result.has_code(IssueCode.EMPTY_ENTRY_ID)
    assert len(result.errors) == 1


def test_unparsable_registry_file_raises(tmp_path: Path):
    bad = tmp_path / "catalogs.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogLoadError):
        load_catalogs(bad)


def test_resolve_path():
    assert resolve_path("./tools.json", "/data") == Path("/data/tools.json")
    assert resolve_path("/abs/tools.json", "/data") == Path("/abs/tools.json")
    assert resolve_path("tools.json", None) == Path("tools.json")


def test_load_graph_from_dict_accepts_both_key_styles():
    graph = load_graph({
        "nodes": [
            {"id": "n1", "type": "character", "tags": ["x"], "catalogRefs": {"people": ["b"]},
             "pointerTags": ["cap:people"], "label": "First"},
            {"id": "n2", "type": "concept", "catalog_refs": {"tools": ["synth"]}, "pointer_tags": ["cap:tools"]},
        ],
        "edges": [{"source": "n1", "target": "n2", "type": "relates"}],
    })

    n1 = graph.get_node("n1")
    assert n1.catalog_refs == {"people": ("b",)}
    assert n1.has_capability("people")
    assert n1.data == {"label": "First"}
    assert graph.get_node("n2").refs_for("tools") == ("synth",)
    assert graph.neighbor_ids("n2") == ["n1"]
    assert n1.to_dict()["catalogRefs"] == {"people": ["b"]}


def test_load_graph_from_file_and_none(tmp_path: Path):
    path = tmp_path / "graph.yaml"
    path.write_text("nodes:\n  - id: n1\n    type: concept\nedges: []\n", encoding="utf-8")

    assert len(load_graph(path)) == 1
    assert len(load_graph(None)) == 0


@pytest.mark.parametrize(
    "data",
    [
        {"nodes": [{"type": "concept"}]},
        {"nodes": [{"id": "n", "catalogRefs": ["people"]}]},
        {"nodes": [{"id": "n", "catalogRefs": {"people": "a"}}]},
        {"nodes": [], "edges": [{"source": "n"}]},
        {"nodes": {"id": "n"}},
        {"nodes": [{"id": "n", "tags": "audio"}]},
        {"nodes": [{"id": "n", "pointerTags": "cap:tools"}]},
    ],
)
def test_malformed_graph_raises(data):
    with pytest.raises(CatalogLoadError):
        load_graph(data)
