# tests/test_patch.py
"""Tests for applying the definitions patch to a schema file."""

import json

import pytest


def _read(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestPatchSchemaFile:

    def test_patch_fills_missing_definitions(self, transmuter_schema_path):
        from contractgen.definitions import DEFINITIONS
        from contractgen.patch import patch_schema_file

        result = patch_schema_file(transmuter_schema_path, DEFINITIONS)

        doc = _read(transmuter_schema_path)
        assert doc["definitions"] == DEFINITIONS
        assert sorted(result.added) == sorted(DEFINITIONS)
        assert result.replaced == []
        assert result.unresolved == []
        assert result.changed

    def test_patch_keeps_other_content(self, transmuter_schema_path):
        from contractgen.definitions import DEFINITIONS
        from contractgen.patch import patch_schema_file

        before = _read(transmuter_schema_path)
        patch_schema_file(transmuter_schema_path, DEFINITIONS)
        after = _read(transmuter_schema_path)

        after.pop("definitions")
        assert after == before

    def test_patch_preserves_unrelated_definitions(self, tmp_path):
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"definitions": {"Extra": {"type": "boolean"}}}), encoding="utf-8")
        patch_schema_file(path, {"Coin": {"type": "object"}})
        assert _read(path)["definitions"] == {
            "Extra": {"type": "boolean"},
            "Coin": {"type": "object"},
        }

    def test_overwrite_replaces_existing(self, tmp_path):
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"definitions": {"Addr": {"type": "integer"}}}), encoding="utf-8")
        result = patch_schema_file(path, {"Addr": {"type": "string"}})
        assert result.replaced == ["Addr"]
        assert _read(path)["definitions"]["Addr"] == {"type": "string"}

    def test_fill_missing_keeps_existing(self, tmp_path):
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"definitions": {"Addr": {"type": "integer"}}}), encoding="utf-8")
        result = patch_schema_file(
            path,
            {"Addr": {"type": "string"}, "Decimal": {"type": "string"}},
            overwrite=False,
        )
        assert result.skipped == ["Addr"]
        assert result.added == ["Decimal"]
        assert _read(path)["definitions"]["Addr"] == {"type": "integer"}

    def test_patch_is_idempotent(self, transmuter_schema_path):
        from contractgen.definitions import DEFINITIONS
        from contractgen.patch import patch_schema_file

        patch_schema_file(transmuter_schema_path, DEFINITIONS)
        first = transmuter_schema_path.read_text(encoding="utf-8")
        second_result = patch_schema_file(transmuter_schema_path, DEFINITIONS)

        assert transmuter_schema_path.read_text(encoding="utf-8") == first
        assert not second_result.changed

    def test_missing_file(self, tmp_path):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import patch_schema_file

        with pytest.raises(SchemaPatchError, match="not found"):
            patch_schema_file(tmp_path / "missing.json", {})

    def test_invalid_json(self, tmp_path):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SchemaPatchError, match="not valid JSON"):
            patch_schema_file(path, {})

    def test_undecodable_file(self, tmp_path):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_bytes(b'{"title": "\xff\xfe"}')
        with pytest.raises(SchemaPatchError, match="not valid JSON"):
            patch_schema_file(path, {})

    def test_non_object_document(self, tmp_path):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(SchemaPatchError, match="JSON object"):
            patch_schema_file(path, {})

    def test_non_object_definitions(self, tmp_path):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import patch_schema_file

        path = tmp_path / "schema.json"
        path.write_text(json.dumps({"definitions": []}), encoding="utf-8")
        with pytest.raises(SchemaPatchError, match="definitions"):
            patch_schema_file(path, {"Coin": {}})


class TestRefs:

    def test_collect_refs_in_order_without_duplicates(self):
        from contractgen.patch import collect_refs

        doc = {
            "a": {"$ref": "#/definitions/B"},
            "b": [{"$ref": "#/definitions/A"}, {"$ref": "#/definitions/B"}],
        }
        assert collect_refs(doc) == ["#/definitions/B", "#/definitions/A"]

    def test_unresolved_before_patch(self, transmuter_schema_path):
        from contractgen.patch import read_schema, unresolved_refs

        doc = read_schema(transmuter_schema_path)
        assert unresolved_refs(doc) == [
            "#/definitions/Coin",
            "#/definitions/TransmuterPool",
            "#/definitions/Uint128",
        ]

    def test_nested_definitions_count_as_resolved(self):
        from contractgen.patch import unresolved_refs

        doc = {
            "execute": {
                "properties": {"x": {"$ref": "#/definitions/Addr"}},
                "definitions": {"Addr": {"type": "string"}},
            }
        }
        assert unresolved_refs(doc) == []

    def test_external_refs_ignored(self):
        from contractgen.patch import unresolved_refs

        assert unresolved_refs({"x": {"$ref": "other.json#/definitions/Coin"}}) == []


class TestCheckSchema:

    def test_valid_schema(self, transmuter_schema_path):
        from contractgen.patch import check_schema, read_schema

        check_schema(read_schema(transmuter_schema_path))

    def test_invalid_schema(self):
        from contractgen.errors import SchemaPatchError
        from contractgen.patch import check_schema

        with pytest.raises(SchemaPatchError, match="Invalid JSON Schema"):
            check_schema({"type": 12})
