"""Tests for loading and validating the protocol schema."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from devtools_core.codegen import DEFAULT_SCHEMA_PATH
from devtools_core.errors import SchemaError
from devtools_core.schema import TypeDecl, load_schema, parse_schema

from conftest import FOO_DOMAIN, make_schema


class TestParseSchema:
    def test_domains_keep_document_order(self):
        doc = make_schema({"domain": "B", "commands": []}, {"domain": "A", "commands": []})
        assert [d.domain for d in doc.domains] == ["B", "A"]

    def test_ref_is_read_from_dollar_key(self):
        decl = TypeDecl.model_validate({"name": "node", "$ref": "DOM.Node"})
        assert decl.ref == "DOM.Node"
        assert decl.type is None

    def test_nested_items_and_properties(self, foo_schema):
        item = foo_schema.domain("Foo").types[1]
        children = item.properties[2]
        assert children.type == "array"
        assert children.optional is True
        assert children.items is not None
        assert children.items.ref == "Item"

    def test_optional_defaults_to_false(self):
        assert TypeDecl(name="x", type="integer").optional is False

    def test_unknown_keys_are_ignored(self):
        doc = parse_schema(
            {
                "version": {"major": "1", "minor": "3"},
                "domains": [{"domain": "X", "commands": [], "dependencies": ["Y"]}],
            }
        )
        assert doc.domain("X").events is None

    def test_missing_commands_is_rejected(self):
        with pytest.raises(SchemaError):
            parse_schema({"domains": [{"domain": "X"}]})

    def test_non_object_document_is_rejected(self):
        with pytest.raises(SchemaError):
            parse_schema(["not", "a", "schema"])

    def test_document_is_frozen(self, foo_schema):
        with pytest.raises(ValidationError):
            foo_schema.domains = ()

    def test_domain_lookup_missing_raises_key_error(self, foo_schema):
        with pytest.raises(KeyError):
            foo_schema.domain("Nope")


class TestLoadSchema:
    def test_loads_file(self, tmp_path):
        path = tmp_path / "protocol.json"
        path.write_text(json.dumps({"domains": [FOO_DOMAIN]}), encoding="utf-8")
        doc = load_schema(path)
        assert doc.domain("Foo").commands[0].name == "bar"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaError, match="Cannot read"):
            load_schema(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "protocol.json"
        path.write_text("{domains: ", encoding="utf-8")
        with pytest.raises(SchemaError, match="not valid JSON"):
            load_schema(path)

    def test_bundled_schema_loads(self):
        doc = load_schema(DEFAULT_SCHEMA_PATH)
        names = [d.domain for d in doc.domains]
        assert names == ["Inspector", "Network", "Page", "DOM", "Runtime"]
        assert doc.domain("Inspector").experimental is True
