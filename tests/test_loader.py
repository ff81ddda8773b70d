"""
tests/test_loader.py
Tests for dtoschema.models and dtoschema.loader.

Tests cover:
- File loading by extension (JSON, YAML, unknown) and error wrapping
- Document model validation (extra keys, name clashes, shorthand forms)
- Building schemas from documents: types, checks, aliases, invariants, lists
- Standard checks available to every document
"""

from __future__ import annotations

import io
import pathlib
from typing import Any, Callable, Dict

import pytest

from dtoschema.exceptions import (
    SchemaDefinitionError,
    SchemaDocumentError,
    UnresolvedReferenceError,
)
from dtoschema.loader import (
    build_schema,
    load_data_file,
    load_document_file,
    load_schema,
    parse_schema_document,
)
from dtoschema.models import CheckCall, FieldDefinition, ListTypeSpec, SchemaDocument
from dtoschema.schema import Schema


# ===========================================================================
# File loading
# ===========================================================================


class TestLoadFiles:
    """JSON / YAML parsing."""

    def test_yaml_document(self, schema_yaml_path: pathlib.Path) -> None:
        raw = load_document_file(schema_yaml_path)
        assert set(raw) == {"objects", "lists", "checks"}

    def test_json_document(self, schema_json_path: pathlib.Path) -> None:
        raw = load_document_file(schema_json_path)
        assert "tag" in raw["objects"]

    def test_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_data_file(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_data_file(path)

    def test_invalid_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("a: [1, 2", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_data_file(path)

    def test_deeply_nested_json(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "deep.json"
        path.write_text("[" * 100000 + "]" * 100000, encoding="utf-8")
        with pytest.raises(ValueError, match="nested too deeply"):
            load_data_file(path)

    def test_unknown_extension_falls_back_to_yaml(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "data.txt"
        path.write_text("name: tag\nvalues: [1, 2]\n", encoding="utf-8")
        assert load_data_file(path) == {"name": "tag", "values": [1, 2]}

    def test_data_may_be_any_value(self, write_data: Callable[[str, Any], pathlib.Path]) -> None:
        assert load_data_file(write_data("list.json", [1, "a"])) == [1, "a"]
        assert load_data_file(write_data("null.json", None)) is None

    def test_stdin(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO('{"title": "x"}'))
        assert load_data_file("-") == {"title": "x"}

    def test_document_must_be_a_mapping(self, write_data: Callable[[str, Any], pathlib.Path]) -> None:
        with pytest.raises(ValueError, match="Expected a mapping"):
            load_document_file(write_data("schema.json", [1, 2]))

    def test_empty_document(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_document_file(path) == {}


# ===========================================================================
# Document models
# ===========================================================================


class TestSchemaDocument:
    """Pydantic validation of raw documents."""

    def test_parse(self, document_dict: Dict[str, Any]) -> None:
        document = parse_schema_document(document_dict)
        assert isinstance(document, SchemaDocument)
        assert document.type_names == ["tag", "post", "account", "point"]
        assert document.checks["short_text"] == CheckCall(name="length", args={"max": 3})

    def test_field_shorthands(self) -> None:
        field = FieldDefinition.model_validate({"type": {"list": "tag"}, "check": "not_empty"})
        assert isinstance(field.type_spec, ListTypeSpec)
        assert field.type_spec.item == "tag"
        assert field.check == ["not_empty"]
        assert FieldDefinition.model_validate({}).type_spec == "any"

    def test_nested_list_types(self) -> None:
        field = FieldDefinition.model_validate({"type": {"list": {"list": "float"}}})
        assert isinstance(field.type_spec.item, ListTypeSpec)

    def test_unknown_keys_rejected(self, document_dict: Dict[str, Any]) -> None:
        document_dict["objects"]["tag"]["fields"]["name"]["nullable"] = False
        with pytest.raises(SchemaDocumentError):
            parse_schema_document(document_dict)

    def test_object_list_name_clash(self, document_dict: Dict[str, Any]) -> None:
        document_dict["lists"]["tag"] = {"item": "string"}
        with pytest.raises(SchemaDocumentError, match="both as object and list"):
            parse_schema_document(document_dict)

    def test_builtin_name_rejected(self, document_dict: Dict[str, Any]) -> None:
        document_dict["objects"]["string"] = {"fields": {}}
        with pytest.raises(SchemaDocumentError, match="shadow built-in"):
            parse_schema_document(document_dict)

    def test_invariant_targets_must_exist(self, document_dict: Dict[str, Any]) -> None:
        document_dict["objects"]["account"]["invariants"][0]["fields"] = ["unknown"]
        with pytest.raises(SchemaDocumentError, match="undeclared field"):
            parse_schema_document(document_dict)

    def test_self_alias_rejected(self, document_dict: Dict[str, Any]) -> None:
        document_dict["checks"]["loop"] = {"name": "loop"}
        with pytest.raises(SchemaDocumentError, match="refers to itself"):
            parse_schema_document(document_dict)

    def test_null_sections(self) -> None:
        document = parse_schema_document({"objects": None, "lists": None})
        assert document.type_names == []


# ===========================================================================
# Building schemas
# ===========================================================================


class TestBuildSchema:
    """Documents turned into resolved schemas."""

    def test_load_schema(self, schema_yaml_path: pathlib.Path) -> None:
        schema = load_schema(schema_yaml_path)
        assert schema.is_resolved is True
        assert set(schema.validator_names) == {"tag", "post", "account", "point"}

    def test_nested_errors(self, schema_yaml_path: pathlib.Path) -> None:
        schema = load_schema(schema_yaml_path)
        data = {"tags": [42, {"name": "", "value": "abcd"}], "published": "yes"}
        assert schema.validate("post", data) == {
            "title": ["Cannot be null"],
            "tags": {
                0: ["Must be object"],
                1: {"name": ["Cannot be empty"], "value": ["Must contain at max 3 chars"]},
            },
            "published": ["Must be boolean"],
        }

    def test_any_field(self, schema_yaml_path: pathlib.Path) -> None:
        schema = load_schema(schema_yaml_path)
        assert schema.validate("post", {"title": "Hello", "meta": [1, {"x": None}]}) == {}

    def test_bound_check_args(self, schema_json_path: pathlib.Path) -> None:
        schema = load_schema(schema_json_path)
        assert schema.validate("post", {"title": "Hi"}) == {
            "title": ["Must contain at least 3 chars"]
        }

    def test_invariant(self, schema_yaml_path: pathlib.Path) -> None:
        schema = load_schema(schema_yaml_path)
        assert schema.validate("account", {"password": "a", "confirm_password": "b"}) == {
            "confirm_password": ["Passwords must be equal"]
        }

    def test_named_list_check(self, schema_yaml_path: pathlib.Path) -> None:
        schema = load_schema(schema_yaml_path)
        assert schema.validate("point", [1.0, 2.0]) == {}
        assert schema.validate("point", [1.0]) == ["Must contain at least 2 items"]
        assert schema.validate("point", [1.0, "y"]) == {1: ["Must be a Float"]}

    def test_document_overrides_standard_check(self, document_dict: Dict[str, Any]) -> None:
        document_dict["checks"]["not_empty"] = {"name": "length", "args": {"min": 2}}
        schema = build_schema(parse_schema_document(document_dict))
        errors = schema.validate("tag", {"name": "a", "value": "b"})
        assert errors == {"name": ["Must contain at least 2 chars"]}

    def test_standard_checks_available(self) -> None:
        document = parse_schema_document(
            {
                "objects": {
                    "user": {
                        "fields": {
                            "email": {
                                "type": "string",
                                "check": {"name": "pattern", "args": {"regex": "[^@]+@[^@]+"}},
                            },
                            "role": {
                                "type": "string",
                                "check": {"name": "one_of", "args": {"values": ["admin", "user"]}},
                            },
                            "age": {
                                "type": "integer",
                                "check": {"name": "range", "args": {"min": 0, "max": 150}},
                            },
                        }
                    }
                }
            }
        )
        schema = build_schema(document)
        assert schema.validate("user", {"email": "nope", "role": "root", "age": -1}) == {
            "email": ["Must match pattern [^@]+@[^@]+"],
            "role": ["Must be one of: admin, user"],
            "age": ["Must be at least 0"],
        }

    def test_mismatched_standard_check_reports_instead_of_raising(self) -> None:
        document = parse_schema_document(
            {
                "objects": {
                    "p": {
                        "fields": {
                            "n": {"type": "numeric", "check": {"name": "length", "args": {"max": 2}}},
                        }
                    }
                }
            }
        )
        schema = build_schema(document)
        assert schema.validate("p", {"n": 5}) == {"n": ["Must have a length"]}

    def test_undefined_type(self, document_dict: Dict[str, Any]) -> None:
        document_dict["objects"]["post"]["fields"]["author"] = {"type": "user"}
        with pytest.raises(UnresolvedReferenceError, match="validator 'user'"):
            build_schema(parse_schema_document(document_dict))

    def test_checks_on_object_field_rejected(self, document_dict: Dict[str, Any]) -> None:
        document_dict["objects"]["post"]["fields"]["tags"]["check"] = "not_empty"
        with pytest.raises(SchemaDefinitionError, match="not a primitive"):
            build_schema(parse_schema_document(document_dict))

    def test_into_existing_schema(self, document_dict: Dict[str, Any]) -> None:
        schema = Schema()
        assert build_schema(parse_schema_document(document_dict), schema) is schema
        assert "tag" in schema

    def test_unparseable_file(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "schema.yaml"
        path.write_text("objects: [", encoding="utf-8")
        with pytest.raises(SchemaDocumentError):
            load_schema(path)
