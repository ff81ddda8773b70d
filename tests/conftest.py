"""
tests/conftest.py
Shared fixtures for the dtoschema test suite.

Schemas hold only weak handles on themselves, so every fixture returns the
``Schema`` object (never just a validator taken from it) and tests keep it
in a local variable for as long as they validate.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import json
import numbers
import pathlib
from typing import Any, Callable, Dict, Optional

import pytest
import yaml

from dtoschema import Schema, SchemaBuilder, define, install_standard_checks


# ---------------------------------------------------------------------------
# Check bodies
# ---------------------------------------------------------------------------


def not_empty(value: Any) -> Optional[str]:
    if not value:
        return "Cannot be empty"
    return None


def length(value: Any, min: int = 0, max: Optional[int] = None) -> Optional[str]:
    unit: str = "chars" if isinstance(value, str) else "items"
    if len(value) < min:
        return f"Must contain at least {min} {unit}"
    if max is not None and len(value) > max:
        return f"Must contain at max {max} {unit}"
    return None


def exact_length(value: Any, size: int = 0) -> Optional[str]:
    if len(value) != size:
        return f"Must contain exactly {size} items"
    return None


# ---------------------------------------------------------------------------
# Programmatic schemas
# ---------------------------------------------------------------------------


def _declare_blog(s: SchemaBuilder) -> None:
    s.object("tag") \
        .required("name", str, check="not_empty") \
        .required("value", str, check=["not_empty", s.bind.length(max=3)])

    s.object("post") \
        .required("title", str, check=s.bind.length(min=3)) \
        .optional("tags", s.list_of("tag"))

    s.check("not_empty", not_empty)
    s.check("length", length)


@pytest.fixture()
def blog_schema() -> Schema:
    """``post`` with a list of ``tag`` objects; checks declared after use."""
    return define(_declare_blog)


@pytest.fixture()
def tree_schema() -> Schema:
    """Self-referencing ``tree``: a numeric value and a list of child trees."""

    def declare(s: SchemaBuilder) -> None:
        s.object("tree") \
            .required("value", numbers.Real) \
            .optional("child", s.list_of("tree"))

    return define(declare)


@pytest.fixture()
def polygon_schema() -> Schema:
    """Named ``point`` list with a list-level check, used by ``polygon``."""

    def declare(s: SchemaBuilder) -> None:
        s.check("exact_length", exact_length)
        s.list("point", float, check=s.bind.exact_length(size=2))
        s.object("polygon").required("vertices", s.list_of("point"))

    return define(declare)


@pytest.fixture()
def standard_schema() -> Schema:
    """Empty schema with the standard checks installed (not yet resolved)."""
    return install_standard_checks(Schema())


# ---------------------------------------------------------------------------
# Schema documents
# ---------------------------------------------------------------------------


_BLOG_DOCUMENT: Dict[str, Any] = {
    "objects": {
        "tag": {
            "fields": {
                "name": {"type": "string", "required": True, "check": "not_empty"},
                "value": {"type": "string", "required": True, "check": "short_text"},
            },
        },
        "post": {
            "fields": {
                "title": {
                    "type": "string",
                    "required": True,
                    "check": [{"name": "length", "args": {"min": 3}}],
                },
                "tags": {"type": {"list": "tag"}},
                "published": {"type": "boolean"},
                "meta": {"type": "any"},
            },
        },
        "account": {
            "fields": {
                "password": {"type": "string", "required": True},
                "confirm_password": {"type": "string", "required": True},
            },
            "invariants": [
                {
                    "fields": ["confirm_password"],
                    "check": {
                        "name": "fields_equal",
                        "args": {
                            "fields": ["password", "confirm_password"],
                            "message": "Passwords must be equal",
                        },
                    },
                }
            ],
        },
    },
    "lists": {
        "point": {
            "item": "float",
            "check": [{"name": "length", "args": {"min": 2, "max": 2}}],
        },
    },
    "checks": {
        "short_text": {"name": "length", "args": {"max": 3}},
    },
}


@pytest.fixture()
def document_dict() -> Dict[str, Any]:
    """Return a deep copy so each test can mutate freely."""
    return copy.deepcopy(_BLOG_DOCUMENT)


@pytest.fixture()
def schema_yaml_path(document_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the schema document to a temporary YAML file and return its path."""
    path = tmp_path / "schema.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(document_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def schema_json_path(document_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    """Write the schema document to a temporary JSON file and return its path."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(document_dict), encoding="utf-8")
    return path


@pytest.fixture()
def write_data(tmp_path: pathlib.Path) -> Callable[[str, Any], pathlib.Path]:
    """Factory: write a data value to ``tmp_path / name`` as JSON or YAML by suffix."""

    def _write(name: str, data: Any) -> pathlib.Path:
        path = tmp_path / name
        if path.suffix in (".yaml", ".yml"):
            path.write_text(yaml.dump(data, default_flow_style=False), encoding="utf-8")
        else:
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
