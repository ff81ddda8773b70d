# File: dtoschema/loader.py
"""
DTOSchema - Schema Document Loader
===================================
Reads schema documents and data files from disk and turns documents into
resolved ``Schema`` objects.

Pipeline::

    load_document_file()  ->  parse_schema_document()  ->  build_schema()
          (JSON / YAML)            (pydantic models)          (Schema)

``load_schema(path)`` runs all three.  Every schema built here starts with
the standard checks installed; a document may override any of them.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from dtoschema.builder import ObjectBuilder, SchemaBuilder
from dtoschema.checks import BoundCheck, CheckReference
from dtoschema.exceptions import SchemaDocumentError
from dtoschema.models import (
    CheckCall,
    CheckSpec,
    ListTypeSpec,
    SchemaDocument,
    TypeSpec,
)
from dtoschema.schema import Schema
from dtoschema.standard_checks import install_standard_checks
from dtoschema.validators import AnyValidator, BoolValidator, PrimitiveKind

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.loader")

# Built-in document type names -> builder type specifications
_BUILTIN_TYPES: Dict[str, Any] = {
    "string": PrimitiveKind.STRING,
    "numeric": PrimitiveKind.NUMERIC,
    "integer": PrimitiveKind.INTEGER,
    "float": PrimitiveKind.FLOAT,
}


# ---------------------------------------------------------------------------
# File loaders
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Any:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    except RecursionError as exc:
        raise ValueError(f"Invalid JSON in {path}: nested too deeply") from exc


def _load_yaml_file(path: Path) -> Any:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    except RecursionError as exc:
        raise ValueError(f"Invalid YAML in {path}: nested too deeply") from exc


def load_data_file(path: Union[str, Path]) -> Any:
    """
    Load any JSON or YAML value.  ``-`` reads JSON from standard input.

    Dispatches on file extension; unknown extensions are tried as JSON, then
    YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed or is nested too deeply.
    """
    if str(path) == "-":
        try:
            return json.load(sys.stdin)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON on standard input: {exc}") from exc
        except RecursionError as exc:
            raise ValueError("Invalid JSON on standard input: nested too deeply") from exc

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' - trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def load_document_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a schema document file; the top level must be a mapping."""
    data: Any = load_data_file(path)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a mapping at top level of {path}, got {type(data).__name__}."
        )
    return data


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------


def parse_schema_document(raw: Dict[str, Any]) -> SchemaDocument:
    """
    Validate a raw dictionary (from JSON/YAML) into a ``SchemaDocument``.

    Raises:
        SchemaDocumentError: If the document does not match the models.
    """
    try:
        document: SchemaDocument = SchemaDocument.model_validate(raw)
    except ValidationError as exc:
        raise SchemaDocumentError(f"Invalid schema document: {exc}") from exc
    logger.debug(
        "Parsed schema document: %d object(s), %d list(s), %d check alias(es).",
        len(document.objects),
        len(document.lists),
        len(document.checks),
    )
    return document


# ---------------------------------------------------------------------------
# Schema building
# ---------------------------------------------------------------------------


def _type_spec(spec: TypeSpec, builder: SchemaBuilder) -> Any:
    if isinstance(spec, ListTypeSpec):
        return builder.list_of(_type_spec(spec.item, builder))
    if spec in _BUILTIN_TYPES:
        return _BUILTIN_TYPES[spec]
    if spec == "boolean":
        return BoolValidator()
    if spec == "any":
        return AnyValidator()
    return spec  # name of a declared object or list


def _bound(call: CheckCall, schema: Schema) -> BoundCheck:
    return BoundCheck(CheckReference(schema, call.name), call.args)


def _check_spec(spec: CheckSpec, schema: Schema) -> Any:
    if isinstance(spec, CheckCall):
        return _bound(spec, schema) if spec.args else spec.name
    return spec


def _check_specs(specs: List[CheckSpec], schema: Schema) -> List[Any]:
    return [_check_spec(spec, schema) for spec in specs]


def build_schema(document: SchemaDocument, schema: Optional[Schema] = None) -> Schema:
    """
    Declare every definition of ``document`` on a schema and resolve it.

    Raises:
        SchemaDefinitionError: For declarations the engine rejects (checks on
            non-primitive fields, unknown names, ...).
    """
    builder: SchemaBuilder = SchemaBuilder(schema)
    target: Schema = builder.schema
    install_standard_checks(target)

    for name, call in document.checks.items():
        target.define_check(name, _bound(call, target))

    for name, definition in document.objects.items():
        obj: ObjectBuilder = builder.object(name)
        for field_name, field_def in definition.fields.items():
            obj.field(
                field_name,
                _type_spec(field_def.type_spec, builder),
                required=field_def.required,
                check=_check_specs(field_def.check, target),
            )
        for invariant in definition.invariants:
            obj.invariant(invariant.fields, _check_spec(invariant.check, target))

    for name, list_def in document.lists.items():
        builder.list(
            name,
            _type_spec(list_def.item, builder),
            check=_check_specs(list_def.check, target),
        )

    return builder.build()


def load_schema(path: Union[str, Path]) -> Schema:
    """
    Load, parse and build the schema document at ``path``.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaDocumentError: If the file can't be parsed or validated.
        SchemaDefinitionError: If the declarations don't resolve.
    """
    try:
        raw: Dict[str, Any] = load_document_file(path)
    except ValueError as exc:
        raise SchemaDocumentError(str(exc)) from exc
    logger.info("Loaded schema document %s", path)
    return build_schema(parse_schema_document(raw))


__all__ = [
    "load_data_file",
    "load_document_file",
    "parse_schema_document",
    "build_schema",
    "load_schema",
]
