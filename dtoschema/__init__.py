# File: dtoschema/__init__.py
"""
DTOSchema - Declarative Validation for Data Transfer Objects
=============================================================

Validates already-decoded data (the output of a JSON or YAML decoder) against
named DTO types.  Types are declared up front, may refer to each other by
name (including recursively) and are resolved once before use.  Validation
returns an error value shaped like the input: empty when the data is valid.

Architecture overview::

    ┌──────────────┐     ┌──────────────┐     ┌──────────────┐
    │  CLI / Entry │────▶│    loader    │────▶│    Schema    │
    │   (cli.py)   │     │ (loader.py)  │     │ (schema.py)  │
    └──────────────┘     └──────┬───────┘     └──────┬───────┘
                                │                    │
                         ┌──────┴──────┐     ┌───────┴────────┐
                         ▼             ▼     ▼                ▼
                   ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌──────────┐
                   │  models  │ │ builder  │ │validators│ │  checks  │
                   └──────────┘ └──────────┘ └──────────┘ └──────────┘

Usage::

    # As a library
    from dtoschema import define

    def declare(s):
        s.object("tag").required("name", str, check="not_empty")
        s.check("not_empty", lambda v: "Cannot be empty" if not v else None)

    schema = define(declare)
    schema.validate("tag", {"name": ""})    # {'name': ['Cannot be empty']}

    # From the command line
    python -m dtoschema --schema schema.yaml --type tag tag.json

Public API:
    - Schema                           registry and validation entry point
    - SchemaBuilder / define           programmatic declarations
    - load_schema / build_schema       declarative YAML / JSON documents
    - Check / CheckReference / BoundCheck
    - AnyValidator / BoolValidator / PrimitiveValidator / ListValidator /
      ObjectValidator / FieldValidator / Invariant / ValidatorReference
    - ValidationReport                 flattened, printable results
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from dtoschema.builder import ObjectBuilder, SchemaBuilder, define
from dtoschema.checks import BaseCheck, BoundCheck, Check, CheckReference
from dtoschema.exceptions import (
    DTOSchemaError,
    SchemaDefinitionError,
    SchemaDocumentError,
    SchemaNotResolvedError,
    UndefinedNameError,
    UnresolvedReferenceError,
)
from dtoschema.loader import build_schema, load_data_file, load_schema
from dtoschema.report import ErrorEntry, ValidationReport
from dtoschema.schema import Schema
from dtoschema.standard_checks import install_standard_checks
from dtoschema.validators import (
    AnyValidator,
    BaseValidator,
    BoolValidator,
    FieldValidator,
    Invariant,
    ListValidator,
    ObjectValidator,
    PrimitiveKind,
    PrimitiveValidator,
    ValidatorReference,
)

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Registry
    "Schema",
    # Declaration
    "ObjectBuilder",
    "SchemaBuilder",
    "define",
    "install_standard_checks",
    # Documents
    "build_schema",
    "load_schema",
    "load_data_file",
    # Checks
    "BaseCheck",
    "Check",
    "CheckReference",
    "BoundCheck",
    # Validators
    "PrimitiveKind",
    "BaseValidator",
    "AnyValidator",
    "BoolValidator",
    "PrimitiveValidator",
    "ValidatorReference",
    "ListValidator",
    "FieldValidator",
    "Invariant",
    "ObjectValidator",
    # Reports
    "ErrorEntry",
    "ValidationReport",
    # Errors
    "DTOSchemaError",
    "SchemaDefinitionError",
    "SchemaDocumentError",
    "SchemaNotResolvedError",
    "UndefinedNameError",
    "UnresolvedReferenceError",
]
