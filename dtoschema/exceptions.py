# File: dtoschema/exceptions.py
"""
DTOSchema - Exception Hierarchy
================================
Every exception raised by the package derives from ``DTOSchemaError``.

Only *schema declarations* raise.  Malformed *input data* never does: data
problems are returned as error values by ``validate``.
"""

from __future__ import annotations

from typing import List, Sequence


class DTOSchemaError(Exception):
    """Base class for all dtoschema errors."""


class SchemaDefinitionError(DTOSchemaError, ValueError):
    """A schema declaration is malformed and cannot be used."""


class UndefinedNameError(SchemaDefinitionError):
    """A validator or check name is not registered on the schema."""

    def __init__(self, kind: str, name: str) -> None:
        self.kind: str = kind
        self.name: str = name
        super().__init__(f"Undefined {kind} '{name}'")


class UnresolvedReferenceError(SchemaDefinitionError):
    """Resolution found one or more dangling names."""

    def __init__(self, missing: Sequence[UndefinedNameError]) -> None:
        self.missing: List[UndefinedNameError] = list(missing)
        names: str = ", ".join(f"{e.kind} '{e.name}'" for e in self.missing)
        super().__init__(
            f"Schema has {len(self.missing)} unresolved reference(s): {names}"
        )


class SchemaNotResolvedError(DTOSchemaError):
    """Validation was requested on a schema that has not been resolved."""


class SchemaDocumentError(SchemaDefinitionError):
    """A schema document could not be loaded or failed model validation."""


__all__: List[str] = [
    "DTOSchemaError",
    "SchemaDefinitionError",
    "UndefinedNameError",
    "UnresolvedReferenceError",
    "SchemaNotResolvedError",
    "SchemaDocumentError",
]
