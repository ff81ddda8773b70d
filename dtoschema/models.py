# File: dtoschema/models.py
"""
DTOSchema - Schema Document Models
===================================
Pydantic V2 models for declarative schema documents (YAML or JSON).  They
are the single source of truth for what a document may contain; the loader
turns a validated ``SchemaDocument`` into a ``Schema``.

Document shape::

    objects:
      tag:
        fields:
          name:  {type: string, required: true, check: not_empty}
          value: {type: string, check: [{name: length, args: {max: 3}}]}
      post:
        fields:
          tags: {type: {list: tag}}
    lists:
      point: {item: float, check: [{name: length, args: {min: 2, max: 2}}]}
    checks:
      short_text: {name: length, args: {max: 3}}
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class OutputFormat(str, Enum):
    """CLI output flavours."""

    TEXT = "text"
    JSON = "json"


# Type names with a built-in meaning inside documents
BUILTIN_TYPE_NAMES: FrozenSet[str] = frozenset(
    {"string", "numeric", "integer", "float", "boolean", "any"}
)

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)


def _as_list(value: Any) -> Any:
    """Accept a single item where a list is expected."""
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return value


# ---------------------------------------------------------------------------
# Check and type specifications
# ---------------------------------------------------------------------------


class CheckCall(BaseModel):
    """A named check plus the keyword arguments bound to it."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Registered check name.")
    args: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments bound to the check."
    )


CheckSpec = Union[str, CheckCall]


class ListTypeSpec(BaseModel):
    """``{list: <type>}``: a sequence of the nested type."""

    model_config = _SHARED_CONFIG

    item: TypeSpec = Field(..., alias="list", description="Element type.")


TypeSpec = Union[str, ListTypeSpec]

ListTypeSpec.model_rebuild()


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


class FieldDefinition(BaseModel):
    """One field of an object definition."""

    model_config = _SHARED_CONFIG

    type_spec: TypeSpec = Field(default="any", alias="type", description="Field type.")
    required: bool = Field(default=False, description="Reject null / absent values.")
    check: List[CheckSpec] = Field(
        default_factory=list, description="Checks for primitive values."
    )

    @field_validator("check", mode="before")
    @classmethod
    def _wrap_single_check(cls, v: Any) -> Any:
        return _as_list(v)


class InvariantDefinition(BaseModel):
    """Cross-field rule of an object definition."""

    model_config = _SHARED_CONFIG

    fields: List[str] = Field(
        default_factory=list, description="Fields that receive the error."
    )
    check: CheckSpec = Field(..., description="Check run against the whole object.")

    @field_validator("fields", mode="before")
    @classmethod
    def _wrap_single_field(cls, v: Any) -> Any:
        return _as_list(v)


class ObjectDefinition(BaseModel):
    """A named object (record) type."""

    model_config = _SHARED_CONFIG

    fields: Dict[str, FieldDefinition] = Field(default_factory=dict)
    invariants: List[InvariantDefinition] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def _null_fields(cls, v: Any) -> Any:
        return {} if v is None else v

    @model_validator(mode="after")
    def _invariant_targets_exist(self) -> "ObjectDefinition":
        for invariant in self.invariants:
            unknown: List[str] = [f for f in invariant.fields if f not in self.fields]
            if unknown:
                raise ValueError(
                    f"Invariant targets undeclared field(s): {unknown}"
                )
        return self


class ListDefinition(BaseModel):
    """A named list type with optional whole-list checks."""

    model_config = _SHARED_CONFIG

    item: TypeSpec = Field(..., description="Element type.")
    check: List[CheckSpec] = Field(default_factory=list)

    @field_validator("check", mode="before")
    @classmethod
    def _wrap_single_check(cls, v: Any) -> Any:
        return _as_list(v)


class SchemaDocument(BaseModel):
    """Top-level schema document."""

    model_config = _SHARED_CONFIG

    objects: Dict[str, ObjectDefinition] = Field(default_factory=dict)
    lists: Dict[str, ListDefinition] = Field(default_factory=dict)
    checks: Dict[str, CheckCall] = Field(
        default_factory=dict, description="Named aliases of bound checks."
    )

    @field_validator("objects", "lists", "checks", mode="before")
    @classmethod
    def _null_sections(cls, v: Any) -> Any:
        return {} if v is None else v

    @model_validator(mode="after")
    def _unique_type_names(self) -> "SchemaDocument":
        clashes: List[str] = sorted(set(self.objects) & set(self.lists))
        if clashes:
            raise ValueError(f"Names declared both as object and list: {clashes}")
        builtin: List[str] = sorted(
            (set(self.objects) | set(self.lists)) & BUILTIN_TYPE_NAMES
        )
        if builtin:
            raise ValueError(f"Type names shadow built-in types: {builtin}")
        for name, definition in self.objects.items():
            if not definition.fields:
                logger.warning(
                    "Object '%s' declares no fields; any record is accepted.", name
                )
        return self

    @model_validator(mode="after")
    def _no_self_aliases(self) -> "SchemaDocument":
        for name, call in self.checks.items():
            if call.name == name:
                raise ValueError(f"Check alias '{name}' refers to itself.")
        return self

    @property
    def type_names(self) -> List[str]:
        return list(self.objects) + list(self.lists)


__all__ = [
    "OutputFormat",
    "BUILTIN_TYPE_NAMES",
    "CheckCall",
    "CheckSpec",
    "ListTypeSpec",
    "TypeSpec",
    "FieldDefinition",
    "InvariantDefinition",
    "ObjectDefinition",
    "ListDefinition",
    "SchemaDocument",
]
