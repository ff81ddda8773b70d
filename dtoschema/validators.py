# File: dtoschema/validators.py
"""
DTOSchema - Validator Model
============================
A polymorphic tree of shape checkers.  Every variant answers three
questions about a decoded value:

``validate(value)``
    The full error value, shaped like the data: ``[]`` / ``{}`` when valid,
    a list of messages for a leaf failure, ``{field: errors}`` for objects
    and ``{index: errors}`` (failing 0-based positions only) for lists.
``is_valid(value)``
    ``True`` exactly when ``validate(value)`` is empty.
``is_valid_structure(value)``
    Shape only: types and required fields, no checks and no invariants.

Named types are referenced through ``ValidatorReference`` so that schemas
can be declared in any order and may refer to themselves::

    tree = ObjectValidator()
    tree.add_field(FieldValidator("value", PrimitiveValidator(PrimitiveKind.NUMERIC), required=True))
    tree.add_field(FieldValidator("child", ListValidator(ValidatorReference(schema, "tree"))))

Validation never raises for bad *data*; only malformed declarations raise.
"""

from __future__ import annotations

import logging
import numbers
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
)

from dtoschema.checks import BaseCheck, Messages
from dtoschema.exceptions import SchemaDefinitionError
from dtoschema.resolution import Resolution, Resolvable, SchemaLink
from dtoschema.utils import is_record, is_sequence

if TYPE_CHECKING:
    from dtoschema.schema import Schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.validators")

# Error value: message list (leaf) or mapping keyed by field name / list index
ErrorValue = Union[List[Any], Dict[Any, Any]]

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

CANNOT_BE_NULL: str = "Cannot be null"
MUST_BE_OBJECT: str = "Must be object"
MUST_BE_ARRAY: str = "Must be an array"
MUST_BE_BOOLEAN: str = "Must be boolean"


# ---------------------------------------------------------------------------
# Primitive kinds
# ---------------------------------------------------------------------------


class PrimitiveKind(str, Enum):
    """
    Semantic scalar kinds a ``PrimitiveValidator`` can require.

    ``True`` and ``False`` are never accepted as ``NUMERIC`` or ``INTEGER``,
    even though ``bool`` subclasses ``int``; use a boolean field for flags.
    """

    NUMERIC = "numeric"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    def accepts(self, value: Any) -> bool:
        # bool is an int subclass but never a number here
        if isinstance(value, bool):
            return False
        return isinstance(value, _KIND_TYPES[self])

    @classmethod
    def from_type(cls, py_type: Any) -> Optional["PrimitiveKind"]:
        """Map a Python type (``str``, ``int``, ``float``, ``numbers.Real``...) to a kind."""
        return _PYTHON_TYPE_KINDS.get(py_type)


_KIND_TYPES: Dict[PrimitiveKind, Union[Type[Any], Tuple[Type[Any], ...]]] = {
    PrimitiveKind.NUMERIC: numbers.Real,
    PrimitiveKind.INTEGER: int,
    PrimitiveKind.FLOAT: float,
    PrimitiveKind.STRING: str,
}

_PYTHON_TYPE_KINDS: Dict[Any, PrimitiveKind] = {
    str: PrimitiveKind.STRING,
    int: PrimitiveKind.INTEGER,
    float: PrimitiveKind.FLOAT,
    numbers.Number: PrimitiveKind.NUMERIC,
    numbers.Real: PrimitiveKind.NUMERIC,
}


# ---------------------------------------------------------------------------
# Validator variants
# ---------------------------------------------------------------------------


class BaseValidator(Resolvable):
    """Common interface of every validator variant."""

    def is_valid(self, data: Any) -> bool:
        raise NotImplementedError

    def is_valid_structure(self, data: Any) -> bool:
        raise NotImplementedError

    def validate(self, data: Any) -> ErrorValue:
        raise NotImplementedError


class AnyValidator(BaseValidator):
    """Accepts every value, ``None`` included."""

    def is_valid(self, data: Any) -> bool:
        return True

    def is_valid_structure(self, data: Any) -> bool:
        return True

    def validate(self, data: Any) -> ErrorValue:
        return []

    def __repr__(self) -> str:
        return "<AnyValidator>"


class BoolValidator(BaseValidator):
    """Accepts ``True`` and ``False`` only."""

    def is_valid(self, data: Any) -> bool:
        return isinstance(data, bool)

    def is_valid_structure(self, data: Any) -> bool:
        return self.is_valid(data)

    def validate(self, data: Any) -> ErrorValue:
        if not self.is_valid(data):
            return [MUST_BE_BOOLEAN]
        return []

    def __repr__(self) -> str:
        return "<BoolValidator>"


class PrimitiveValidator(BaseValidator):
    """Accepts values of exactly one ``PrimitiveKind``."""

    def __init__(self, kind: Union[PrimitiveKind, str]) -> None:
        try:
            self.kind: PrimitiveKind = PrimitiveKind(kind)
        except ValueError as exc:
            raise SchemaDefinitionError(f"Unknown primitive kind: {kind!r}") from exc

    def is_valid(self, data: Any) -> bool:
        return self.kind.accepts(data)

    def is_valid_structure(self, data: Any) -> bool:
        return self.kind.accepts(data)

    def validate(self, data: Any) -> ErrorValue:
        if not self.kind.accepts(data):
            return [f"Must be a {self.kind.display_name}"]
        return []

    def __repr__(self) -> str:
        return f"<PrimitiveValidator {self.kind.display_name}>"


class ValidatorReference(BaseValidator, SchemaLink):
    """
    A validator known only by its registered name.

    Before resolution every operation looks the target up on the owning
    schema, so it works for forward declarations.  ``resolve()`` links the
    reference to the current definition and returns the reference itself;
    owners keep it, so a later pass after a redefinition links it again.
    """

    def __init__(self, schema: "Schema", name: str) -> None:
        self._link(schema, name)
        self._target: Optional[BaseValidator] = None

    @property
    def target(self) -> BaseValidator:
        if self._target is not None:
            return self._target
        return self.schema.resolve_validator(self._name)

    def is_valid(self, data: Any) -> bool:
        return self.target.is_valid(data)

    def is_valid_structure(self, data: Any) -> bool:
        return self.target.is_valid_structure(data)

    def validate(self, data: Any) -> ErrorValue:
        return self.target.validate(data)

    def _resolve(self, resolution: Resolution) -> "ValidatorReference":
        self._target = None
        seen: List[str] = [self._name]
        target: Optional[BaseValidator] = resolution.lookup_validator(self.schema, self._name)
        # follow aliases by name; a container reached through them may refer back freely
        while isinstance(target, ValidatorReference):
            if target.name in seen:
                raise SchemaDefinitionError(
                    f"Validator '{self._name}' is an alias that refers back to itself"
                )
            seen.append(target.name)
            target = resolution.lookup_validator(target.schema, target.name)
        if target is not None:
            self._target = target.resolve(resolution)
        return self

    def __repr__(self) -> str:
        return f"<ValidatorReference {self._name}>"


class ListValidator(BaseValidator):
    """
    Accepts an ordered sequence whose every element satisfies ``item``.

    Optional list-level checks receive the whole sequence and only run once
    every element is valid.
    """

    def __init__(
        self,
        item_validator: BaseValidator,
        checks: Optional[Sequence[BaseCheck]] = None,
    ) -> None:
        self._item: BaseValidator = item_validator
        self._checks: List[BaseCheck] = list(checks or [])

    @property
    def item_validator(self) -> BaseValidator:
        return self._item

    @property
    def checks(self) -> Tuple[BaseCheck, ...]:
        return tuple(self._checks)

    def is_valid(self, data: Any) -> bool:
        return (
            is_sequence(data)
            and all(self._item.is_valid(item) for item in data)
            and not self._run_checks(data)
        )

    def is_valid_structure(self, data: Any) -> bool:
        return is_sequence(data) and all(
            self._item.is_valid_structure(item) for item in data
        )

    def validate(self, data: Any) -> ErrorValue:
        if not is_sequence(data):
            return [MUST_BE_ARRAY]
        result: Dict[int, ErrorValue] = {}
        for index, item in enumerate(data):
            errors: ErrorValue = self._item.validate(item)
            if errors:
                result[index] = errors
        if result:
            return result
        return self._run_checks(data) or result

    def _run_checks(self, data: Any) -> Messages:
        messages: Messages = []
        for check in self._checks:
            messages.extend(check.validate(data))
        return messages

    def _resolve(self, resolution: Resolution) -> "ListValidator":
        self._item = self._item.resolve(resolution)
        self._checks = [check.resolve(resolution) for check in self._checks]
        return self

    def __repr__(self) -> str:
        return f"<ListValidator of {self._item!r}>"


class FieldValidator(BaseValidator):
    """
    One named field of an object: a type validator, a required flag and the
    checks to run on primitive values.

    Checks are only allowed on primitive types.
    """

    def __init__(
        self,
        name: str,
        type_validator: BaseValidator,
        required: bool = False,
        checks: Optional[Sequence[BaseCheck]] = None,
    ) -> None:
        checks = list(checks or [])
        if checks and not isinstance(type_validator, PrimitiveValidator):
            raise SchemaDefinitionError(
                f"'{name}' cannot have checks as it is not a primitive"
            )
        self.name: str = name
        self.required: bool = bool(required)
        self._type: BaseValidator = type_validator
        self._primitive: bool = isinstance(type_validator, PrimitiveValidator)
        self._checks: List[BaseCheck] = checks

    @property
    def type_validator(self) -> BaseValidator:
        return self._type

    @property
    def checks(self) -> Tuple[BaseCheck, ...]:
        return tuple(self._checks)

    def validate(self, data: Any) -> ErrorValue:
        if data is None:
            return [CANNOT_BE_NULL] if self.required else []
        if not self._primitive:
            return self._type.validate(data)
        type_errors: ErrorValue = self._type.validate(data)
        if type_errors:
            return type_errors
        # every check runs; messages are concatenated in declaration order
        messages: Messages = []
        for check in self._checks:
            messages.extend(check.validate(data))
        return messages

    def is_valid(self, data: Any) -> bool:
        return not self.validate(data)

    def is_valid_structure(self, data: Any) -> bool:
        if data is None:
            return not self.required
        return self._type.is_valid_structure(data)

    def _resolve(self, resolution: Resolution) -> "FieldValidator":
        self._type = self._type.resolve(resolution)
        self._checks = [check.resolve(resolution) for check in self._checks]
        return self

    def __repr__(self) -> str:
        flag: str = "required" if self.required else "optional"
        return f"<FieldValidator {self.name} {flag} {self._type!r}>"


class Invariant(Resolvable):
    """
    Cross-field rule of an object.

    The check receives the whole record.  With no target fields its messages
    are the object's error value; otherwise every target field gets the same
    message list.
    """

    def __init__(self, fields: Optional[Sequence[str]], check: BaseCheck) -> None:
        if isinstance(fields, str):
            fields = [fields]
        self.fields: Tuple[str, ...] = tuple(fields or ())
        self._check: BaseCheck = check

    @property
    def check(self) -> BaseCheck:
        return self._check

    def validate(self, data: Any) -> ErrorValue:
        errors: Messages = self._check.validate(data)
        if not errors:
            return {}
        if not self.fields:
            return errors
        return {field: list(errors) for field in self.fields}

    def _resolve(self, resolution: Resolution) -> "Invariant":
        self._check = self._check.resolve(resolution)
        return self

    def __repr__(self) -> str:
        return f"<Invariant {list(self.fields)} {self._check!r}>"


class ObjectValidator(BaseValidator):
    """
    Accepts a key-value record.

    Every field is validated; when any field fails its errors are returned
    and invariants are skipped.  Otherwise invariants run in declaration
    order and the first failing one decides the result.
    """

    def __init__(
        self,
        fields: Optional[Sequence[FieldValidator]] = None,
        invariants: Optional[Sequence[Invariant]] = None,
    ) -> None:
        self._fields: Dict[str, FieldValidator] = {}
        self._invariants: List[Invariant] = []
        for field in fields or []:
            self.add_field(field)
        for invariant in invariants or []:
            self.add_invariant(invariant)

    @property
    def fields(self) -> Dict[str, FieldValidator]:
        return dict(self._fields)

    @property
    def invariants(self) -> Tuple[Invariant, ...]:
        return tuple(self._invariants)

    def add_field(self, field: FieldValidator) -> FieldValidator:
        if field.name in self._fields:
            logger.debug("Field '%s' redeclared; last declaration wins.", field.name)
        self._fields[field.name] = field
        return field

    def add_invariant(self, invariant: Invariant) -> Invariant:
        self._invariants.append(invariant)
        return invariant

    def validate(self, data: Any) -> ErrorValue:
        if data is None:
            return [CANNOT_BE_NULL]
        if not is_record(data):
            return [MUST_BE_OBJECT]
        result: Dict[str, ErrorValue] = {}
        for name, field in self._fields.items():
            errors: ErrorValue = field.validate(data.get(name))
            if errors:
                result[name] = errors
        if result:
            return result
        for invariant in self._invariants:
            errors = invariant.validate(data)
            if errors:
                return errors
        return {}

    def is_valid(self, data: Any) -> bool:
        return not self.validate(data)

    def is_valid_structure(self, data: Any) -> bool:
        if not is_record(data):
            return False
        return all(
            field.is_valid_structure(data.get(name))
            for name, field in self._fields.items()
        )

    def _resolve(self, resolution: Resolution) -> "ObjectValidator":
        for field in self._fields.values():
            field.resolve(resolution)
        self._invariants = [inv.resolve(resolution) for inv in self._invariants]
        return self

    def __repr__(self) -> str:
        return f"<ObjectValidator fields={list(self._fields)}>"


# ---------------------------------------------------------------------------
# Type specification parsing
# ---------------------------------------------------------------------------

TypeSpec = Union[str, PrimitiveKind, BaseValidator, type]


def parse_validator(spec: Any, schema: "Schema") -> BaseValidator:
    """
    Turn a type specification into a validator.

    - a ``PrimitiveKind`` or ``str``/``int``/``float``/``numbers.Real`` -> primitive
    - ``bool`` -> ``BoolValidator``
    - a validator -> itself
    - a name -> ``ValidatorReference`` on ``schema``
    """
    if isinstance(spec, BaseValidator):
        return spec
    if isinstance(spec, PrimitiveKind):
        return PrimitiveValidator(spec)
    if spec is bool:
        return BoolValidator()
    if isinstance(spec, type):
        kind: Optional[PrimitiveKind] = PrimitiveKind.from_type(spec)
        if kind is not None:
            return PrimitiveValidator(kind)
    if isinstance(spec, str):
        return ValidatorReference(schema, spec)
    raise SchemaDefinitionError(f"Unexpected type specification: {spec!r}")


__all__ = [
    "ErrorValue",
    "CANNOT_BE_NULL",
    "MUST_BE_OBJECT",
    "MUST_BE_ARRAY",
    "MUST_BE_BOOLEAN",
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
    "TypeSpec",
    "parse_validator",
]
