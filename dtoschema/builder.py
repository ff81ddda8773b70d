# File: dtoschema/builder.py
"""
DTOSchema - Schema Builder
===========================
Programmatic declaration surface on top of ``Schema``.

Usage::

    from dtoschema import define

    def declare(s):
        s.object("tag") \\
            .required("name", str, check="not_empty") \\
            .required("value", str, check=["not_empty"])

        s.object("post") \\
            .required("title", str, check=s.bind.length(min=3)) \\
            .optional("tags", s.list_of("tag"))

        @s.check("not_empty")
        def not_empty(value):
            if not value:
                return "Cannot be empty"

        @s.check("length")
        def length(value, min=0, max=None):
            ...

    schema = define(declare)
    schema.validate("post", {"tags": [42]})
    # {'title': ['Cannot be null'], 'tags': {0: ['Must be object']}}

Names may be used before they are declared; ``build()`` resolves the
schema and raises for anything left undefined.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, TypeVar, Union

from dtoschema.checks import (
    BaseCheck,
    Check,
    CheckBinder,
    CheckSpec,
    create_check,
    parse_checks,
)
from dtoschema.exceptions import SchemaDefinitionError
from dtoschema.schema import Schema
from dtoschema.validators import (
    AnyValidator,
    BaseValidator,
    BoolValidator,
    FieldValidator,
    Invariant,
    ListValidator,
    ObjectValidator,
    parse_validator,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.builder")

F = TypeVar("F", bound=Callable[..., Any])
ChecksArg = Union[None, CheckSpec, Sequence[CheckSpec]]


class ObjectBuilder:
    """Declares the fields and invariants of one object validator."""

    def __init__(self, schema: Schema, name: str, validator: ObjectValidator) -> None:
        self._schema: Schema = schema
        self.name: str = name
        self.validator: ObjectValidator = validator

    @property
    def bind(self) -> CheckBinder:
        return self._schema.bind_check

    def field(
        self,
        name: str,
        type_: Any = None,
        required: bool = False,
        check: ChecksArg = None,
    ) -> "ObjectBuilder":
        """Declare a field; ``type_=None`` accepts any value."""
        type_validator: BaseValidator = (
            AnyValidator() if type_ is None else parse_validator(type_, self._schema)
        )
        checks: List[BaseCheck] = parse_checks(check, self._schema)
        try:
            field = FieldValidator(name, type_validator, required=required, checks=checks)
        except SchemaDefinitionError as exc:
            raise SchemaDefinitionError(f"Object '{self.name}': {exc}") from exc
        self.validator.add_field(field)
        return self

    def required(self, name: str, type_: Any, check: ChecksArg = None) -> "ObjectBuilder":
        return self.field(name, type_, required=True, check=check)

    def optional(
        self, name: str, type_: Any = None, check: ChecksArg = None
    ) -> "ObjectBuilder":
        return self.field(name, type_, required=False, check=check)

    def invariant(
        self,
        fields: Union[None, str, Sequence[str]] = None,
        check: Optional[CheckSpec] = None,
    ) -> Any:
        """
        Add a cross-field rule.

        With ``check`` given, returns the builder for chaining; without it,
        returns a decorator for the predicate::

            @account.invariant("confirm_password")
            def passwords_match(data):
                if data["password"] != data["confirm_password"]:
                    return "Passwords must be equal"
        """
        if check is None:
            def decorator(fn: F) -> F:
                self.invariant(fields, fn)
                return fn

            return decorator
        self.validator.add_invariant(Invariant(fields, create_check(check, self._schema)))
        return self

    def __repr__(self) -> str:
        return f"<ObjectBuilder {self.name}>"


class SchemaBuilder:
    """Declares named objects, lists and checks on a ``Schema``."""

    def __init__(self, schema: Optional[Schema] = None) -> None:
        self.schema: Schema = schema if schema is not None else Schema()

    @property
    def bind(self) -> CheckBinder:
        """``builder.bind.length(min=3)``: a named check with bound arguments."""
        return self.schema.bind_check

    # -- Named definitions --------------------------------------------------

    def object(self, name: str) -> ObjectBuilder:
        validator: ObjectValidator = ObjectValidator()
        self.schema.define_validator(name, validator)
        logger.debug("Declaring object '%s'.", name)
        return ObjectBuilder(self.schema, name, validator)

    def list(self, name: str, item_type: Any, check: ChecksArg = None) -> ListValidator:
        """Declare a named list; ``check`` runs on the whole list."""
        validator: ListValidator = self.list_of(item_type, check=check)
        self.schema.define_validator(name, validator)
        logger.debug("Declared list '%s' of %r.", name, validator.item_validator)
        return validator

    def check(self, name: str, fn: Optional[Callable[..., Any]] = None) -> Any:
        """
        Declare a named check.  Returns the ``Check``, or a decorator when
        ``fn`` is omitted.
        """
        if fn is None:
            def decorator(body: F) -> F:
                self.check(name, body)
                return body

            return decorator
        if not callable(fn):
            raise SchemaDefinitionError(f"Check definition is not provided for '{name}'")
        result: Check = Check(fn, name=name)
        self.schema.define_check(name, result)
        return result

    # -- Inline types -------------------------------------------------------

    def list_of(self, item_type: Any, check: ChecksArg = None) -> ListValidator:
        return ListValidator(
            parse_validator(item_type, self.schema),
            parse_checks(check, self.schema),
        )

    def any(self) -> AnyValidator:
        return AnyValidator()

    def boolean(self) -> BoolValidator:
        return BoolValidator()

    # -- Finish -------------------------------------------------------------

    def build(self) -> Schema:
        return self.schema.resolve()


def define(
    declare: Callable[[SchemaBuilder], Any],
    schema: Optional[Schema] = None,
) -> Schema:
    """Run ``declare`` against a fresh builder and return the resolved schema."""
    builder: SchemaBuilder = SchemaBuilder(schema)
    declare(builder)
    return builder.build()


__all__ = ["ObjectBuilder", "SchemaBuilder", "define"]
