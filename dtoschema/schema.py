# File: dtoschema/schema.py
"""
DTOSchema - Schema Registry
============================
The ``Schema`` owns every named validator and check of a family of DTOs.

Lifecycle:

1. **Declare.**  ``define_validator`` / ``define_check`` populate the two
   registries (usually through ``dtoschema.builder`` or a schema document).
   A name may be redefined; the last definition wins.
2. **Resolve.**  ``resolve()`` walks every registered node once, links
   named references to their current targets and raises
   ``UnresolvedReferenceError`` listing *all* dangling names.
3. **Validate.**  ``validate`` / ``is_valid`` / ``is_valid_structure`` /
   ``report`` take a registered name and a decoded value.  They are pure and
   safe to call from several threads once resolution is done.

Usage::

    schema = Schema()
    schema.define_validator("tag", tag_validator)
    schema.define_check("not_empty", Check(not_empty))
    schema.resolve()
    schema.validate("tag", {"name": ""})   # {'name': ['Cannot be empty']}
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Tuple, Union

from dtoschema.checks import BaseCheck, Check, CheckBinder
from dtoschema.exceptions import (
    SchemaDefinitionError,
    SchemaNotResolvedError,
    UndefinedNameError,
)
from dtoschema.report import ValidationReport
from dtoschema.resolution import Resolution
from dtoschema.validators import BaseValidator, ErrorValue

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.schema")


def _check_name(name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise SchemaDefinitionError(f"Definition name must be a non-empty string, got {name!r}")
    return name


class Schema:
    """Registry of named validators and checks plus their resolution state."""

    def __init__(self) -> None:
        self._validators: Dict[str, BaseValidator] = {}
        self._checks: Dict[str, BaseCheck] = {}
        self._resolved: bool = False
        self._check_binder: CheckBinder = CheckBinder(self)

    # -- Declaration --------------------------------------------------------

    def define_validator(self, name: str, validator: BaseValidator) -> BaseValidator:
        """Register ``validator`` under ``name``; a previous definition is replaced."""
        _check_name(name)
        if not isinstance(validator, BaseValidator):
            raise SchemaDefinitionError(
                f"'{name}' must be defined with a validator, got {type(validator).__name__}"
            )
        if name in self._validators:
            logger.warning("Validator '%s' redefined; last definition wins.", name)
        self._validators[name] = validator
        self._resolved = False
        logger.debug("Defined validator '%s': %r", name, validator)
        return validator

    def define_check(
        self,
        name: str,
        check: Union[BaseCheck, Callable[..., Any]],
    ) -> BaseCheck:
        """Register a check (or a bare predicate, wrapped in ``Check``) under ``name``."""
        _check_name(name)
        if not isinstance(check, BaseCheck):
            check = Check(check, name=name)
        if name in self._checks:
            logger.warning("Check '%s' redefined; last definition wins.", name)
        self._checks[name] = check
        self._resolved = False
        logger.debug("Defined check '%s': %r", name, check)
        return check

    @property
    def bind_check(self) -> CheckBinder:
        """``schema.bind_check.length(min=2)`` binds arguments to a named check."""
        return self._check_binder

    # -- Resolution ---------------------------------------------------------

    def resolve(self) -> "Schema":
        """
        Link every reachable named reference to its current target.

        Safe to call again; a name redefined since the last pass is picked up
        by every reference to it.  Raises ``UnresolvedReferenceError`` with
        every dangling name; the schema then stays unusable for validation.

        Complexity: O(V + C) over all reachable validators and checks.
        """
        self._resolved = False
        resolution: Resolution = Resolution()
        for name, validator in list(self._validators.items()):
            self._validators[name] = validator.resolve(resolution)
        for name, check in list(self._checks.items()):
            self._checks[name] = check.resolve(resolution)

        missing: List[UndefinedNameError] = resolution.missing
        if missing:
            logger.error(
                "Schema resolution failed: %d dangling reference(s).", len(missing)
            )
            resolution.raise_for_missing()

        self._resolved = True
        logger.info(
            "Schema resolved: %d validator(s), %d check(s), %d node(s) visited.",
            len(self._validators),
            len(self._checks),
            resolution.visited_count,
        )
        return self

    @property
    def is_resolved(self) -> bool:
        return self._resolved

    def resolve_validator(self, name: str) -> BaseValidator:
        try:
            return self._validators[name]
        except KeyError:
            raise UndefinedNameError("validator", name) from None

    def resolve_check(self, name: str) -> BaseCheck:
        try:
            return self._checks[name]
        except KeyError:
            raise UndefinedNameError("check", name) from None

    # -- Lookup -------------------------------------------------------------

    @property
    def validator_names(self) -> Tuple[str, ...]:
        return tuple(self._validators)

    @property
    def check_names(self) -> Tuple[str, ...]:
        return tuple(self._checks)

    def __contains__(self, name: object) -> bool:
        return name in self._validators

    def __getitem__(self, name: str) -> BaseValidator:
        return self.resolve_validator(name)

    def __repr__(self) -> str:
        state: str = "resolved" if self._resolved else "unresolved"
        return (
            f"<Schema {state} validators={list(self._validators)} "
            f"checks={list(self._checks)}>"
        )

    # -- Validation ---------------------------------------------------------

    def _sealed(self, name: str) -> BaseValidator:
        if not self._resolved:
            raise SchemaNotResolvedError(
                f"Schema must be resolved before validating '{name}'"
            )
        return self.resolve_validator(name)

    def validate(self, name: str, data: Any) -> ErrorValue:
        """Full validation of ``data`` as the DTO type ``name``."""
        return self._sealed(name).validate(data)

    def is_valid(self, name: str, data: Any) -> bool:
        return self._sealed(name).is_valid(data)

    def is_valid_structure(self, name: str, data: Any) -> bool:
        """Shape-only check: types and required fields, no checks or invariants."""
        return self._sealed(name).is_valid_structure(data)

    def report(self, name: str, data: Any, source: str = "") -> ValidationReport:
        return ValidationReport(name, self.validate(name, data), source=source)


__all__ = ["Schema"]
