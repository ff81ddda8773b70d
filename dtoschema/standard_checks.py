# File: dtoschema/standard_checks.py
"""
DTOSchema - Standard Checks
============================
Reusable predicates available to every schema loaded from a document (and
to builder users through ``install_standard_checks``).

Each predicate follows the check contract: return ``None`` when the value is
fine, otherwise a message.  Parameters are keyword arguments, so they can be
bound in a schema (``bind_check.length(min=3)``) or in a document
(``{name: length, args: {min: 3}}``).

A value a check cannot measure (a number given to ``length``, a string
given to ``range``) fails with a message instead of raising.

- ``not_empty``: strings and containers must not be empty.
- ``length(min=0, max=None)``: size bounds for strings and lists.
- ``range(min=None, max=None)``: numeric bounds.
- ``pattern(regex, message=None)``: whole-string regular expression.
- ``one_of(values)``: membership in a fixed set.
- ``fields_equal(fields, message=...)``: for invariants; named fields agree.
"""

from __future__ import annotations

import logging
import numbers
import re
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence

from dtoschema.checks import Check

if TYPE_CHECKING:
    from dtoschema.schema import Schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.standard_checks")

_SIZED_TYPES = (str, bytes, list, tuple, dict)


def not_empty(value: Any) -> Optional[str]:
    if isinstance(value, _SIZED_TYPES) and len(value) == 0:
        return "Cannot be empty"
    return None


def length(value: Any, min: int = 0, max: Optional[int] = None) -> Optional[str]:
    if not isinstance(value, _SIZED_TYPES):
        return "Must have a length"
    unit: str = "chars" if isinstance(value, str) else "items"
    size: int = len(value)
    if size < min:
        return f"Must contain at least {min} {unit}"
    if max is not None and size > max:
        return f"Must contain at max {max} {unit}"
    return None


def value_range(value: Any, min: Any = None, max: Any = None) -> Optional[str]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return "Must be a number"
    if min is not None and value < min:
        return f"Must be at least {min}"
    if max is not None and value > max:
        return f"Must be at most {max}"
    return None


def pattern(value: Any, regex: str, message: Optional[str] = None) -> Optional[str]:
    """Whole-string regular expression match."""
    if not isinstance(value, str):
        return "Must be a string"
    if re.fullmatch(regex, value) is None:
        return message or f"Must match pattern {regex}"
    return None


def one_of(value: Any, values: Sequence[Any]) -> Optional[str]:
    if value not in values:
        allowed: str = ", ".join(str(v) for v in values)
        return f"Must be one of: {allowed}"
    return None


def fields_equal(
    data: Mapping[str, Any],
    fields: Sequence[str],
    message: str = "Fields must be equal",
) -> Optional[str]:
    """Invariant check: every named field of the record holds the same value."""
    values = [data.get(name) for name in fields]
    if any(v != values[0] for v in values[1:]):
        return message
    return None


STANDARD_CHECKS: Dict[str, Callable[..., Any]] = {
    "not_empty": not_empty,
    "length": length,
    "range": value_range,
    "pattern": pattern,
    "one_of": one_of,
    "fields_equal": fields_equal,
}


def install_standard_checks(schema: "Schema") -> "Schema":
    """Register every standard check on ``schema`` and return it."""
    for name, fn in STANDARD_CHECKS.items():
        schema.define_check(name, Check(fn, name=name))
    logger.debug("Installed %d standard checks.", len(STANDARD_CHECKS))
    return schema


__all__ = [
    "not_empty",
    "length",
    "value_range",
    "pattern",
    "one_of",
    "fields_equal",
    "STANDARD_CHECKS",
    "install_standard_checks",
]
