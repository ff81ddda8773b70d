# File: dtoschema/checks.py
"""
DTOSchema - Check Model
========================
Single-value predicates attached to primitive fields, named lists and
object invariants.

Three variants share one contract, ``validate(value, args=None) -> list[str]``:

``Check``
    Wraps a predicate ``fn(value)`` or ``fn(value, **args)``.  The predicate
    returns ``None`` (no problem), one message, or a list of messages.
``CheckReference``
    Names a check registered on a ``Schema``; linked to its current target by
    every ``Schema.resolve()`` pass.
``BoundCheck``
    Binds keyword arguments to another check.  Call-site arguments override
    the bound ones.

Example::

    length = Check(lambda value, min=0, max=None: ...)
    BoundCheck(length, {"min": 2, "max": 3}).validate("abcd", {"max": 5})
    # behaves like length(value, min=2, max=5)
"""

from __future__ import annotations

import weakref
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Optional,
    Sequence,
    Union,
)

from dtoschema.exceptions import SchemaDefinitionError
from dtoschema.resolution import Resolution, Resolvable, SchemaLink

if TYPE_CHECKING:
    from dtoschema.schema import Schema

Messages = List[str]


def normalize_messages(result: Any) -> Messages:
    """
    Convert a predicate's raw return value into a message list.

    ``None`` -> ``[]``; a string -> ``[string]``; a list or tuple -> its
    items; anything else -> ``[]``.
    """
    if result is None:
        return []
    if isinstance(result, str):
        return [result]
    if isinstance(result, (list, tuple)):
        return list(result)
    return []


# ---------------------------------------------------------------------------
# Check variants
# ---------------------------------------------------------------------------


class BaseCheck(Resolvable):
    """Common interface of every check variant."""

    def validate(self, value: Any, args: Optional[Mapping[str, Any]] = None) -> Messages:
        raise NotImplementedError


class Check(BaseCheck):
    """A check backed by a plain Python callable."""

    def __init__(self, fn: Callable[..., Any], name: Optional[str] = None) -> None:
        if not callable(fn):
            raise SchemaDefinitionError(
                f"Check body must be callable, got {type(fn).__name__}"
            )
        self._fn: Callable[..., Any] = fn
        self.name: Optional[str] = name or getattr(fn, "__name__", None)

    def validate(self, value: Any, args: Optional[Mapping[str, Any]] = None) -> Messages:
        if args is None:
            return normalize_messages(self._fn(value))
        return normalize_messages(self._fn(value, **args))

    def __repr__(self) -> str:
        return f"<Check {self.name or '<inline>'}>"


class CheckReference(BaseCheck, SchemaLink):
    """
    A check known only by its registered name.

    ``resolve()`` links the reference to the current definition and returns
    the reference itself, so a later pass picks up a redefinition.
    """

    def __init__(self, schema: "Schema", name: str) -> None:
        self._link(schema, name)
        self._target: Optional[BaseCheck] = None

    @property
    def target(self) -> BaseCheck:
        if self._target is not None:
            return self._target
        return self.schema.resolve_check(self._name)

    def validate(self, value: Any, args: Optional[Mapping[str, Any]] = None) -> Messages:
        return self.target.validate(value, args)

    def _resolve(self, resolution: Resolution) -> "CheckReference":
        self._target = None
        target: Optional[BaseCheck] = resolution.lookup_check(self.schema, self._name)
        if target is None:
            return self
        resolved: BaseCheck = target.resolve(resolution)
        # checks never contain themselves; meeting a pending node means an alias loop
        if resolution.is_pending(resolved):
            raise SchemaDefinitionError(
                f"Check '{self._name}' refers back to itself"
            )
        if isinstance(resolved, CheckReference):
            # None when the alias chain ends in a dangling name, already recorded
            self._target = resolved._target
        else:
            self._target = resolved
        return self

    def __repr__(self) -> str:
        return f"<CheckReference {self._name}>"


class BoundCheck(BaseCheck):
    """A check with a fixed set of keyword arguments."""

    def __init__(self, check: BaseCheck, args: Optional[Mapping[str, Any]] = None) -> None:
        if not isinstance(check, BaseCheck):
            raise SchemaDefinitionError(
                f"Only checks can be bound, got {type(check).__name__}"
            )
        self._check: BaseCheck = check
        self._args: Dict[str, Any] = dict(args or {})

    @property
    def check(self) -> BaseCheck:
        return self._check

    @property
    def args(self) -> Dict[str, Any]:
        return dict(self._args)

    def validate(self, value: Any, args: Optional[Mapping[str, Any]] = None) -> Messages:
        merged: Dict[str, Any] = dict(self._args)
        if args:
            merged.update(args)
        return self._check.validate(value, merged)

    def _resolve(self, resolution: Resolution) -> "BoundCheck":
        self._check = self._check.resolve(resolution)
        return self

    def __repr__(self) -> str:
        return f"<BoundCheck {self._check!r} {self._args!r}>"


class CheckBinder:
    """
    Attribute-style binding of registered checks::

        schema.bind_check.length(min=2, max=3)
        # BoundCheck(CheckReference(schema, "length"), {"min": 2, "max": 3})

    Every public attribute is a check name, so the binder has no others.
    """

    __slots__ = ("_schema_ref",)

    def __init__(self, schema: "Schema") -> None:
        self._schema_ref: "weakref.ReferenceType[Schema]" = weakref.ref(schema)

    def __getattr__(self, name: str) -> Callable[..., BoundCheck]:
        if name.startswith("_"):
            raise AttributeError(name)
        schema: Optional["Schema"] = self._schema_ref()
        if schema is None:
            raise SchemaDefinitionError(f"Cannot bind check '{name}': schema is gone")

        def bind(**args: Any) -> BoundCheck:
            return BoundCheck(CheckReference(schema, name), args)

        bind.__name__ = name
        return bind


# ---------------------------------------------------------------------------
# Check specification parsing
# ---------------------------------------------------------------------------

CheckSpec = Union[str, BaseCheck, Callable[..., Any]]


def create_check(spec: CheckSpec, schema: "Schema") -> BaseCheck:
    """
    Turn one check specification into a check.

    A name becomes a ``CheckReference``, a check is used as is and any other
    callable becomes an inline ``Check``.
    """
    if isinstance(spec, BaseCheck):
        return spec
    if isinstance(spec, str):
        return CheckReference(schema, spec)
    if callable(spec):
        return Check(spec)
    raise SchemaDefinitionError(f"Unexpected check type: {type(spec).__name__}")


def parse_checks(
    specs: Union[None, CheckSpec, Sequence[CheckSpec]],
    schema: "Schema",
) -> List[BaseCheck]:
    """Accept ``None``, a single check specification or a list of them."""
    if specs is None:
        return []
    if isinstance(specs, (str, BaseCheck)) or callable(specs):
        return [create_check(specs, schema)]
    if not isinstance(specs, (list, tuple)):
        raise SchemaDefinitionError(f"Unexpected check type: {type(specs).__name__}")
    return [create_check(spec, schema) for spec in specs]


__all__ = [
    "Messages",
    "normalize_messages",
    "BaseCheck",
    "Check",
    "CheckReference",
    "BoundCheck",
    "CheckBinder",
    "CheckSpec",
    "create_check",
    "parse_checks",
]
