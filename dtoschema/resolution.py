# File: dtoschema/resolution.py
"""
DTOSchema - Reference Resolution
=================================
Shared machinery for the pass that links every named reference to its
current target.

A single ``Resolution`` object is threaded through every ``resolve`` call of
one pass.  It memoises each visited node by identity, so cyclic graphs
(``tree -> child: list[tree]``) terminate, and it collects every dangling
name instead of stopping at the first one.

Complexity: O(V + C) per pass where V = validators and C = checks reachable
from the registries.
"""

from __future__ import annotations

import logging
import weakref
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set, Tuple

from dtoschema.exceptions import (
    SchemaDefinitionError,
    UndefinedNameError,
    UnresolvedReferenceError,
)

if TYPE_CHECKING:
    from dtoschema.schema import Schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.resolution")


class Resolution:
    """State of one resolution pass."""

    __slots__ = ("_nodes", "_pending", "_missing", "_missing_keys")

    def __init__(self) -> None:
        # id(node) -> (node, result); the node is kept alive so ids stay unique
        self._nodes: Dict[int, Tuple[Any, Any]] = {}
        self._pending: Set[int] = set()
        self._missing: List[UndefinedNameError] = []
        self._missing_keys: Set[Tuple[str, str]] = set()

    # -- Traversal ----------------------------------------------------------

    def run(self, node: Any, step: Callable[["Resolution"], Any]) -> Any:
        """
        Resolve ``node`` with ``step`` at most once per pass.

        Re-entering a node that is still being resolved returns the node
        itself; that is what breaks cycles.
        """
        key: int = id(node)
        entry: Optional[Tuple[Any, Any]] = self._nodes.get(key)
        if entry is not None:
            return entry[1]
        self._nodes[key] = (node, node)
        self._pending.add(key)
        try:
            result: Any = step(self)
        finally:
            self._pending.discard(key)
        self._nodes[key] = (node, result)
        return result

    def is_pending(self, node: Any) -> bool:
        return id(node) in self._pending

    # -- Lookups ------------------------------------------------------------

    def lookup_validator(self, schema: "Schema", name: str) -> Optional[Any]:
        try:
            return schema.resolve_validator(name)
        except UndefinedNameError as exc:
            self.record(exc)
            return None

    def lookup_check(self, schema: "Schema", name: str) -> Optional[Any]:
        try:
            return schema.resolve_check(name)
        except UndefinedNameError as exc:
            self.record(exc)
            return None

    # -- Dangling names -----------------------------------------------------

    def record(self, error: UndefinedNameError) -> None:
        key: Tuple[str, str] = (error.kind, error.name)
        if key in self._missing_keys:
            return
        self._missing_keys.add(key)
        self._missing.append(error)
        logger.debug("Dangling %s reference '%s'.", error.kind, error.name)

    @property
    def missing(self) -> List[UndefinedNameError]:
        return list(self._missing)

    @property
    def visited_count(self) -> int:
        return len(self._nodes)

    def raise_for_missing(self) -> None:
        if self._missing:
            raise UnresolvedReferenceError(self._missing)


class Resolvable:
    """
    Mixin for every node taking part in resolution.

    ``resolve()`` returns the node that should take this node's place.  Every
    variant returns itself: containers after resolving their children, named
    references after linking their target.  Called without a pass object it
    runs a standalone pass and raises for any dangling name it met.
    """

    def resolve(self, resolution: Optional[Resolution] = None) -> Any:
        if resolution is not None:
            return resolution.run(self, self._resolve)
        resolution = Resolution()
        result: Any = resolution.run(self, self._resolve)
        resolution.raise_for_missing()
        return result

    def _resolve(self, resolution: Resolution) -> Any:
        return self


class SchemaLink:
    """Non-owning handle on a ``Schema`` plus the name looked up on it."""

    def _link(self, schema: "Schema", name: str) -> None:
        if not isinstance(name, str) or not name:
            raise SchemaDefinitionError(
                f"Reference name must be a non-empty string, got {name!r}"
            )
        self._schema_ref: "weakref.ReferenceType[Schema]" = weakref.ref(schema)
        self._name: str = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def schema(self) -> "Schema":
        schema: Optional["Schema"] = self._schema_ref()
        if schema is None:
            raise SchemaDefinitionError(
                f"Reference '{self._name}' outlived its schema"
            )
        return schema


__all__ = ["Resolution", "Resolvable", "SchemaLink"]
