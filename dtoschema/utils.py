# File: dtoschema/utils.py
"""
DTOSchema - Utility Functions & Helpers
========================================
Small helpers shared by the validators, the report and the CLI:

- Value-shape predicates that define what counts as a *record* and a
  *sequence* for already-decoded data (JSON / YAML trees).
- Error-path formatting (``tags[1].name``).
- A ``Timer`` context manager used to log the duration of CLI steps.

No external dependencies beyond the Python standard library.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema.utils")

PathElement = Union[str, int]


# ---------------------------------------------------------------------------
# Value-shape predicates
# ---------------------------------------------------------------------------


def is_record(value: Any) -> bool:
    """True for key-value records (any ``Mapping``)."""
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """
    True for ordered sequences as produced by JSON / YAML decoders.

    Strings and bytes are scalars here, not sequences.
    """
    return isinstance(value, (list, tuple))


def describe_type(value: Any) -> str:
    """Short JSON-flavoured name of a decoded value's type, for log lines."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if is_sequence(value):
        return "array"
    if is_record(value):
        return "object"
    return type(value).__name__


# ---------------------------------------------------------------------------
# Error paths
# ---------------------------------------------------------------------------


def format_path(path: Sequence[PathElement]) -> str:
    """
    Render an error path the way a reader would address the value.

    Examples:
        >>> format_path(("tags", 1, "name"))
        'tags[1].name'
        >>> format_path((0,))
        '[0]'
        >>> format_path(())
        '<root>'
    """
    if not path:
        return "<root>"
    rendered: str = ""
    for element in path:
        if isinstance(element, int):
            rendered += f"[{element}]"
        elif rendered:
            rendered += f".{element}"
        else:
            rendered = str(element)
    return rendered


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for CLI stages.

    ``count`` may be set inside the block (files validated, types loaded);
    the log line then reports it with the per-item time.

    Usage:
        with Timer("validation", unit="file") as t:
            for path in paths:
                ...
                t.count += 1
    """

    __slots__ = ("label", "unit", "count", "_started", "elapsed")

    def __init__(self, label: str, unit: str = "item") -> None:
        self.label: str = label
        self.unit: str = unit
        self.count: int = 0
        self._started: float = 0.0
        self.elapsed: float = 0.0

    @property
    def per_item(self) -> float:
        return self.elapsed / self.count if self.count else 0.0

    def __enter__(self) -> "Timer":
        self._started = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.elapsed = time.perf_counter() - self._started
        if self.count:
            logger.info(
                "%s: %d %s(s) in %.4fs (%.4fs each)",
                self.label,
                self.count,
                self.unit,
                self.elapsed,
                self.per_item,
            )
        else:
            logger.info("%s: %.4fs", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.count} {self.unit}(s) in {self.elapsed:.4f}s>"


__all__ = [
    "PathElement",
    "is_record",
    "is_sequence",
    "describe_type",
    "format_path",
    "Timer",
]
