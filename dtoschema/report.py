# File: dtoschema/report.py
"""
DTOSchema - Validation Report
==============================
Wraps the raw error value returned by ``validate`` with the conveniences a
command-line tool or a log line needs: validity, counts, a flat list of
``path: message`` entries and a human-readable report.

The raw error value stays available, unchanged, as ``report.errors``; it is
the structure consumers should serialise.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from dtoschema.utils import PathElement, format_path


class ErrorEntry:
    """One leaf message and the path of the value it is about."""

    __slots__ = ("path", "message")

    def __init__(self, path: Tuple[PathElement, ...], message: str) -> None:
        self.path: Tuple[PathElement, ...] = path
        self.message: str = message

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __repr__(self) -> str:
        return f"{self.location}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ErrorEntry):
            return NotImplemented
        return self.path == other.path and self.message == other.message

    def __hash__(self) -> int:
        return hash((self.path, self.message))

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.location, "message": self.message}


def flatten_errors(errors: Any, path: Tuple[PathElement, ...] = ()) -> List[ErrorEntry]:
    """
    Depth-first list of every leaf message in an error value.

    Mapping keys extend the path (field names and list indexes); list items
    are messages at the current path.

    Complexity: O(M) where M = total nodes of the error value.
    """
    entries: List[ErrorEntry] = []
    if isinstance(errors, dict):
        for key, nested in errors.items():
            entries.extend(flatten_errors(nested, path + (key,)))
    elif isinstance(errors, (list, tuple)):
        for message in errors:
            entries.append(ErrorEntry(path, str(message)))
    return entries


class ValidationReport:
    """Result of validating one value as one DTO type."""

    __slots__ = ("dto_type", "errors", "source", "_entries")

    def __init__(self, dto_type: str, errors: Any, source: str = "") -> None:
        self.dto_type: str = dto_type
        self.errors: Any = errors
        self.source: str = source
        self._entries: List[ErrorEntry] = flatten_errors(errors)

    # -- Query --------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def entries(self) -> List[ErrorEntry]:
        return list(self._entries)

    @property
    def error_count(self) -> int:
        return len(self._entries)

    @property
    def locations(self) -> List[str]:
        """Distinct error locations, in first-seen order."""
        seen: Dict[str, None] = {}
        for entry in self._entries:
            seen.setdefault(entry.location, None)
        return list(seen)

    def summary(self) -> str:
        subject: str = f"{self.source} as {self.dto_type}" if self.source else self.dto_type
        if self.is_valid:
            return f"{subject}: valid."
        return (
            f"{subject}: {self.error_count} error(s) "
            f"in {len(self.locations)} location(s)."
        )

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for entry in self._entries:
            lines.append(f"  ✗ {entry.location}: {entry.message}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "type": self.dto_type,
            "valid": self.is_valid,
            "errors": self.errors,
        }
        if self.source:
            result["source"] = self.source
        return result

    # -- Dunder -------------------------------------------------------------

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<ValidationReport {self.summary()}>"


__all__ = ["ErrorEntry", "flatten_errors", "ValidationReport"]
