"""Diagnostic projection — one-based result locations to zero-based editor ranges."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Iterator, List, Optional, Tuple
from urllib.parse import quote, urlsplit, urlunsplit

from scanview.results.models import NormalizedResult, SourceLocation
from scanview.results.severity import DiagnosticSeverity

DIAGNOSTIC_SOURCE = "scanview"


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based line/character pair."""

    line: int
    character: int


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "start": {"line": self.start.line, "character": self.start.character},
            "end": {"line": self.end.line, "character": self.end.character},
        }


@dataclass(frozen=True)
class DiagnosticEntry:
    """A positional marker for one result in one file."""

    file_path: str
    range: Range
    message: str
    severity_code: DiagnosticSeverity
    source: str = DIAGNOSTIC_SOURCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": self.severity_code.name.lower(),
            "source": self.source,
        }


def to_range(location: SourceLocation) -> Range:
    """Convert a one-based location into a single-line zero-based range.

    Non-positive coordinates are clamped to ``1``, not ``-1``.
    """
    line = location.line - 1 if location.line > 0 else 1
    column = location.column - 1 if location.column > 0 else 1
    return Range(Position(line, column), Position(line, column + location.length))


def _root_uri(workspace_root: str) -> str:
    if "://" in workspace_root:
        return workspace_root
    path = PurePosixPath(workspace_root.replace("\\", "/")).as_posix()
    if not path.startswith("/"):
        path = "/" + path
    return "file://" + quote(path)


def join_uri(workspace_root: str, file_name: str) -> str:
    """Join a workspace root (URI or path) with a relative file name."""
    base = _root_uri(workspace_root).rstrip("/")
    relative = "/".join(part for part in file_name.replace("\\", "/").split("/") if part)
    if not relative:
        return base
    # Collapse "." and ".." the way the editor resolves document paths.
    parts = urlsplit(base)
    path = posixpath.normpath(f"{parts.path}/{quote(relative)}")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


class DiagnosticMap:
    """Insertion-ordered mapping of file URI to its diagnostics."""

    def __init__(self) -> None:
        self._entries: Dict[str, List[DiagnosticEntry]] = {}

    def add(self, entry: DiagnosticEntry) -> None:
        self._entries.setdefault(entry.file_path, []).append(entry)

    def __getitem__(self, file_path: str) -> List[DiagnosticEntry]:
        return self._entries[file_path]

    def __contains__(self, file_path: object) -> bool:
        return file_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterator[Tuple[str, List[DiagnosticEntry]]]:
        return iter(self._entries.items())

    def total(self) -> int:
        return sum(len(entries) for entries in self._entries.values())

    def to_dict(self) -> Dict[str, List[Dict[str, Any]]]:
        return {path: [e.to_dict() for e in entries] for path, entries in self._entries.items()}


def project(
    result: NormalizedResult,
    location: SourceLocation,
    workspace_root: Optional[str],
) -> Optional[DiagnosticEntry]:
    """Build the diagnostic for *location*; ``None`` without a workspace root."""
    if not workspace_root:
        return None
    return DiagnosticEntry(
        file_path=join_uri(workspace_root, location.file_name),
        range=to_range(location),
        message=result.label,
        severity_code=result.get_severity_code(),
    )


def project_first_location(
    result: NormalizedResult,
    workspace_root: Optional[str],
    diagnostics: DiagnosticMap,
) -> Optional[DiagnosticEntry]:
    """Project the result's first source location into *diagnostics*."""
    location = result.first_location
    if location is None:
        return None
    entry = project(result, location, workspace_root)
    if entry is not None:
        diagnostics.add(entry)
    return entry
