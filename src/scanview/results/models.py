"""Result data models — one normalized view per raw scan result record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from scanview.results.severity import DiagnosticSeverity, Severity, severity_code


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    if isinstance(value, (float, str)):
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0
    return 0


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A highlighted span inside a file. ``line`` and ``column`` are 1-based."""

    file_name: str
    line: int = 0
    column: int = 0
    length: int = 0

    @classmethod
    def from_raw(cls, node: Mapping[str, Any]) -> "SourceLocation":
        return cls(
            file_name=_as_str(node.get("fileName")),
            line=_as_int(node.get("line")),
            column=_as_int(node.get("column")),
            length=_as_int(node.get("length")),
        )


@dataclass(frozen=True)
class NormalizedResult:
    """Typed, immutable view of one scan result."""

    label: str
    category: str
    severity: Severity = Severity.EMPTY
    status: str = ""
    language: str = ""
    source_locations: Tuple[SourceLocation, ...] = ()
    id: str = ""
    state: str = ""
    description: str = ""
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def get_severity(self) -> Severity:
        return self.severity

    def get_severity_code(self) -> DiagnosticSeverity:
        return severity_code(self.severity)

    @property
    def file_name(self) -> str:
        """File of the first source location, or empty when there is none."""
        if not self.source_locations:
            return ""
        return self.source_locations[0].file_name

    @property
    def first_location(self) -> Optional[SourceLocation]:
        return self.source_locations[0] if self.source_locations else None


def _source_locations(raw: Mapping[str, Any], data: Mapping[str, Any]) -> Tuple[SourceLocation, ...]:
    nodes = data.get("nodes")
    if not isinstance(nodes, list):
        nodes = raw.get("nodes")
    if isinstance(nodes, list):
        return tuple(SourceLocation.from_raw(n) for n in nodes if isinstance(n, Mapping))
    # Flattened records carry a single location on the result itself
    if raw.get("fileName"):
        return (SourceLocation.from_raw(raw),)
    return ()


def _label(raw: Mapping[str, Any], data: Mapping[str, Any], category: str) -> str:
    for candidate in (data.get("queryName"), data.get("packageIdentifier"), raw.get("id")):
        text = _as_str(candidate).strip()
        if text:
            return text
    return category or "Unnamed result"


def normalize(raw: Mapping[str, Any]) -> NormalizedResult:
    """Build a NormalizedResult from a raw record.

    Missing fields never raise: severity falls back to ``Severity.EMPTY``,
    locations to an empty tuple, strings to ``""``.
    """
    data = raw.get("data")
    if not isinstance(data, Mapping):
        data = {}

    category = _as_str(raw.get("type"))
    language = _as_str(raw.get("language")) or _as_str(data.get("languageName"))

    return NormalizedResult(
        label=_label(raw, data, category),
        category=category,
        severity=Severity.parse(raw.get("severity")),
        status=_as_str(raw.get("status")),
        language=language,
        source_locations=_source_locations(raw, data),
        id=_as_str(raw.get("id")),
        state=_as_str(raw.get("state")),
        description=_as_str(raw.get("description")),
        raw=dict(raw),
    )
