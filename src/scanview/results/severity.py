"""Severity classification — canonical levels and editor severity codes."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Dict


class Severity(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"
    EMPTY = ""

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Return the canonical level for *value*; unknown values are EMPTY."""
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return cls.EMPTY
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.EMPTY


class DiagnosticSeverity(IntEnum):
    """Editor-side severity, numbered the way editors number them."""

    ERROR = 0
    WARNING = 1
    INFORMATION = 2
    HINT = 3


SEVERITY_ORDER: Dict[Severity, int] = {
    Severity.EMPTY: 0,
    Severity.INFO: 1,
    Severity.LOW: 2,
    Severity.MEDIUM: 3,
    Severity.HIGH: 4,
}

_SEVERITY_CODES: Dict[Severity, DiagnosticSeverity] = {
    Severity.HIGH: DiagnosticSeverity.ERROR,
    Severity.MEDIUM: DiagnosticSeverity.WARNING,
    Severity.LOW: DiagnosticSeverity.INFORMATION,
    Severity.INFO: DiagnosticSeverity.INFORMATION,
    Severity.EMPTY: DiagnosticSeverity.HINT,
}

# Levels that can be switched on and off; EMPTY is never a filter.
FILTERABLE: tuple[Severity, ...] = (
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
    Severity.INFO,
)


def severity_code(severity: Severity) -> DiagnosticSeverity:
    """Map a canonical level to the editor's diagnostic severity."""
    return _SEVERITY_CODES[severity]
