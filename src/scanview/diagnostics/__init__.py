"""Editor diagnostics derived from result locations."""

from scanview.diagnostics.projector import (
    DiagnosticEntry,
    DiagnosticMap,
    Position,
    Range,
    join_uri,
    project,
    project_first_location,
    to_range,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticMap",
    "Position",
    "Range",
    "join_uri",
    "project",
    "project_first_location",
    "to_range",
]
