"""JSON reporter — tree and diagnostics as one document."""

from __future__ import annotations

import json
from typing import Any, Dict

from scanview.diagnostics.projector import DiagnosticMap
from scanview.filters.state import FilterState
from scanview.results.severity import FILTERABLE
from scanview.tree.models import GroupNode


def to_dict(root: GroupNode, diagnostics: DiagnosticMap, filters: FilterState) -> Dict[str, Any]:
    return {
        "scan_id": root.label,
        "grouping": filters.grouping_dimension.value,
        "active_severities": [s.value for s in FILTERABLE if s in filters.active_severities],
        "tree": root.to_dict(),
        "diagnostics": diagnostics.to_dict(),
    }


def render(root: GroupNode, diagnostics: DiagnosticMap, filters: FilterState) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(root, diagnostics, filters), indent=2)
