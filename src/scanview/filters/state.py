"""Filter state — active severity levels and the selected grouping dimension.

The state is a plain object owned by the provider. Persisting it and
mirroring it into the host's visibility context are done through the
``StateStore`` and context-setter collaborators after each mutation.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Set, Tuple

from scanview.results.severity import FILTERABLE, Severity
from scanview.tree.grouping import DEFAULT_GROUPING, SELECTABLE_DIMENSIONS, GroupDimension

logger = logging.getLogger(__name__)

SCAN_ID_KEY = "scanview.scanId"
GROUP_BY_KEY = "scanview.groupBy"
HIGH_FILTER = "scanview.highFilter"
MEDIUM_FILTER = "scanview.mediumFilter"
LOW_FILTER = "scanview.lowFilter"
INFO_FILTER = "scanview.infoFilter"

FILTER_KEYS: Dict[Severity, str] = {
    Severity.HIGH: HIGH_FILTER,
    Severity.MEDIUM: MEDIUM_FILTER,
    Severity.LOW: LOW_FILTER,
    Severity.INFO: INFO_FILTER,
}

DEFAULT_ACTIVE: frozenset[Severity] = frozenset({Severity.HIGH, Severity.MEDIUM})


class FilterError(Exception):
    """Raised for an unknown filter key or a level that cannot be toggled."""


class StateStore(Protocol):
    """Key-value store the host persists between sessions."""

    def get(self, key: str, default: Any = None) -> Any: ...

    def update(self, key: str, value: Any) -> None: ...


class MemoryStateStore:
    """In-process store; nothing survives the session."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonStateStore:
    """Store backed by a small JSON file, written on every update."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data: Dict[str, Any] = {}
        if path.is_file():
            try:
                loaded = json.loads(path.read_text(encoding="utf-8"))
            except ValueError:
                logger.warning("Ignoring unreadable state file %s", path)
                loaded = {}
            if isinstance(loaded, dict):
                self._data = loaded

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")


def _severity_for_key(key: str) -> Optional[Severity]:
    for level, filter_key in FILTER_KEYS.items():
        if key == filter_key:
            return level
    parsed = Severity.parse(key)
    return parsed if parsed in FILTER_KEYS else None


@dataclass
class FilterState:
    grouping_dimension: GroupDimension = DEFAULT_GROUPING
    active_severities: Set[Severity] = field(default_factory=lambda: set(DEFAULT_ACTIVE))

    def is_active(self, level: Severity) -> bool:
        return level in self.active_severities

    def toggle_severity(self, level: Severity) -> bool:
        """Flip *level* on or off. Returns whether it is now active."""
        if level not in FILTER_KEYS:
            raise FilterError(f"Severity {level.value or 'EMPTY'!r} cannot be filtered")
        if level in self.active_severities:
            self.active_severities.discard(level)
            return False
        self.active_severities.add(level)
        return True

    def set_grouping_dimension(self, dimension: GroupDimension) -> None:
        if dimension not in SELECTABLE_DIMENSIONS:
            raise FilterError(f"{dimension.value!r} cannot be selected as a grouping")
        self.grouping_dimension = dimension

    def toggle(self, key: str) -> Tuple[str, Any]:
        """Apply a named filter toggle.

        *key* is a filter key (``scanview.highFilter``), a severity name
        (``low``) or a grouping dimension (``fileName``). Returns the store
        key and its new value.
        """
        level = _severity_for_key(key)
        if level is not None:
            return FILTER_KEYS[level], self.toggle_severity(level)
        try:
            dimension = GroupDimension.parse(key)
        except ValueError as exc:
            raise FilterError(f"Unknown filter: {key!r}") from exc
        if dimension not in SELECTABLE_DIMENSIONS:
            raise FilterError(f"{key!r} cannot be selected as a grouping")
        self.set_grouping_dimension(dimension)
        return GROUP_BY_KEY, dimension.value

    def context_items(self) -> List[Tuple[str, bool]]:
        """Filter keys and their on/off value, in display order."""
        return [(FILTER_KEYS[level], level in self.active_severities) for level in FILTERABLE]

    def save(self, store: StateStore) -> None:
        for key, value in self.context_items():
            store.update(key, value)
        store.update(GROUP_BY_KEY, self.grouping_dimension.value)

    @classmethod
    def from_store(cls, store: StateStore, defaults: Optional["FilterState"] = None) -> "FilterState":
        """Restore persisted toggles, falling back to *defaults* per key."""
        base = defaults or cls()
        active: Set[Severity] = set()
        for level in FILTERABLE:
            value = store.get(FILTER_KEYS[level], None)
            if value is None:
                value = level in base.active_severities
            if value:
                active.add(level)

        dimension = base.grouping_dimension
        stored = store.get(GROUP_BY_KEY, None)
        if isinstance(stored, str):
            try:
                dimension = GroupDimension.parse_selectable(stored)
            except ValueError:
                logger.warning("Ignoring unknown grouping %r in state store", stored)
        return cls(grouping_dimension=dimension, active_severities=active)
