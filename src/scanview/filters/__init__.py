"""Severity filters and grouping selection."""

from scanview.filters.state import (
    FilterError,
    FilterState,
    JsonStateStore,
    MemoryStateStore,
    StateStore,
)

__all__ = [
    "FilterError",
    "FilterState",
    "JsonStateStore",
    "MemoryStateStore",
    "StateStore",
]
