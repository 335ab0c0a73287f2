"""Grouping engine — build a nested tree from a flat list of results.

Every refresh builds a brand-new tree. Children are kept in discovery order
(first result to produce a key wins the earlier slot), so the same input
order always yields the same tree.
"""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, Callable, Dict, Iterable, Optional, Sequence, Tuple

from scanview.results.models import NormalizedResult
from scanview.results.severity import Severity
from scanview.tree.models import GroupNode


class GroupDimension(str, Enum):
    FILE_NAME = "fileName"
    SEVERITY = "severity"
    STATUS = "status"
    LANGUAGE = "language"
    TYPE = "type"

    @classmethod
    def parse(cls, value: str) -> "GroupDimension":
        """Resolve a dimension name case-insensitively (``category`` = ``type``)."""
        key = value.strip().lower()
        if key == "category":
            return cls.TYPE
        for dim in cls:
            if dim.value.lower() == key or dim.name.lower() == key:
                return dim
        raise ValueError(f"Unknown grouping dimension: {value!r}")

    @classmethod
    def parse_selectable(cls, value: str) -> "GroupDimension":
        """Like ``parse`` but only for dimensions a user may select."""
        dimension = cls.parse(value)
        if dimension not in SELECTABLE_DIMENSIONS:
            raise ValueError(f"{value!r} cannot be selected as a grouping")
        return dimension


# Dimensions the user can pick below the fixed top-level ``type`` grouping.
SELECTABLE_DIMENSIONS: Tuple[GroupDimension, ...] = (
    GroupDimension.FILE_NAME,
    GroupDimension.SEVERITY,
    GroupDimension.STATUS,
    GroupDimension.LANGUAGE,
)

DEFAULT_GROUPING = GroupDimension.SEVERITY

DIMENSION_ACCESSORS: Dict[GroupDimension, Callable[[NormalizedResult], str]] = {
    GroupDimension.FILE_NAME: lambda r: r.file_name,
    GroupDimension.SEVERITY: lambda r: r.severity.value,
    GroupDimension.STATUS: lambda r: r.status,
    GroupDimension.LANGUAGE: lambda r: r.language,
    GroupDimension.TYPE: lambda r: r.category,
}


def grouping_path(dimension: GroupDimension) -> Tuple[GroupDimension, ...]:
    """The two-level path used by the results view: type, then *dimension*."""
    return (GroupDimension.TYPE, dimension)


def group_key(result: NormalizedResult, dimension: GroupDimension) -> str:
    return DIMENSION_ACCESSORS[dimension](result)


def _descend(node: GroupNode, key: str) -> GroupNode:
    if not key:
        # Missing key: stay on the current node.
        return node
    existing = node.find_child(key)
    if existing is not None:
        existing.revisit()
        return existing
    return node.add_child(GroupNode.branch(key))


def build_tree(
    results: Iterable[NormalizedResult],
    dimensions: Sequence[GroupDimension],
    active_severities: AbstractSet[Severity],
    *,
    root_label: str = "",
    on_result: Optional[Callable[[NormalizedResult], None]] = None,
) -> GroupNode:
    """Group *results* along *dimensions*, keeping only active severities.

    *on_result* is called for every result that passes the filter, in input
    order, so side channels (diagnostics) see exactly the tree's result set.
    """
    root = GroupNode.branch(root_label)

    for result in results:
        if result.get_severity() not in active_severities:
            continue
        if on_result is not None:
            on_result(result)

        node = root
        for dimension in dimensions:
            node = _descend(node, group_key(result, dimension))
        node.add_child(GroupNode.leaf(result))

    return root


def count_leaves(node: GroupNode) -> int:
    return sum(1 for _ in node.iter_leaves()) if node.is_branch else 1
