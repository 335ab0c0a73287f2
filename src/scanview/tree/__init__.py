"""Grouped result tree."""

from scanview.tree.grouping import (
    DEFAULT_GROUPING,
    GroupDimension,
    build_tree,
    count_leaves,
    grouping_path,
)
from scanview.tree.models import GroupNode

__all__ = [
    "DEFAULT_GROUPING",
    "GroupDimension",
    "GroupNode",
    "build_tree",
    "count_leaves",
    "grouping_path",
]
