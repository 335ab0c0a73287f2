"""Tree node model for grouped results."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from scanview.results.models import NormalizedResult


class GroupNode:
    """A branch (group of results) or a leaf (exactly one result).

    Branches always carry a ``children`` list, possibly empty; leaves carry
    ``result`` and have ``children is None``.
    """

    __slots__ = ("label", "result", "children", "occurrence_count")

    def __init__(
        self,
        label: str,
        result: Optional[NormalizedResult] = None,
        children: Optional[List["GroupNode"]] = None,
    ) -> None:
        if result is not None and children is not None:
            raise ValueError("a node cannot hold both a result and children")
        self.label = label
        self.result = result
        self.children = children
        self.occurrence_count = 1

    @classmethod
    def branch(cls, label: str) -> "GroupNode":
        return cls(label, children=[])

    @classmethod
    def leaf(cls, result: NormalizedResult) -> "GroupNode":
        return cls(result.label, result=result)

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def is_branch(self) -> bool:
        return self.children is not None

    def revisit(self) -> None:
        """Count another pass through this branch while inserting a result."""
        self.occurrence_count += 1

    @property
    def description(self) -> str:
        # Shown only once the branch has been revisited.
        if self.occurrence_count > 1:
            return str(self.occurrence_count)
        return ""

    def find_child(self, label: str) -> Optional["GroupNode"]:
        for child in self.children or ():
            if child.is_branch and child.label == label:
                return child
        return None

    def add_child(self, node: "GroupNode") -> "GroupNode":
        if self.children is None:
            raise ValueError(f"leaf node {self.label!r} cannot take children")
        self.children.append(node)
        return node

    def iter_leaves(self) -> Iterator["GroupNode"]:
        if self.children is None:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable dump of this subtree."""
        if self.result is not None:
            return {
                "label": self.label,
                "id": self.result.id,
                "severity": self.result.severity.value,
                "file": self.result.file_name,
            }
        return {
            "label": self.label,
            "description": self.description,
            "count": self.occurrence_count,
            "children": [child.to_dict() for child in self.children or ()],
        }

    def __repr__(self) -> str:
        kind = "leaf" if self.is_leaf else "branch"
        return f"GroupNode({self.label!r}, {kind}, count={self.occurrence_count})"
