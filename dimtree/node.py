"""Tree node type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class Node:
    """One indexed record plus its split axis and children.

    ``point`` caches ``record.coordinates()`` as a tuple. Records in
    ``left`` have ``point[axis]`` strictly below this node's; records in
    ``right`` have it greater or equal.
    """

    record: Any
    point: tuple
    axis: int
    left: Optional["Node"] = None
    right: Optional["Node"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def split_value(self) -> Any:
        return self.point[self.axis]


__all__ = ["Node"]
