"""Node iteration and structural checks for dimtree trees."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from .node import Node


def iter_inorder(root: Optional[Node]) -> Iterator[Node]:
    """Yield nodes left subtree first, then the node, then the right subtree."""

    stack: list[Node] = []
    current = root
    while stack or current is not None:
        while current is not None:
            stack.append(current)
            current = current.left
        current = stack.pop()
        yield current
        current = current.right


def iter_preorder(root: Optional[Node]) -> Iterator[Node]:
    """Yield nodes before their children, left child first."""

    stack = [] if root is None else [root]
    while stack:
        node = stack.pop()
        yield node
        if node.right is not None:
            stack.append(node.right)
        if node.left is not None:
            stack.append(node.left)


def subtree_height(root: Optional[Node]) -> int:
    """Number of nodes on the longest root-to-leaf path (0 when empty)."""

    height = 0
    stack = [] if root is None else [(root, 1)]
    while stack:
        node, depth = stack.pop()
        height = max(height, depth)
        for child in (node.left, node.right):
            if child is not None:
                stack.append((child, depth + 1))
    return height


def find_partition_violation(
    root: Optional[Node], dimension: int
) -> Optional[tuple[Node, Node]]:
    """Return ``(ancestor, descendant)`` for the first split that is broken.

    Every record in an ancestor's left subtree must lie strictly below the
    ancestor on its split axis, and every record in its right subtree must
    lie at or above it. Returns ``None`` when the tree is consistent.
    """

    if root is None:
        return None

    unbounded: tuple[Optional[Node], ...] = (None,) * dimension
    # floors[a] is the tightest ancestor the node must be >= on axis a;
    # ceilings[a] the tightest one it must be strictly < on axis a.
    stack = [(root, unbounded, unbounded)]
    while stack:
        node, floors, ceilings = stack.pop()
        for axis in range(dimension):
            floor = floors[axis]
            if floor is not None and node.point[axis] < floor.split_value:
                return floor, node
            ceiling = ceilings[axis]
            if ceiling is not None and not node.point[axis] < ceiling.split_value:
                return ceiling, node

        if node.left is not None:
            tighter = list(ceilings)
            tighter[node.axis] = node
            stack.append((node.left, floors, tuple(tighter)))
        if node.right is not None:
            tighter = list(floors)
            tighter[node.axis] = node
            stack.append((node.right, tuple(tighter), ceilings))
    return None


__all__ = [
    "find_partition_violation",
    "iter_inorder",
    "iter_preorder",
    "subtree_height",
]
