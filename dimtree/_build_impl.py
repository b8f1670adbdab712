"""Median-split construction and insertion descent.

Records are partitioned by the total order ``(coordinate[axis], input
position)``. The node of each subtree is the earliest-input record carrying
the median coordinate value; records strictly below it go left and all
others go right. Duplicate-heavy data therefore produces right-leaning
subtrees: with many equal values on an axis the tree deepens toward a
chain and the whole build approaches O(n^2).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple, Optional

import jax
import jax.numpy as jnp

from .bounds import widest_axis
from .dtypes import as_coordinates, as_index
from .errors import DimensionMismatch
from .node import Node
from .policies import KDTreeConfig


class _Entry(NamedTuple):
    order: int
    point: tuple
    record: Any


def read_entries(
    records: Iterable[Any], dimension: Optional[int]
) -> tuple[list[_Entry], Optional[int]]:
    """Snapshot coordinates of every record and check dimensionality.

    Returns the entries and the dimensionality, which is ``dimension`` when
    given and otherwise taken from the first record.
    """

    entries: list[_Entry] = []
    for order, record in enumerate(records):
        point = tuple(record.coordinates())
        if dimension is None:
            if len(point) < 1:
                raise ValueError("records must expose at least one coordinate")
            dimension = len(point)
        elif len(point) != dimension:
            raise DimensionMismatch(dimension, len(point), what=f"record {order}")
        entries.append(_Entry(order, point, record))
    return entries, dimension


def _median_by_quickselect(entries: list[_Entry], axis: int) -> _Entry:
    rank = len(entries) // 2
    candidates = entries
    while True:
        pivot = candidates[len(candidates) // 2]
        pivot_key = (pivot.point[axis], pivot.order)
        lower = [e for e in candidates if (e.point[axis], e.order) < pivot_key]
        if rank < len(lower):
            candidates = lower
            continue
        if rank == len(lower):
            return pivot
        # Keys are unique, so exactly one candidate ties with the pivot.
        rank -= len(lower) + 1
        candidates = [e for e in candidates if (e.point[axis], e.order) > pivot_key]


def _is_exact_float64(raw: list[Any]) -> bool:
    try:
        return all(float(v) == v for v in raw)
    except OverflowError:
        return False


def _median_by_sort(entries: list[_Entry], axis: int) -> _Entry:
    raw = [e.point[axis] for e in entries]
    if not _is_exact_float64(raw):
        # float64 would merge distinct values; rank on the originals instead.
        ranked_entries = sorted(entries, key=lambda e: (e.point[axis], e.order))
        return ranked_entries[len(entries) // 2]

    values = as_coordinates([float(v) for v in raw])
    orders = as_index([e.order for e in entries])
    positions = jnp.arange(len(entries))
    _, _, ranked = jax.lax.sort((values, orders, positions), dimension=0, num_keys=2)
    return entries[int(ranked[len(entries) // 2])]


def _choose_axis(
    entries: list[_Entry], depth: int, dimension: int, config: KDTreeConfig
) -> int:
    if config.axis_policy == "spread" and len(entries) > 1:
        return widest_axis(as_coordinates([e.point for e in entries]))
    return depth % dimension


def _partition(
    entries: list[_Entry], axis: int, config: KDTreeConfig
) -> tuple[list[_Entry], _Entry, list[_Entry]]:
    if config.selection == "sort":
        median = _median_by_sort(entries, axis)
    else:
        median = _median_by_quickselect(entries, axis)

    value = median.point[axis]
    left = [e for e in entries if e.point[axis] < value]
    upper = [e for e in entries if not e.point[axis] < value]
    pivot = min((e for e in upper if e.point[axis] == value), key=lambda e: e.order)
    right = [e for e in upper if e is not pivot]
    return left, pivot, right


def build_subtree(
    entries: list[_Entry],
    dimension: int,
    config: KDTreeConfig,
    *,
    depth: int = 0,
) -> Optional[Node]:
    """Build a balanced subtree from ``entries`` rooted at ``depth``."""

    if not entries:
        return None

    root: Optional[Node] = None
    pending: list[tuple[list[_Entry], int, Optional[Node], str]] = [
        (entries, depth, None, "")
    ]
    while pending:
        chunk, level, parent, side = pending.pop()
        axis = _choose_axis(chunk, level, dimension, config)
        left, pivot, right = _partition(chunk, axis, config)
        node = Node(record=pivot.record, point=pivot.point, axis=axis)
        if parent is None:
            root = node
        else:
            setattr(parent, side, node)
        if right:
            pending.append((right, level + 1, node, "right"))
        if left:
            pending.append((left, level + 1, node, "left"))
    return root


def insert_entry(
    root: Optional[Node], entry: _Entry, dimension: int
) -> tuple[Node, int]:
    """Attach ``entry`` at the first empty slot on its descent path.

    Returns the (possibly new) root and the depth of the inserted node.
    """

    if root is None:
        return Node(record=entry.record, point=entry.point, axis=0), 0

    node = root
    depth = 0
    while True:
        depth += 1
        side = "left" if entry.point[node.axis] < node.split_value else "right"
        child = getattr(node, side)
        if child is None:
            setattr(
                node,
                side,
                Node(record=entry.record, point=entry.point, axis=depth % dimension),
            )
            return root, depth
        node = child


__all__ = ["build_subtree", "insert_entry", "read_entries"]
