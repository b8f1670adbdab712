"""Query kernels over linked k-d tree nodes.

All walks use explicit stacks; trees grown by skewed insertion can be far
deeper than the interpreter recursion limit.
"""

from __future__ import annotations

import heapq
from collections.abc import Callable, Sequence
from typing import Any, Optional

import jax
import jax.numpy as jnp
from jaxtyping import Array

from .dtypes import COORD_DTYPE
from .metrics import available_metrics, axis_distance, distances_to
from .node import Node

_INF = float("inf")


def _near_far(node: Node, query_point: tuple) -> tuple[Optional[Node], Optional[Node]]:
    if query_point[node.axis] < node.split_value:
        return node.left, node.right
    return node.right, node.left


def _pruned_walk(
    root: Node, query_point: tuple, visit: Callable[[Node], float]
) -> None:
    """Descend toward ``query_point``, then call ``visit`` while unwinding.

    ``visit`` returns the current pruning bound; the far child of a node is
    entered only when the hyperplane distance is strictly below it.
    """

    stack: list[tuple[Node, bool]] = [(root, True)]
    while stack:
        node, descending = stack.pop()
        near, far = _near_far(node, query_point)
        if descending:
            stack.append((node, False))
            if near is not None:
                stack.append((near, True))
            continue

        bound = visit(node)
        if far is None:
            continue
        if axis_distance(query_point[node.axis], node.split_value) < bound:
            stack.append((far, True))


def nearest(
    root: Node, query: Any, query_point: tuple, *, skip: Any = None
) -> Optional[tuple[Any, float]]:
    """Closest record to ``query``; ties keep the first one encountered."""

    best: list[Any] = [None, _INF]

    def visit(node: Node) -> float:
        if node.record is not skip:
            distance = float(query.distance(node.record))
            if distance < best[1]:
                best[0] = node
                best[1] = distance
        return best[1]

    _pruned_walk(root, query_point, visit)
    if best[0] is None:
        return None
    return best[0].record, best[1]


def nearest_k(
    root: Node, query: Any, query_point: tuple, k: int, *, skip: Any = None
) -> list[tuple[Any, float]]:
    """The ``k`` closest records sorted by distance, then encounter order."""

    # Max-heap on (distance, encounter); the root is the entry to evict.
    heap: list[tuple[float, int, Any]] = []
    encountered = [0]

    def visit(node: Node) -> float:
        if node.record is not skip:
            distance = float(query.distance(node.record))
            seq = encountered[0]
            encountered[0] += 1
            if len(heap) < k:
                heapq.heappush(heap, (-distance, -seq, node.record))
            elif distance < -heap[0][0]:
                heapq.heapreplace(heap, (-distance, -seq, node.record))
        if len(heap) < k:
            return _INF
        return -heap[0][0]

    _pruned_walk(root, query_point, visit)
    ranked = sorted(heap, key=lambda item: (-item[0], -item[1]))
    return [(record, -neg_distance) for neg_distance, _, record in ranked]


def dense_nearest_k(
    records: Sequence[Any],
    points: Array,
    query: Any,
    query_point: tuple,
    k: int,
    *,
    skip: Any = None,
) -> list[tuple[Any, float]]:
    """Linear-scan k nearest using ``jax.lax.top_k`` over all distances.

    ``points`` holds the coordinates of ``records`` row by row. When the
    query names a registered metric, all distances come from one batched
    kernel call; otherwise each record is scored with ``query.distance``.
    """

    metric = getattr(query, "metric", None)
    if isinstance(metric, str) and metric in available_metrics():
        distances = distances_to(query_point, points, metric=metric)
    else:
        distances = jnp.asarray(
            [float(query.distance(r)) for r in records], dtype=COORD_DTYPE
        )
    if skip is not None:
        skipped = jnp.asarray([r is skip for r in records], dtype=bool)
        distances = jnp.where(skipped, _INF, distances)
    top_scores, cols = jax.lax.top_k(-distances, k)
    result = []
    for score, col in zip(top_scores.tolist(), cols.tolist()):
        if score == -_INF:
            continue
        result.append((records[col], -score))
    return result


def within_radius(
    root: Node, query: Any, query_point: tuple, radius: float
) -> list[tuple[Any, float]]:
    """Records at distance ``<= radius`` in pre-order, with their distances."""

    found: list[tuple[Any, float]] = []
    stack = [root]
    while stack:
        node = stack.pop()
        distance = float(query.distance(node.record))
        if distance <= radius:
            found.append((node.record, distance))

        coord = query_point[node.axis]
        value = node.split_value
        reach = axis_distance(coord, value) <= radius
        if node.right is not None and (not coord < value or reach):
            stack.append(node.right)
        if node.left is not None and (coord < value or reach):
            stack.append(node.left)
    return found


def within_box(root: Node, lower: Sequence[Any], upper: Sequence[Any]) -> list[Any]:
    """Records whose coordinates lie in the closed box ``[lower, upper]``."""

    found: list[Any] = []
    stack = [root]
    while stack:
        node = stack.pop()
        if all(lo <= c <= hi for lo, c, hi in zip(lower, node.point, upper)):
            found.append(node.record)

        value = node.split_value
        if node.right is not None and not upper[node.axis] < value:
            stack.append(node.right)
        if node.left is not None and lower[node.axis] < value:
            stack.append(node.left)
    return found


__all__ = [
    "dense_nearest_k",
    "nearest",
    "nearest_k",
    "within_box",
    "within_radius",
]
