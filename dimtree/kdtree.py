"""Dimension-agnostic k-d tree over records implementing ``Dimensional``."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Literal, NamedTuple, Optional

import jax.numpy as jnp
from beartype import beartype
from jaxtyping import Array, jaxtyped

from . import _build_impl, _query_impl
from .bounds import coordinate_bounds
from .dtypes import COORD_DTYPE, as_coordinates
from .errors import DimensionMismatch
from .node import Node
from .policies import AxisPolicy, KDTreeConfig, SelectionMethod
from .protocols import Dimensional
from .traversal import find_partition_violation, iter_inorder, subtree_height

logger = logging.getLogger(__name__)


class Neighbor(NamedTuple):
    """Query match: an indexed record and its distance to the query."""

    record: Any
    distance: float


def _validate_radius(radius: float | int) -> float:
    if radius < 0:
        raise ValueError(f"radius must be >= 0, received {radius}")
    return float(radius)


class KDTree:
    """Balanced binary partition of k-dimensional records.

    The tree owns its nodes; ``dimension`` is fixed by the first record (or
    declared up front) and every later record must match it. Insertion does
    not rebalance, so skewed insertion order degrades queries toward O(n).
    """

    def __init__(
        self,
        *,
        dimension: Optional[int] = None,
        config: Optional[KDTreeConfig] = None,
    ) -> None:
        if dimension is not None and dimension < 1:
            raise ValueError(f"dimension must be >= 1, received {dimension}")
        self._root: Optional[Node] = None
        self._dimension = dimension
        self._size = 0
        self._config = KDTreeConfig() if config is None else config

    @classmethod
    @jaxtyped(typechecker=beartype)
    def build(
        cls,
        records: Iterable[Dimensional],
        *,
        dimension: Optional[int] = None,
        config: Optional[KDTreeConfig] = None,
    ) -> KDTree:
        """Build a balanced tree from ``records`` by recursive median split.

        Every record is validated before any node is created, so a
        dimensionality mismatch raises without producing a tree.
        """

        tree = cls(dimension=dimension, config=config)
        entries, resolved = _build_impl.read_entries(records, tree._dimension)
        if entries:
            tree._root = _build_impl.build_subtree(entries, resolved, tree._config)
        tree._dimension = resolved
        tree._size = len(entries)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Built KD-tree with %d records (dim=%s, height=%d, axis_policy=%s)",
                tree._size,
                tree._dimension,
                tree.height,
                tree._config.axis_policy,
            )
        return tree

    @property
    def root(self) -> Optional[Node]:
        return self._root

    @property
    def dimension(self) -> Optional[int]:
        """Return the dimensionality k, or ``None`` before the first record."""

        return self._dimension

    @property
    def config(self) -> KDTreeConfig:
        return self._config

    @property
    def height(self) -> int:
        """Return the number of nodes on the longest root-to-leaf path."""

        return subtree_height(self._root)

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Any]:
        for node in iter_inorder(self._root):
            yield node.record

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={self._size}, dimension={self._dimension}, "
            f"axis_policy={self._config.axis_policy!r})"
        )

    @jaxtyped(typechecker=beartype)
    def insert(self, record: Dimensional) -> None:
        """Add one record below the first empty slot on its descent path."""

        entries, resolved = _build_impl.read_entries([record], self._dimension)
        self._insert_entries(entries, resolved)

    @jaxtyped(typechecker=beartype)
    def extend(self, records: Iterable[Dimensional]) -> None:
        """Insert many records; all are validated before any is inserted."""

        entries, resolved = _build_impl.read_entries(records, self._dimension)
        if entries:
            self._insert_entries(entries, resolved)

    def _insert_entries(self, entries: list, dimension: int) -> None:
        self._dimension = dimension
        for entry in entries:
            self._root, depth = _build_impl.insert_entry(self._root, entry, dimension)
            self._size += 1
            logger.debug("Inserted record at depth %d (size=%d)", depth, self._size)

    def _query_point(self, query: Any) -> tuple:
        point = tuple(query.coordinates())
        if len(point) != self._dimension:
            raise DimensionMismatch(self._dimension, len(point), what="query")
        return point

    @jaxtyped(typechecker=beartype)
    def nearest(
        self, query: Dimensional, *, exclude_self: bool = False
    ) -> Optional[Neighbor]:
        """Return the indexed record closest to ``query`` and its distance.

        Returns ``None`` on an empty tree. Among equidistant records the one
        reached first by the descend-then-unwind walk wins. With
        ``exclude_self`` the query object itself is never returned.
        """

        if self._root is None:
            return None
        point = self._query_point(query)
        skip = query if exclude_self else None
        found = _query_impl.nearest(self._root, query, point, skip=skip)
        if found is None:
            return None
        return Neighbor(*found)

    @jaxtyped(typechecker=beartype)
    def nearest_k(
        self,
        query: Dimensional,
        k: int = 1,
        *,
        backend: Literal["tree", "dense"] = "tree",
        exclude_self: bool = False,
    ) -> list[Neighbor]:
        """Return the ``k`` records closest to ``query``, nearest first.

        Args:
            query: Query record with the tree's dimensionality.
            k: Number of neighbors to return.
            backend: ``tree`` walks the tree with hyperplane pruning;
                ``dense`` scores every record and selects with
                ``jax.lax.top_k``.
            exclude_self: If ``True``, the query object itself is skipped.

        Returns:
            Up to ``k`` ``Neighbor`` tuples sorted by distance.
        """

        if backend not in {"tree", "dense"}:
            raise ValueError("backend must be one of: 'tree', 'dense'")
        if k < 1:
            raise ValueError(f"k must be >= 1, received {k}")
        if self._root is None:
            return []
        if k > self._size:
            raise ValueError(f"k must be <= num_records={self._size}, received {k}")

        point = self._query_point(query)
        skip = query if exclude_self else None
        if backend == "dense":
            found = _query_impl.dense_nearest_k(
                list(self), self.coordinate_matrix(), query, point, k, skip=skip
            )
        else:
            found = _query_impl.nearest_k(self._root, query, point, k, skip=skip)
        return [Neighbor(record, distance) for record, distance in found]

    @jaxtyped(typechecker=beartype)
    def range(
        self, query: Dimensional, radius: float | int, *, sort: bool = False
    ) -> list[Any]:
        """Return every record within ``radius`` of ``query`` (inclusive).

        Records come back in tree pre-order, or by increasing distance when
        ``sort`` is set.
        """

        radius_value = _validate_radius(radius)
        if self._root is None:
            return []
        point = self._query_point(query)
        found = _query_impl.within_radius(self._root, query, point, radius_value)
        if sort:
            found.sort(key=lambda item: item[1])
        return [record for record, _ in found]

    @jaxtyped(typechecker=beartype)
    def count_within(self, query: Dimensional, radius: float | int) -> int:
        """Count records within ``radius`` of ``query``."""

        return len(self.range(query, radius))

    @jaxtyped(typechecker=beartype)
    def within_box(self, lower: Sequence[Any], upper: Sequence[Any]) -> list[Any]:
        """Return every record inside the closed axis-aligned box."""

        if self._root is None:
            return []
        for what, corner in (("lower", lower), ("upper", upper)):
            if len(corner) != self._dimension:
                raise DimensionMismatch(self._dimension, len(corner), what=what)
        for axis, (lo, hi) in enumerate(zip(lower, upper)):
            if hi < lo:
                raise ValueError(
                    f"box lower must not exceed upper; axis {axis} has {lo} > {hi}"
                )
        return _query_impl.within_box(self._root, lower, upper)

    def coordinate_matrix(self) -> Array:
        """Return in-order coordinates as a float64 ``(n, k)`` array."""

        if self._root is None:
            return jnp.zeros((0, self._dimension or 0), dtype=COORD_DTYPE)
        return as_coordinates([node.point for node in iter_inorder(self._root)])

    def bounds(self) -> Optional[tuple[Array, Array]]:
        """Return per-axis ``(minimum, maximum)`` of indexed coordinates."""

        if self._root is None:
            return None
        return coordinate_bounds(self.coordinate_matrix())

    def validate(self) -> None:
        """Raise ``ValueError`` if any node breaks the split invariant."""

        if self._root is None:
            return
        violation = find_partition_violation(self._root, self._dimension)
        if violation is not None:
            ancestor, node = violation
            raise ValueError(
                f"record {node.record!r} is on the wrong side of "
                f"{ancestor.record!r} (axis {ancestor.axis})"
            )


@jaxtyped(typechecker=beartype)
def build_kdtree(
    records: Iterable[Dimensional],
    *,
    axis_policy: AxisPolicy = "cycle",
    selection: SelectionMethod = "quickselect",
) -> KDTree:
    """Build a k-d tree from ``records`` with the given construction policy."""

    config = KDTreeConfig(axis_policy=axis_policy, selection=selection)
    return KDTree.build(records, config=config)


@jaxtyped(typechecker=beartype)
def build_and_query(
    records: Iterable[Dimensional],
    queries: Iterable[Dimensional],
    *,
    k: int = 1,
    axis_policy: AxisPolicy = "cycle",
    backend: Literal["tree", "dense"] = "tree",
) -> list[list[Neighbor]]:
    """Convenience function to build a tree and run k-nearest queries."""

    tree = build_kdtree(records, axis_policy=axis_policy)
    return [tree.nearest_k(query, k, backend=backend) for query in queries]


__all__ = [
    "KDTree",
    "Neighbor",
    "build_and_query",
    "build_kdtree",
]
