"""dimtree: dimension-agnostic k-d tree over records with coordinates."""

from jax import config as _jax_config

# Coordinates and distances are compared across Python and JAX in float64.
_jax_config.update("jax_enable_x64", True)

from .bounds import coordinate_bounds, widest_axis
from .dtypes import COORD_DTYPE, INDEX_DTYPE, as_coordinates, as_index
from .errors import DimensionMismatch
from .kdtree import KDTree, Neighbor, build_and_query, build_kdtree
from .metrics import (
    available_metrics,
    axis_distance,
    coordinate_distance,
    distances_to,
    euclidean_distance,
    get_metric,
    register_metric,
)
from .node import Node
from .policies import AxisPolicy, KDTreeConfig, SelectionMethod
from .protocols import Dimensional
from .records import Color, Point
from .traversal import (
    find_partition_violation,
    iter_inorder,
    iter_preorder,
    subtree_height,
)

__all__ = [
    "COORD_DTYPE",
    "INDEX_DTYPE",
    "AxisPolicy",
    "Color",
    "DimensionMismatch",
    "Dimensional",
    "KDTree",
    "KDTreeConfig",
    "Neighbor",
    "Node",
    "Point",
    "SelectionMethod",
    "as_coordinates",
    "as_index",
    "available_metrics",
    "axis_distance",
    "build_and_query",
    "build_kdtree",
    "coordinate_bounds",
    "coordinate_distance",
    "distances_to",
    "euclidean_distance",
    "find_partition_violation",
    "get_metric",
    "iter_inorder",
    "iter_preorder",
    "register_metric",
    "subtree_height",
    "widest_axis",
]
