"""Unit coverage for dimtree bounds helpers."""

import jax.numpy as jnp

from dimtree import KDTree, Point, coordinate_bounds, widest_axis
from tests.unit.sample_fixtures import textbook_points


def test_coordinate_bounds_returns_per_axis_extremes():
    points = jnp.array(
        [
            [-1.0, 2.0, 0.5],
            [3.0, -2.0, 1.5],
            [0.5, 1.0, -4.0],
        ],
        dtype=jnp.float64,
    )
    lower, upper = coordinate_bounds(points)
    assert jnp.array_equal(lower, jnp.array([-1.0, -2.0, -4.0]))
    assert jnp.array_equal(upper, jnp.array([3.0, 2.0, 1.5]))


def test_widest_axis_prefers_lowest_axis_on_ties():
    degenerate = jnp.array([[2.0, 2.0, 2.0], [2.0, 2.0, 2.0]])
    stretched = jnp.array([[0.0, 0.0, 0.0], [1.0, 5.0, 5.0]])

    assert widest_axis(degenerate) == 0
    assert widest_axis(stretched) == 1


def test_tree_bounds_and_coordinate_matrix():
    tree = KDTree.build(textbook_points())
    matrix = tree.coordinate_matrix()
    lower, upper = tree.bounds()

    assert matrix.shape == (6, 2)
    assert matrix.dtype == jnp.float64
    assert jnp.array_equal(matrix[0], jnp.array([2.0, 3.0]))
    assert jnp.array_equal(lower, jnp.array([2.0, 1.0]))
    assert jnp.array_equal(upper, jnp.array([9.0, 7.0]))


def test_coordinate_matrix_of_declared_empty_tree_keeps_width():
    tree = KDTree(dimension=4)
    assert tree.coordinate_matrix().shape == (0, 4)
    tree.insert(Point.of(1.0, 2.0, 3.0, 4.0))
    assert tree.coordinate_matrix().shape == (1, 4)
