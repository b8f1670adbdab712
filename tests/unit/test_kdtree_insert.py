"""Insertion coverage for the k-d tree."""

import logging

import pytest

from dimtree import DimensionMismatch, KDTree, Point
from tests.unit.sample_fixtures import sample_points, textbook_points


def test_insert_into_empty_tree_fixes_dimension():
    tree = KDTree()
    tree.insert(Point.of(1.0, 2.0, 3.0))

    assert tree.dimension == 3
    assert len(tree) == 1
    assert tree.root.axis == 0
    with pytest.raises(DimensionMismatch):
        tree.insert(Point.of(1.0, 2.0))
    assert len(tree) == 1


def test_insert_follows_construction_rule():
    tree = KDTree.build(textbook_points())
    tree.insert(Point.of(6, 5))

    # 6 < 7 on x goes left; 5 >= 4 on y goes right; 6 >= 4 on x goes right.
    added = tree.root.left.right.right
    assert added.record == Point.of(6, 5)
    assert added.axis == 3 % 2
    tree.validate()


def test_insert_equal_split_value_goes_right():
    tree = KDTree.build([Point.of(5.0, 5.0)])
    tree.insert(Point.of(5.0, 0.0))

    assert tree.root.left is None
    assert tree.root.right.record == Point.of(5.0, 0.0)


@pytest.mark.parametrize("dim", [1, 2, 3, 8])
def test_inserted_tree_answers_nearest_like_built_tree(dim):
    points = sample_points(n=90, dim=dim, seed=50 + dim)
    queries = sample_points(n=10, dim=dim, seed=500 + dim)
    built = KDTree.build(points)
    grown = KDTree()
    for point in points:
        grown.insert(point)

    grown.validate()
    assert len(grown) == len(built)
    assert set(grown) == set(built)
    for query in queries:
        assert grown.nearest(query) == built.nearest(query)


def test_extend_validates_all_records_before_inserting():
    tree = KDTree.build(textbook_points())
    before = list(tree)

    with pytest.raises(DimensionMismatch) as excinfo:
        tree.extend([Point.of(1, 1), Point.of(2, 2), Point.of(3, 3, 3)])

    assert excinfo.value.received == 3
    assert list(tree) == before
    assert len(tree) == 6


def test_extend_appends_without_rebalancing():
    tree = KDTree.build(textbook_points())
    tree.extend([Point.of(10, 10), Point.of(11, 11)])

    assert len(tree) == 8
    assert tree.root.record == Point.of(7, 2)
    tree.validate()


def test_declared_dimension_applies_to_insert():
    tree = KDTree(dimension=2)
    with pytest.raises(DimensionMismatch, match="record 0 must have 2 coordinates"):
        tree.insert(Point.of(1.0, 2.0, 3.0))
    assert tree.root is None


def test_sorted_insertion_degrades_to_a_chain_but_stays_queryable():
    # Deeper than the default recursion limit; every walk must be iterative.
    n = 1500
    tree = KDTree()
    tree.extend(Point.of(float(i)) for i in range(n))

    assert tree.height == n
    tree.validate()
    found = tree.nearest(Point.of(1234.4))
    assert found.record == Point.of(1234.0)
    assert found.distance == pytest.approx(0.4)
    assert len(tree.range(Point.of(n - 1.0), 2.0)) == 3
    assert len(list(tree)) == n


def test_insert_logs_depth_at_debug(caplog):
    tree = KDTree.build(textbook_points())
    with caplog.at_level(logging.DEBUG, logger="dimtree.kdtree"):
        tree.insert(Point.of(6, 5))

    assert "Inserted record at depth 3 (size=7)" in caplog.text


def test_extend_with_no_records_leaves_tree_untouched():
    tree = KDTree()
    tree.extend([])

    assert tree.dimension is None
    assert len(tree) == 0
    assert tree.root is None

    tree.extend(iter([Point.of(1.0, 2.0)]))
    tree.extend(())
    assert tree.dimension == 2
    assert len(tree) == 1
