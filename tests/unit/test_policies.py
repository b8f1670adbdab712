"""Tests for construction policy contracts."""

import dataclasses

import pytest

from dimtree import KDTree, KDTreeConfig
from tests.unit.sample_fixtures import textbook_points


def test_kdtree_config_defaults():
    config = KDTreeConfig()

    assert config.axis_policy == "cycle"
    assert config.selection == "quickselect"
    assert KDTree().config == config


def test_kdtree_config_accepts_alternatives():
    config = KDTreeConfig(axis_policy="spread", selection="sort")
    tree = KDTree.build(textbook_points(), config=config)

    assert tree.config.axis_policy == "spread"
    assert tree.config.selection == "sort"
    tree.validate()


def test_kdtree_config_rejects_unknown_values():
    with pytest.raises(ValueError, match="axis_policy must be one of"):
        KDTreeConfig(axis_policy="variance")
    with pytest.raises(ValueError, match="selection must be one of"):
        KDTreeConfig(selection="heap")


def test_kdtree_config_is_frozen():
    config = KDTreeConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.axis_policy = "spread"
