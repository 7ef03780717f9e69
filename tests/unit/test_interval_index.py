"""Tests for interval-based structural queries."""
import pytest

from albumtree.errors import NotFoundError
from albumtree.hierarchy import (
    in_subtree,
    is_ancestor,
    is_descendant,
    is_leaf,
    is_sibling,
    subtree_range,
)
from albumtree.models import AlbumNode


ROOT = AlbumNode(id=1, parent_id=None, left=1, right=8, title="Root")
CHILD = AlbumNode(id=2, parent_id=1, left=2, right=5, title="Child")
GRANDCHILD = AlbumNode(id=3, parent_id=2, left=3, right=4, title="Grandchild")
SECOND_CHILD = AlbumNode(id=4, parent_id=1, left=6, right=7, title="Second")
OTHER_ROOT = AlbumNode(id=5, parent_id=None, left=9, right=10, title="Other")


class TestPureRelations:
    """Relations decided from bounds alone."""

    def test_descendant_is_strictly_inside(self):
        assert is_descendant(GRANDCHILD, ROOT)
        assert is_descendant(GRANDCHILD, CHILD)
        assert is_descendant(SECOND_CHILD, ROOT)

    def test_node_is_not_its_own_descendant(self):
        assert not is_descendant(CHILD, CHILD)

    def test_disjoint_nodes_are_unrelated(self):
        assert not is_descendant(SECOND_CHILD, CHILD)
        assert not is_descendant(CHILD, SECOND_CHILD)
        assert not is_descendant(OTHER_ROOT, ROOT)

    def test_ancestor_mirrors_descendant(self):
        assert is_ancestor(ROOT, GRANDCHILD)
        assert not is_ancestor(GRANDCHILD, ROOT)

    def test_siblings_share_parent(self):
        assert is_sibling(CHILD, SECOND_CHILD)
        assert is_sibling(ROOT, OTHER_ROOT)
        assert not is_sibling(CHILD, CHILD)
        assert not is_sibling(CHILD, GRANDCHILD)

    def test_leaf_has_adjacent_bounds(self):
        assert is_leaf(GRANDCHILD)
        assert is_leaf(OTHER_ROOT)
        assert not is_leaf(CHILD)

    def test_subtree_range_and_membership(self):
        assert subtree_range(CHILD) == (2, 5)
        assert in_subtree(CHILD.left, CHILD)
        assert in_subtree(GRANDCHILD.left, CHILD)
        assert not in_subtree(SECOND_CHILD.left, CHILD)


class TestIntervalIndex:
    """Id-based queries against the database."""

    def test_is_descendant_of(self, index, sample_tree):
        assert index.is_descendant_of(sample_tree["Day1"], sample_tree["Trip"])
        assert index.is_descendant_of(sample_tree["Day1"], sample_tree["Paris"])
        assert not index.is_descendant_of(sample_tree["Rome"], sample_tree["Paris"])
        assert not index.is_descendant_of(sample_tree["Q1"], sample_tree["Trip"])

    def test_is_ancestor_of(self, index, sample_tree):
        assert index.is_ancestor_of(sample_tree["Work"], sample_tree["Q1"])
        assert not index.is_ancestor_of(sample_tree["Q1"], sample_tree["Work"])

    def test_is_sibling_of(self, index, sample_tree):
        assert index.is_sibling_of(sample_tree["Paris"], sample_tree["Rome"])
        assert index.is_sibling_of(sample_tree["Trip"], sample_tree["Work"])
        assert not index.is_sibling_of(sample_tree["Day1"], sample_tree["Rome"])

    def test_descendants_in_display_order(self, index, sample_tree):
        titles = [node.title for node in index.descendants(sample_tree["Trip"])]
        assert titles == ["Paris", "Day1", "Day2", "Rome"]

    def test_leaf_has_no_descendants(self, index, sample_tree):
        assert index.descendants(sample_tree["Day2"]) == []

    def test_ancestors_root_first(self, index, sample_tree):
        titles = [node.title for node in index.ancestors(sample_tree["Day2"])]
        assert titles == ["Trip", "Paris"]

    def test_depth(self, index, sample_tree):
        assert index.depth(sample_tree["Trip"]) == 0
        assert index.depth(sample_tree["Paris"]) == 1
        assert index.depth(sample_tree["Day1"]) == 2

    def test_unknown_id_raises(self, index, sample_tree):
        with pytest.raises(NotFoundError) as exc_info:
            index.is_descendant_of(999, sample_tree["Trip"])
        assert exc_info.value.album_id == 999
