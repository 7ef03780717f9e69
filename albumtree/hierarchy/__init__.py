"""Nested-set album hierarchy: index, mutator, aggregation and paths."""
from .aggregation import AggregationView, min_max_under
from .interval_index import (
    IntervalIndex,
    in_subtree,
    is_ancestor,
    is_descendant,
    is_leaf,
    is_sibling,
    subtree_range,
)
from .invariants import check_invariants
from .path_resolver import PathResolver
from .protocols import Aggregatable, HierarchyNode, Pathable
from .tree_mutator import TreeMutator

__all__ = [
    "Aggregatable",
    "AggregationView",
    "HierarchyNode",
    "IntervalIndex",
    "Pathable",
    "PathResolver",
    "TreeMutator",
    "check_invariants",
    "in_subtree",
    "is_ancestor",
    "is_descendant",
    "is_leaf",
    "is_sibling",
    "min_max_under",
    "subtree_range",
]
