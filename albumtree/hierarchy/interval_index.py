"""Interval index: structural queries over nested-set bounds.

``B`` is a descendant of ``A`` exactly when ``A.left < B.left`` and
``B.right < A.right``. Every relation here is decided from stored bounds;
nothing walks ``parent_id`` pointers.
"""

from __future__ import annotations

from ..errors import NotFoundError
from ..infrastructure.repositories import AlbumRepository
from ..models import AlbumNode


def is_descendant(candidate: AlbumNode, ancestor: AlbumNode) -> bool:
    """Return ``True`` when ``candidate`` lies strictly inside ``ancestor``."""

    return ancestor.left < candidate.left and candidate.right < ancestor.right


def is_ancestor(candidate: AlbumNode, descendant: AlbumNode) -> bool:
    return is_descendant(descendant, candidate)


def is_sibling(a: AlbumNode, b: AlbumNode) -> bool:
    """Distinct albums sharing a parent (roots are siblings of each other)."""

    return a.id != b.id and a.parent_id == b.parent_id


def is_leaf(node: AlbumNode) -> bool:
    return node.right == node.left + 1


def subtree_range(node: AlbumNode) -> tuple[int, int]:
    """Bounds covering ``node`` itself and all of its descendants."""

    return node.left, node.right


def in_subtree(position: int, node: AlbumNode) -> bool:
    """Return ``True`` when a left bound ``position`` falls in node's subtree."""

    left, right = subtree_range(node)
    return left <= position < right


class IntervalIndex:
    """Id-based structural queries backed by :class:`AlbumRepository`."""

    def __init__(self, album_repository: AlbumRepository):
        self.album_repo = album_repository

    def get(self, album_id: int) -> AlbumNode:
        """Look up an album or raise :class:`NotFoundError`."""

        node = self.album_repo.get_by_id(album_id)
        if node is None:
            raise NotFoundError(album_id)
        return node

    def is_descendant_of(self, candidate_id: int, ancestor_id: int) -> bool:
        return is_descendant(self.get(candidate_id), self.get(ancestor_id))

    def is_ancestor_of(self, candidate_id: int, descendant_id: int) -> bool:
        return is_ancestor(self.get(candidate_id), self.get(descendant_id))

    def is_sibling_of(self, a_id: int, b_id: int) -> bool:
        return is_sibling(self.get(a_id), self.get(b_id))

    def descendants(self, album_id: int) -> list[AlbumNode]:
        """All albums below ``album_id`` in pre-order."""

        node = self.get(album_id)
        if is_leaf(node):
            return []
        return self.album_repo.get_descendants(node)

    def ancestors(self, album_id: int) -> list[AlbumNode]:
        """All albums above ``album_id``, root first."""

        return self.album_repo.get_ancestors(self.get(album_id))

    def depth(self, album_id: int) -> int:
        """Number of ancestors; roots have depth 0."""

        return self.album_repo.count_ancestors(self.get(album_id))


__all__ = [
    "IntervalIndex",
    "in_subtree",
    "is_ancestor",
    "is_descendant",
    "is_leaf",
    "is_sibling",
    "subtree_range",
]
