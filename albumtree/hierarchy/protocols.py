"""Small interfaces the album service is composed from."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol

from ..models import AlbumNode, PhotoItem


class HierarchyNode(Protocol):
    """Structural relations between albums, answered from interval bounds."""

    def get(self, album_id: int) -> AlbumNode: ...
    def is_descendant_of(self, candidate_id: int, ancestor_id: int) -> bool: ...
    def is_ancestor_of(self, candidate_id: int, descendant_id: int) -> bool: ...
    def is_sibling_of(self, a_id: int, b_id: int) -> bool: ...
    def descendants(self, album_id: int) -> list[AlbumNode]: ...
    def ancestors(self, album_id: int) -> list[AlbumNode]: ...


class Aggregatable(Protocol):
    """Read-only statistics over everything below an album."""

    def min_max_under(
        self, node: AlbumNode, items: Iterable[PhotoItem]
    ) -> tuple[datetime | None, datetime | None]: ...
    def min_max_taken_at(self, node: AlbumNode) -> tuple[datetime | None, datetime | None]: ...


class Pathable(Protocol):
    """Human-readable location of an album."""

    def full_path(self, node: AlbumNode) -> str: ...
    def breadcrumbs(self, node: AlbumNode) -> list[dict]: ...


__all__ = ["HierarchyNode", "Aggregatable", "Pathable"]
