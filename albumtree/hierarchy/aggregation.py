"""Aggregation view: subtree statistics without recursive descent.

An item counts towards an album when its owning album's left bound falls
inside the album's subtree range. The view never writes anything.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from ..infrastructure.repositories import AlbumRepository, PhotoRepository
from ..models import AlbumNode, PhotoItem, to_utc_naive
from .interval_index import in_subtree


def min_max_under(
    node: AlbumNode,
    items: Iterable[PhotoItem],
    positions: Mapping[int, int],
) -> tuple[datetime | None, datetime | None]:
    """Earliest and latest ``taken_at`` of items under ``node``.

    Args:
        node: Album whose subtree is aggregated (the album itself included)
        items: Flat item collection
        positions: Left bound of each owning album, keyed by album id

    Naive and aware timestamps may be mixed; both bounds come back as
    naive UTC.

    Returns:
        ``(min, max)``, or ``(None, None)`` when no dated item qualifies
    """
    timestamps = [
        to_utc_naive(item.taken_at)
        for item in items
        if item.taken_at is not None
        and item.album_id in positions
        and in_subtree(positions[item.album_id], node)
    ]
    if not timestamps:
        return None, None
    return min(timestamps), max(timestamps)


class AggregationView:
    """Subtree-scoped photo statistics."""

    def __init__(self, album_repository: AlbumRepository, photo_repository: PhotoRepository = None):
        self.album_repo = album_repository
        self.photo_repo = photo_repository

    def min_max_under(
        self, node: AlbumNode, items: Iterable[PhotoItem]
    ) -> tuple[datetime | None, datetime | None]:
        """Aggregate a caller-supplied item collection over node's subtree."""
        positions = self.album_repo.get_subtree_positions(node)
        return min_max_under(node, items, positions)

    def min_max_taken_at(self, node: AlbumNode) -> tuple[datetime | None, datetime | None]:
        """Same aggregate, computed by the database over stored photos."""
        if self.photo_repo is None:
            return None, None
        return self.photo_repo.min_max_taken_at(node)


__all__ = ["AggregationView", "min_max_under"]
