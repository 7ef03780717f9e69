"""Value types shared by the repositories and the hierarchy components."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping


@dataclass(slots=True, frozen=True)
class AlbumNode:
    """One album of the tree together with its nested-set bounds.

    Nodes never reference each other directly; ``parent_id`` is resolved
    through a repository when needed.
    """

    id: int
    parent_id: int | None
    left: int
    right: int
    title: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AlbumNode":
        return cls(
            id=row["id"],
            parent_id=row["parent_id"],
            left=row["_lft"],
            right=row["_rgt"],
            title=row["title"],
        )

    @property
    def width(self) -> int:
        """Number of positions occupied by this node and its descendants."""

        return self.right - self.left + 1

    def is_root(self) -> bool:
        return self.parent_id is None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "parent_id": self.parent_id,
            "left": self.left,
            "right": self.right,
            "title": self.title,
        }


@dataclass(slots=True, frozen=True)
class PhotoItem:
    """A photo as seen by the aggregation view."""

    item_id: int
    album_id: int
    taken_at: datetime | None


def to_utc_naive(value: datetime | None) -> datetime | None:
    """Normalize a capture time to naive UTC.

    Aware values are converted and lose their offset; naive values are
    taken to be UTC already.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


__all__ = ["AlbumNode", "PhotoItem", "to_utc_naive"]
