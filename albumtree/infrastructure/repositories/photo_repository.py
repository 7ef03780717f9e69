"""Photo repository - the item side of the album tree.

Photos belong to exactly one album. The hierarchy core only reads them
(as :class:`~albumtree.models.PhotoItem` tuples); creating photos is an
application concern.
"""
from datetime import datetime
from typing import Optional

from ...models import AlbumNode, PhotoItem
from .base import Repository, AsyncRepository


def _as_datetime(value) -> datetime | None:
    """Aggregate columns come back as text; normalize to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


class PhotoRepository(Repository):
    """Repository for photo entity operations."""

    def create(self, album_id: int, title: str = None, taken_at: datetime = None) -> int:
        """Attach a new photo to an album.

        Args:
            album_id: Owning album ID
            title: Optional photo title
            taken_at: Capture time, if known; stored as naive UTC

        Returns:
            New photo ID
        """
        cursor = self._execute(
            "INSERT INTO photos (album_id, title, taken_at) VALUES (?, ?, ?)",
            (album_id, title, taken_at)
        )
        return cursor.lastrowid

    def get_by_id(self, photo_id: int) -> Optional[dict]:
        return self._row_to_dict(self._fetchone(
            "SELECT * FROM photos WHERE id = ?",
            (photo_id,)
        ))

    def get_by_album(self, album_id: int) -> list[dict]:
        """Get photos directly in album, oldest first."""
        rows = self._fetchall(
            "SELECT * FROM photos WHERE album_id = ? ORDER BY taken_at, id",
            (album_id,)
        )
        return [dict(row) for row in rows]

    def list_items(self) -> list[PhotoItem]:
        """Get every photo as an aggregation item."""
        rows = self._fetchall("SELECT id, album_id, taken_at FROM photos ORDER BY id")
        return [
            PhotoItem(item_id=row["id"], album_id=row["album_id"], taken_at=_as_datetime(row["taken_at"]))
            for row in rows
        ]

    def count_in_subtree(self, node: AlbumNode) -> int:
        """Count photos in node and all descendant albums."""
        row = self._fetchone(
            """SELECT COUNT(*) AS count FROM photos p
               JOIN albums a ON a.id = p.album_id
               WHERE a._lft >= ? AND a._rgt <= ?""",
            (node.left, node.right)
        )
        return row["count"]

    def min_max_taken_at(self, node: AlbumNode) -> tuple[datetime | None, datetime | None]:
        """Earliest and latest ``taken_at`` in node's subtree.

        Photos without ``taken_at`` are ignored.

        Returns:
            ``(min, max)``, or ``(None, None)`` when nothing qualifies
        """
        row = self._fetchone(
            """SELECT MIN(p.taken_at) AS min_taken_at, MAX(p.taken_at) AS max_taken_at
               FROM photos p
               JOIN albums a ON a.id = p.album_id
               WHERE a._lft >= ? AND a._rgt <= ? AND p.taken_at IS NOT NULL""",
            (node.left, node.right)
        )
        return _as_datetime(row["min_taken_at"]), _as_datetime(row["max_taken_at"])


# =============================================================================
# ASYNC VERSION
# =============================================================================

class AsyncPhotoRepository(AsyncRepository):
    """Async read-only repository for photo aggregates."""

    async def get_by_album(self, album_id: int) -> list[dict]:
        return await self._fetchall(
            "SELECT * FROM photos WHERE album_id = ? ORDER BY taken_at, id",
            (album_id,)
        )

    async def min_max_taken_at(self, node: AlbumNode) -> tuple[datetime | None, datetime | None]:
        """Earliest and latest ``taken_at`` in node's subtree."""
        row = await self._fetchone(
            """SELECT MIN(p.taken_at) AS min_taken_at, MAX(p.taken_at) AS max_taken_at
               FROM photos p
               JOIN albums a ON a.id = p.album_id
               WHERE a._lft >= ? AND a._rgt <= ? AND p.taken_at IS NOT NULL""",
            (node.left, node.right)
        )
        return _as_datetime(row["min_taken_at"]), _as_datetime(row["max_taken_at"])
