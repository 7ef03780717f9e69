"""Album repository - nested-set storage for the album tree.

Albums form a forest encoded as intervals: every album row carries
``_lft`` / ``_rgt`` bounds and a ``parent_id`` pointer. Subtree and
ancestor queries are single range predicates over the bounds.

Only the tree mutator calls the bound-writing methods (``insert``,
``shift_bounds``, ``park_range``, ``unpark``, ``delete_range``,
``write_bounds``). They never commit: the caller owns the transaction.
"""
from typing import Optional

from ...models import AlbumNode
from .base import Repository, AsyncRepository

_COLUMNS = "id, parent_id, _lft, _rgt, title"


class AlbumRepository(Repository):
    """Repository for album tree operations.

    Examples:
        >>> repo = AlbumRepository(db)
        >>> node = repo.get_by_id(1)
        >>> repo.get_descendants(node)  # everything strictly inside node
    """

    # === Reads ===

    def get_by_id(self, album_id: int) -> Optional[AlbumNode]:
        """Get album by ID.

        Args:
            album_id: Album ID

        Returns:
            AlbumNode or None
        """
        row = self._fetchone(
            f"SELECT {_COLUMNS} FROM albums WHERE id = ?",
            (album_id,)
        )
        return AlbumNode.from_row(row) if row else None

    def exists(self, album_id: int) -> bool:
        """Check if album exists."""
        return self._fetchone("SELECT 1 FROM albums WHERE id = ?", (album_id,)) is not None

    def count(self) -> int:
        row = self._fetchone("SELECT COUNT(*) AS count FROM albums")
        return row["count"]

    def list_all(self) -> list[AlbumNode]:
        """Get every album in tree (pre-)order."""
        rows = self._fetchall(f"SELECT {_COLUMNS} FROM albums ORDER BY _lft")
        return [AlbumNode.from_row(row) for row in rows]

    def get_roots(self) -> list[AlbumNode]:
        rows = self._fetchall(
            f"SELECT {_COLUMNS} FROM albums WHERE parent_id IS NULL ORDER BY _lft"
        )
        return [AlbumNode.from_row(row) for row in rows]

    def get_children(self, album_id: int) -> list[AlbumNode]:
        """Get direct child albums, left to right."""
        rows = self._fetchall(
            f"SELECT {_COLUMNS} FROM albums WHERE parent_id = ? ORDER BY _lft",
            (album_id,)
        )
        return [AlbumNode.from_row(row) for row in rows]

    def get_descendants(self, node: AlbumNode) -> list[AlbumNode]:
        """Get all albums strictly inside node's interval."""
        rows = self._fetchall(
            f"""SELECT {_COLUMNS} FROM albums
                WHERE _lft > ? AND _rgt < ?
                ORDER BY _lft""",
            (node.left, node.right)
        )
        return [AlbumNode.from_row(row) for row in rows]

    def get_ancestors(self, node: AlbumNode) -> list[AlbumNode]:
        """Get all albums whose interval strictly contains node, root first."""
        rows = self._fetchall(
            f"""SELECT {_COLUMNS} FROM albums
                WHERE _lft < ? AND _rgt > ?
                ORDER BY _lft""",
            (node.left, node.right)
        )
        return [AlbumNode.from_row(row) for row in rows]

    def count_ancestors(self, node: AlbumNode) -> int:
        row = self._fetchone(
            "SELECT COUNT(*) AS count FROM albums WHERE _lft < ? AND _rgt > ?",
            (node.left, node.right)
        )
        return row["count"]

    def get_subtree_positions(self, node: AlbumNode) -> dict[int, int]:
        """Map album id to left bound for node and all its descendants."""
        rows = self._fetchall(
            "SELECT id, _lft FROM albums WHERE _lft >= ? AND _rgt <= ?",
            (node.left, node.right)
        )
        return {row["id"]: row["_lft"] for row in rows}

    def get_parent_links(self) -> list[tuple[int, int | None, int]]:
        """Get ``(id, parent_id, _lft)`` for every album, ordered by id."""
        rows = self._fetchall("SELECT id, parent_id, _lft FROM albums ORDER BY id")
        return [(row["id"], row["parent_id"], row["_lft"]) for row in rows]

    def max_right(self) -> int:
        """Largest right bound in use, 0 for an empty tree.

        Parked rows (negative bounds) are not in use.
        """
        row = self._fetchone("SELECT COALESCE(MAX(_rgt), 0) AS max_rgt FROM albums WHERE _rgt > 0")
        return row["max_rgt"]

    # === Writes (tree mutator only) ===

    def insert(self, parent_id: int | None, title: str, left: int, right: int) -> int:
        """Insert an album row with pre-computed bounds.

        Returns:
            New album ID
        """
        cursor = self._execute(
            """INSERT INTO albums (parent_id, _lft, _rgt, title)
               VALUES (?, ?, ?, ?)""",
            (parent_id, left, right, title.strip())
        )
        return cursor.lastrowid

    def update_title(self, album_id: int, title: str) -> bool:
        """Rename an album. Bounds are untouched.

        Returns:
            True if album existed and was updated
        """
        cursor = self._execute(
            "UPDATE albums SET title = ? WHERE id = ?",
            (title.strip(), album_id)
        )
        return cursor.rowcount > 0

    def set_parent(self, album_id: int, parent_id: int | None) -> None:
        self._execute(
            "UPDATE albums SET parent_id = ? WHERE id = ?",
            (parent_id, album_id)
        )

    def shift_bounds(self, threshold: int, delta: int) -> int:
        """Add ``delta`` to every bound that is ``>= threshold``.

        Both bounds are updated in one statement so that no row ever
        violates ``_lft < _rgt`` in between.

        Returns:
            Number of rows touched
        """
        cursor = self._execute(
            """UPDATE albums SET
                   _lft = CASE WHEN _lft >= ? THEN _lft + ? ELSE _lft END,
                   _rgt = CASE WHEN _rgt >= ? THEN _rgt + ? ELSE _rgt END
               WHERE _rgt >= ?""",
            (threshold, delta, threshold, delta, threshold)
        )
        return cursor.rowcount

    def park_range(self, left: int, right: int) -> int:
        """Move the block ``[left, right]`` out of the positive position space.

        Parked bounds are negated and swapped (``_lft = -_rgt``,
        ``_rgt = -_lft``) so ``_lft < _rgt`` keeps holding.

        Returns:
            Number of rows parked
        """
        cursor = self._execute(
            """UPDATE albums SET _lft = -_rgt, _rgt = -_lft
               WHERE _lft >= ? AND _rgt <= ?""",
            (left, right)
        )
        return cursor.rowcount

    def unpark(self, offset: int) -> int:
        """Restore parked rows, adding ``offset`` to their original bounds."""
        cursor = self._execute(
            """UPDATE albums SET _lft = -_rgt + ?, _rgt = -_lft + ?
               WHERE _lft < 0""",
            (offset, offset)
        )
        return cursor.rowcount

    def delete_range(self, left: int, right: int) -> list[int]:
        """Delete every album inside ``[left, right]``.

        Returns:
            IDs of deleted albums
        """
        rows = self._fetchall(
            "SELECT id FROM albums WHERE _lft >= ? AND _rgt <= ? ORDER BY _lft",
            (left, right)
        )
        self._execute(
            "DELETE FROM albums WHERE _lft >= ? AND _rgt <= ?",
            (left, right)
        )
        return [row["id"] for row in rows]

    def write_bounds(self, bounds: list[tuple[int, int, int]]) -> None:
        """Overwrite bounds from ``(left, right, album_id)`` tuples."""
        self._execute_many(
            "UPDATE albums SET _lft = ?, _rgt = ? WHERE id = ?",
            bounds
        )


# =============================================================================
# ASYNC VERSION
# =============================================================================

class AsyncAlbumRepository(AsyncRepository):
    """Async read-only repository for album tree queries."""

    async def get_by_id(self, album_id: int) -> AlbumNode | None:
        """Get album by ID.

        Args:
            album_id: Album ID

        Returns:
            AlbumNode or None
        """
        row = await self._fetchone(
            f"SELECT {_COLUMNS} FROM albums WHERE id = ?",
            (album_id,)
        )
        return AlbumNode.from_row(row) if row else None

    async def list_all(self) -> list[AlbumNode]:
        rows = await self._fetchall(f"SELECT {_COLUMNS} FROM albums ORDER BY _lft")
        return [AlbumNode.from_row(row) for row in rows]

    async def get_descendants(self, node: AlbumNode) -> list[AlbumNode]:
        """Get all albums strictly inside node's interval."""
        rows = await self._fetchall(
            f"""SELECT {_COLUMNS} FROM albums
                WHERE _lft > ? AND _rgt < ?
                ORDER BY _lft""",
            (node.left, node.right)
        )
        return [AlbumNode.from_row(row) for row in rows]

    async def get_ancestors(self, node: AlbumNode) -> list[AlbumNode]:
        """Get all albums containing node, root first."""
        rows = await self._fetchall(
            f"""SELECT {_COLUMNS} FROM albums
                WHERE _lft < ? AND _rgt > ?
                ORDER BY _lft""",
            (node.left, node.right)
        )
        return [AlbumNode.from_row(row) for row in rows]

    async def is_descendant_of(self, album_id: int, ancestor_id: int) -> bool:
        """Check if album is a strict descendant of ancestor.

        One interval comparison, no parent walk.
        """
        row = await self._fetchone(
            """SELECT 1 FROM albums a, albums anc
               WHERE a.id = ? AND anc.id = ?
                 AND anc._lft < a._lft AND a._rgt < anc._rgt""",
            (album_id, ancestor_id)
        )
        return row is not None
