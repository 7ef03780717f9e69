"""Tree mutator: the only writer of nested-set bounds.

Every public operation runs as one ``BEGIN IMMEDIATE`` transaction, so a
renumbering is either fully committed or not at all. Positions start at 1
and stay compact: ``n`` albums use exactly the bounds ``1 .. 2n``.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from .. import config
from ..database import transaction
from ..errors import BrokenChainError, ConsistencyViolationError, CycleError, NotFoundError
from ..infrastructure.repositories import AlbumRepository
from ..models import AlbumNode
from .interval_index import is_descendant
from .invariants import check_invariants

logger = logging.getLogger(__name__)


class TreeMutator:
    """Insert, move and delete albums while keeping the interval index valid.

    Args:
        album_repository: Repository whose connection the transactions run on
        verify: Re-check all invariants before committing. ``None`` follows
            ``config.VERIFY_TREE_AFTER_MUTATION``.
    """

    def __init__(self, album_repository: AlbumRepository, verify: bool | None = None):
        self.album_repo = album_repository
        self._verify_override = verify

    @property
    def verify_after_mutation(self) -> bool:
        if self._verify_override is None:
            return config.VERIFY_TREE_AFTER_MUTATION
        return self._verify_override

    def insert(self, parent_id: int | None, title: str) -> int:
        """Create an album as the rightmost child of ``parent_id``.

        ``parent_id=None`` appends a new root after all existing roots.

        Returns:
            New album ID

        Raises:
            NotFoundError: If the parent does not exist
        """
        with transaction(self.album_repo.connection):
            if parent_id is None:
                position = self.album_repo.max_right() + 1
            else:
                parent = self._get(parent_id)
                position = parent.right
                shifted = self.album_repo.shift_bounds(position, 2)
                logger.debug("Opened gap of 2 at %d (%d albums renumbered)", position, shifted)
            album_id = self.album_repo.insert(parent_id, title, position, position + 1)
            self._check()

        logger.info("Inserted album %d under %s at [%d, %d]", album_id, parent_id, position, position + 1)
        return album_id

    def move_subtree(self, album_id: int, new_parent_id: int | None) -> None:
        """Re-parent an album together with all of its descendants.

        The subtree becomes the rightmost child of ``new_parent_id``, or the
        rightmost root when ``new_parent_id`` is ``None``.

        Raises:
            NotFoundError: If either album does not exist
            CycleError: If the new parent is the album itself or lies below it
        """
        with transaction(self.album_repo.connection):
            node = self._get(album_id)
            if new_parent_id is not None:
                new_parent = self._get(new_parent_id)
                if new_parent.id == node.id or is_descendant(new_parent, node):
                    raise CycleError(
                        f"Cannot move album {album_id} into its own subtree (album {new_parent_id})"
                    )

            width = node.width
            # Take the block out of the position space, then close its gap.
            self.album_repo.park_range(node.left, node.right)
            self.album_repo.shift_bounds(node.right + 1, -width)

            if new_parent_id is None:
                position = self.album_repo.max_right() + 1
            else:
                position = self._get(new_parent_id).right
                self.album_repo.shift_bounds(position, width)

            self.album_repo.unpark(position - node.left)
            self.album_repo.set_parent(node.id, new_parent_id)
            self._check()

        logger.info(
            "Moved album %d (width %d) under %s, now starting at %d",
            album_id, width, new_parent_id, position
        )

    def delete_subtree(self, album_id: int) -> list[int]:
        """Delete an album and all of its descendants.

        Photos of the removed albums go with them (``ON DELETE CASCADE``).

        Returns:
            IDs of removed albums in pre-order

        Raises:
            NotFoundError: If the album does not exist
        """
        with transaction(self.album_repo.connection):
            node = self._get(album_id)
            removed = self.album_repo.delete_range(node.left, node.right)
            shifted = self.album_repo.shift_bounds(node.right + 1, -node.width)
            logger.debug("Closed gap of %d at %d (%d albums renumbered)", node.width, node.right + 1, shifted)
            self._check()

        logger.info("Deleted album %d and %d descendants", album_id, len(removed) - 1)
        return removed

    def rebuild(self) -> int:
        """Recompute every interval from ``parent_id`` pointers.

        Siblings keep their current left-to-right order (ties by id).

        Returns:
            Number of albums renumbered

        Raises:
            BrokenChainError: If a parent pointer references a missing album
            CycleError: If the parent pointers contain a cycle
        """
        with transaction(self.album_repo.connection):
            links = self.album_repo.get_parent_links()
            known = {link[0] for link in links}
            children: dict[int | None, list[tuple[int, int]]] = defaultdict(list)
            for album_id, parent_id, left in links:
                if parent_id is not None and parent_id not in known:
                    logger.critical("Album %d references missing parent %d", album_id, parent_id)
                    raise BrokenChainError(album_id, parent_id)
                children[parent_id].append((left, album_id))
            for siblings in children.values():
                siblings.sort()

            bounds: list[tuple[int, int, int]] = []
            position = 1
            for _, root_id in children[None]:
                position = self._number_subtree(root_id, position, children, bounds)

            if len(bounds) != len(links):
                unreachable = sorted(known - {album_id for _, _, album_id in bounds})
                raise CycleError(f"Parent pointers form a cycle through albums {unreachable}")

            self.album_repo.write_bounds(bounds)
            self._check()

        logger.info("Rebuilt intervals for %d albums", len(bounds))
        return len(bounds)

    def verify(self) -> None:
        """Check every invariant of the stored tree.

        Raises:
            ConsistencyViolationError: Listing each violation found
        """
        violations = check_invariants(self.album_repo.list_all())
        if violations:
            logger.error("Album tree failed verification: %s", violations)
            raise ConsistencyViolationError(violations)

    # Private helper methods

    def _get(self, album_id: int) -> AlbumNode:
        node = self.album_repo.get_by_id(album_id)
        if node is None:
            raise NotFoundError(album_id)
        return node

    def _check(self) -> None:
        if self.verify_after_mutation:
            self.verify()

    @staticmethod
    def _number_subtree(root_id, position, children, bounds) -> int:
        """Assign bounds depth-first below ``root_id``; returns the next free position."""
        lefts = {root_id: position}
        position += 1
        stack = [(root_id, iter(children.get(root_id, ())))]
        while stack:
            album_id, pending = stack[-1]
            child = next(pending, None)
            if child is None:
                stack.pop()
                bounds.append((lefts[album_id], position, album_id))
            else:
                child_id = child[1]
                lefts[child_id] = position
                stack.append((child_id, iter(children.get(child_id, ()))))
            position += 1
        return position


__all__ = ["TreeMutator"]
