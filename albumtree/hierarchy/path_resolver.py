"""Path resolver: titles from the root down to an album.

Titles are collected by following ``parent_id`` links, so this keeps
working on rows whose intervals have not been (re)built yet.
"""

from __future__ import annotations

import logging

from .. import config
from ..errors import BrokenChainError
from ..infrastructure.repositories import AlbumRepository
from ..models import AlbumNode

logger = logging.getLogger(__name__)


class PathResolver:
    """Resolve the chain of albums above a node via parent pointers."""

    def __init__(self, album_repository: AlbumRepository, separator: str = None):
        self.album_repo = album_repository
        self.separator = separator if separator is not None else config.PATH_SEPARATOR

    def chain(self, node: AlbumNode) -> list[AlbumNode]:
        """Albums from the root down to ``node`` (inclusive).

        Raises:
            BrokenChainError: On a dangling parent pointer or a pointer cycle
        """
        chain = [node]
        seen = {node.id}
        current = node
        while current.parent_id is not None:
            parent = self.album_repo.get_by_id(current.parent_id)
            if parent is None:
                logger.critical(
                    "Broken parent chain: album %s references missing parent %s",
                    current.id, current.parent_id
                )
                raise BrokenChainError(current.id, current.parent_id)
            if parent.id in seen:
                logger.critical("Broken parent chain: cycle through album %s", parent.id)
                raise BrokenChainError(
                    current.id, parent.id,
                    f"Parent pointers of album {node.id} loop back to album {parent.id}"
                )
            seen.add(parent.id)
            chain.append(parent)
            current = parent
        chain.reverse()
        return chain

    def full_path(self, node: AlbumNode) -> str:
        """Titles joined root-first, e.g. ``"Trip/Paris/Day1"``."""
        return self.separator.join(album.title for album in self.chain(node))

    def breadcrumbs(self, node: AlbumNode) -> list[dict]:
        """``{id, title}`` dicts from the root down to ``node``."""
        return [{"id": album.id, "title": album.title} for album in self.chain(node)]


__all__ = ["PathResolver"]
