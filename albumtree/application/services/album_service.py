"""Album service - album tree operations for the HTTP layer.

This service composes the hierarchy components by delegation:

- ``IntervalIndex`` for structural queries
- ``TreeMutator`` for every change to the tree shape
- ``AggregationView`` for subtree photo statistics
- ``PathResolver`` for human-readable locations

Errors from ``albumtree.errors`` propagate unchanged; the routes map them
to HTTP responses.
"""
from datetime import datetime
from typing import Optional, List

from ...database import read_transaction
from ...errors import NotFoundError
from ...hierarchy import (
    Aggregatable,
    AggregationView,
    HierarchyNode,
    IntervalIndex,
    Pathable,
    PathResolver,
    TreeMutator,
)
from ...infrastructure.repositories import AlbumRepository, PhotoRepository
from ...models import AlbumNode


class AlbumService:
    """Service for album tree management.

    Responsibilities:
    - Album creation, renaming, moving and deletion
    - Tree listing with depths
    - Album detail with path and photo date range
    - Attaching photos to albums
    """

    def __init__(
        self,
        album_repository: AlbumRepository,
        photo_repository: Optional[PhotoRepository] = None,
        index: Optional[HierarchyNode] = None,
        mutator: Optional[TreeMutator] = None,
        aggregation: Optional[Aggregatable] = None,
        paths: Optional[Pathable] = None
    ):
        self.album_repo = album_repository
        self.photo_repo = photo_repository
        self.index = index or IntervalIndex(album_repository)
        self.mutator = mutator or TreeMutator(album_repository)
        self.aggregation = aggregation or AggregationView(album_repository, photo_repository)
        self.paths = paths or PathResolver(album_repository)

    def create_album(self, title: str, parent_id: Optional[int] = None) -> dict:
        """Create a new album.

        Args:
            title: Album title
            parent_id: Optional parent album ID (None for a new root)

        Returns:
            Created album dict

        Raises:
            NotFoundError: If the parent does not exist
        """
        album_id = self.mutator.insert(parent_id, title)
        return self.index.get(album_id).to_dict()

    def get_album(self, album_id: int) -> dict:
        """Get album with its path, depth and photo date range.

        All values are read from one snapshot.

        Raises:
            NotFoundError: If the album does not exist
            BrokenChainError: If the parent chain is corrupted
        """
        with read_transaction(self.album_repo.connection):
            node = self.index.get(album_id)
            min_taken_at, max_taken_at = self.aggregation.min_max_taken_at(node)
            album = node.to_dict()
            album.update({
                "path": self.paths.full_path(node),
                "depth": self.album_repo.count_ancestors(node),
                "min_taken_at": min_taken_at,
                "max_taken_at": max_taken_at,
                "children": [child.id for child in self.album_repo.get_children(album_id)],
            })
        return album

    def get_tree(self) -> List[dict]:
        """Get every album in display order, each with its depth."""
        return self._with_depth(self.album_repo.list_all())

    def get_descendants(self, album_id: int) -> List[dict]:
        """Get all albums below album_id in display order."""
        return [node.to_dict() for node in self.index.descendants(album_id)]

    def get_path(self, album_id: int) -> dict:
        """Get full path string and breadcrumbs for an album."""
        with read_transaction(self.album_repo.connection):
            node = self.index.get(album_id)
            return {
                "path": self.paths.full_path(node),
                "breadcrumbs": self.paths.breadcrumbs(node),
            }

    def rename_album(self, album_id: int, title: str) -> dict:
        """Change album title. Tree shape is untouched."""
        if not self.album_repo.update_title(album_id, title):
            raise NotFoundError(album_id)
        return self.index.get(album_id).to_dict()

    def move_album(self, album_id: int, new_parent_id: Optional[int]) -> dict:
        """Move album (with its subtree) under a new parent, or to root.

        Raises:
            NotFoundError: If either album does not exist
            CycleError: If the target lies inside the moved subtree
        """
        self.mutator.move_subtree(album_id, new_parent_id)
        return self.index.get(album_id).to_dict()

    def delete_album(self, album_id: int) -> List[int]:
        """Delete album, its sub-albums and their photos.

        Returns:
            IDs of deleted albums
        """
        return self.mutator.delete_subtree(album_id)

    def add_photo(
        self,
        album_id: int,
        title: Optional[str] = None,
        taken_at: Optional[datetime] = None
    ) -> dict:
        """Attach a photo to an album.

        Raises:
            NotFoundError: If the album does not exist
            RuntimeError: If no photo repository is configured
        """
        if self.photo_repo is None:
            raise RuntimeError("Photo repository not configured")
        self.index.get(album_id)
        photo_id = self.photo_repo.create(album_id, title=title, taken_at=taken_at)
        return self.photo_repo.get_by_id(photo_id)

    def rebuild_tree(self) -> int:
        """Recompute all intervals from parent pointers."""
        return self.mutator.rebuild()

    def is_descendant(self, album_id: int, ancestor_id: int) -> bool:
        return self.index.is_descendant_of(album_id, ancestor_id)

    @staticmethod
    def _with_depth(nodes: List[AlbumNode]) -> List[dict]:
        """Annotate pre-ordered nodes with depth from the enclosing-interval stack."""
        result = []
        open_rights: List[int] = []
        for node in nodes:
            while open_rights and open_rights[-1] < node.left:
                open_rights.pop()
            album = node.to_dict()
            album["depth"] = len(open_rights)
            result.append(album)
            open_rights.append(node.right)
        return result
