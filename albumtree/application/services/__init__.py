"""Application services - business logic layer."""

from .album_service import AlbumService

__all__ = [
    "AlbumService",
]
