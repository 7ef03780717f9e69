# Repository Pattern Implementation
"""
Repositories abstract database operations.
Each entity has its own repository.

Usage:
    repo = AlbumRepository(get_db())
    node = repo.get_by_id(album_id)
"""
from .base import Repository, AsyncRepository, ConnectionProtocol
from .album_repository import AlbumRepository, AsyncAlbumRepository
from .photo_repository import PhotoRepository, AsyncPhotoRepository

__all__ = [
    "Repository",
    "AsyncRepository",
    "ConnectionProtocol",
    "AlbumRepository",
    "AsyncAlbumRepository",
    "PhotoRepository",
    "AsyncPhotoRepository",
]
