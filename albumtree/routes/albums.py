"""Album tree routes."""
from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel, field_validator

from ..database import get_db
from ..infrastructure.repositories import AlbumRepository, PhotoRepository
from ..application.services import AlbumService

router = APIRouter(prefix="/api/albums", tags=["albums"])


# Pydantic models for request validation
class AlbumUpdate(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be blank")
        return value.strip()


class AlbumCreate(AlbumUpdate):
    parent_id: int | None = None


class AlbumMove(BaseModel):
    parent_id: int | None = None  # None moves the album to root


class PhotoCreate(BaseModel):
    title: str | None = None
    taken_at: datetime | None = None


# Service factory
def get_album_service() -> AlbumService:
    """Create AlbumService with repositories."""
    db = get_db()
    return AlbumService(
        album_repository=AlbumRepository(db),
        photo_repository=PhotoRepository(db)
    )


# === Tree ===

@router.get("")
def get_albums():
    """Get the whole album forest in display order."""
    service = get_album_service()
    return service.get_tree()


@router.post("")
def create_new_album(data: AlbumCreate):
    """Create a new album."""
    service = get_album_service()
    album = service.create_album(data.title, parent_id=data.parent_id)
    return {"status": "ok", "album": album}


@router.post("/rebuild")
def rebuild_albums():
    """Recompute album intervals from parent links."""
    service = get_album_service()
    count = service.rebuild_tree()
    return {"status": "ok", "renumbered": count}


# === Single album ===

@router.get("/{album_id}")
def get_album(album_id: int):
    """Get album with path and photo date range."""
    service = get_album_service()
    return service.get_album(album_id)


@router.put("/{album_id}")
def update_album(album_id: int, data: AlbumUpdate):
    """Rename album."""
    service = get_album_service()
    album = service.rename_album(album_id, data.title)
    return {"status": "ok", "album": album}


@router.delete("/{album_id}")
def delete_album(album_id: int):
    """Delete album and everything below it."""
    service = get_album_service()
    deleted = service.delete_album(album_id)
    return {"status": "ok", "deleted": deleted}


@router.get("/{album_id}/path")
def get_album_path(album_id: int):
    """Get album path and breadcrumbs."""
    service = get_album_service()
    return service.get_path(album_id)


@router.get("/{album_id}/descendants")
def get_album_descendants(album_id: int):
    """Get all albums below album."""
    service = get_album_service()
    return service.get_descendants(album_id)


@router.put("/{album_id}/move")
def move_album(album_id: int, data: AlbumMove):
    """Move album under another album, or to root."""
    service = get_album_service()
    album = service.move_album(album_id, data.parent_id)
    return {"status": "ok", "album": album}


@router.post("/{album_id}/photos")
def add_album_photo(album_id: int, data: PhotoCreate):
    """Attach a photo to album."""
    service = get_album_service()
    photo = service.add_photo(album_id, title=data.title, taken_at=data.taken_at)
    return {"status": "ok", "photo": photo}
