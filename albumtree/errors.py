"""Exception hierarchy for the album hierarchy manager."""


class AlbumTreeError(Exception):
    """Base class for all errors raised by albumtree."""


class NotFoundError(AlbumTreeError):
    """Raised when a referenced album id does not exist."""

    def __init__(self, album_id):
        super().__init__(f"Album {album_id} not found")
        self.album_id = album_id


class CycleError(AlbumTreeError):
    """Raised when an operation would make an album its own ancestor."""


class BrokenChainError(AlbumTreeError):
    """Raised when a parent pointer references a missing album.

    This always indicates corrupted data and is never repaired automatically.
    """

    def __init__(self, album_id, parent_id, message: str = None):
        if message is None:
            message = f"Album {album_id} references missing parent {parent_id}"
        super().__init__(message)
        self.album_id = album_id
        self.parent_id = parent_id


class ConsistencyViolationError(AlbumTreeError):
    """Raised when the nested-set invariants fail after a mutation."""

    def __init__(self, violations: list[str]):
        summary = "; ".join(violations[:5])
        if len(violations) > 5:
            summary += f" (+{len(violations) - 5} more)"
        super().__init__(f"Album tree is inconsistent: {summary}")
        self.violations = violations


class QueryError(AlbumTreeError):
    """Wraps any database error raised while executing a repository query.

    The underlying ``sqlite3`` exception is kept as ``__cause__``.
    """
