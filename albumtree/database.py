"""SQLite connection management and schema."""
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from . import config
from .errors import QueryError
from .models import to_utc_naive

logger = logging.getLogger(__name__)

DATABASE_PATH: Path = config.DATABASE_PATH


# =============================================================================
# SQLite3 datetime adapter (Python 3.12 compatibility)
# =============================================================================
def _adapt_datetime(dt: datetime) -> str:
    """Adapt datetime to ISO 8601 string for SQLite.

    Values are stored as naive UTC so that text order is time order.
    """
    return to_utc_naive(dt).isoformat()


def _convert_datetime(val: bytes) -> datetime:
    """Convert ISO 8601 string from SQLite to datetime."""
    return datetime.fromisoformat(val.decode())


sqlite3.register_adapter(datetime, _adapt_datetime)
sqlite3.register_converter("DATETIME", _convert_datetime)
sqlite3.register_converter("TIMESTAMP", _convert_datetime)

# Thread-local storage for database connections
_local = threading.local()


def create_connection(db_path: Path | str = None) -> sqlite3.Connection:
    """Open a new connection configured for the album tree.

    Connections run in autocommit mode; multi-statement changes go
    through :func:`transaction`.
    """
    path = db_path if db_path is not None else DATABASE_PATH
    conn = sqlite3.connect(
        path,
        timeout=config.DB_TIMEOUT,
        detect_types=sqlite3.PARSE_DECLTYPES,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    if str(path) != ":memory:":
        conn.execute("PRAGMA journal_mode = WAL")
    return conn


def get_db() -> sqlite3.Connection:
    """Get thread-local database connection"""
    conn = getattr(_local, "connection", None)
    if conn is None or getattr(_local, "path", None) != DATABASE_PATH:
        if conn is not None:
            conn.close()
        _local.connection = create_connection(DATABASE_PATH)
        _local.path = DATABASE_PATH
    return _local.connection


def close_db() -> None:
    """Close this thread's connection, if any."""
    conn = getattr(_local, "connection", None)
    if conn is not None:
        conn.close()
    _local.connection = None
    _local.path = None


# Connections currently inside a write transaction opened by transaction()
_write_locked: set[int] = set()


@contextmanager
def transaction(conn: sqlite3.Connection = None):
    """Run a block as one write transaction.

    ``BEGIN IMMEDIATE`` takes SQLite's reserved lock up front, so concurrent
    writers are serialized before either reads the bounds it will shift.
    Any exception rolls the whole block back and is re-raised. A writer that
    cannot get the lock within ``DB_TIMEOUT`` gets :class:`QueryError`.

    Inside another ``transaction()`` block the block simply joins it. Any
    other open transaction (a deferred ``BEGIN`` or a read snapshot) may
    not hold the write lock, so it is refused with :class:`QueryError`.
    """
    conn = conn if conn is not None else get_db()
    if conn.in_transaction:
        if id(conn) not in _write_locked:
            raise QueryError("Cannot write inside a transaction that does not hold the write lock")
        yield conn
        return

    try:
        conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as e:
        raise QueryError(f"Could not start write transaction: {e}") from e
    _write_locked.add(id(conn))
    try:
        yield conn
    except BaseException as exc:
        conn.rollback()
        logger.warning("Transaction rolled back: %s", exc)
        raise
    else:
        conn.commit()
    finally:
        _write_locked.discard(id(conn))


@contextmanager
def read_transaction(conn: sqlite3.Connection = None):
    """Run several reads against one committed snapshot.

    Joins any transaction already open on the connection.
    """
    conn = conn if conn is not None else get_db()
    if conn.in_transaction:
        yield conn
        return

    try:
        conn.execute("BEGIN")
    except sqlite3.Error as e:
        raise QueryError(f"Could not start read transaction: {e}") from e
    try:
        yield conn
    finally:
        conn.rollback()


def init_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes on the given connection."""
    # Albums: nested-set encoded tree
    conn.execute("""
        CREATE TABLE IF NOT EXISTS albums (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            parent_id INTEGER,
            _lft INTEGER NOT NULL,
            _rgt INTEGER NOT NULL,
            title TEXT NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (_lft < _rgt)
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS albums_lft_rgt ON albums (_lft, _rgt)")
    conn.execute("CREATE INDEX IF NOT EXISTS albums_parent_id ON albums (parent_id)")

    # Photos belong to exactly one album
    conn.execute("""
        CREATE TABLE IF NOT EXISTS photos (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            album_id INTEGER NOT NULL,
            title TEXT,
            taken_at TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY (album_id) REFERENCES albums(id) ON DELETE CASCADE
        )
    """)
    conn.execute("CREATE INDEX IF NOT EXISTS photos_album_id ON photos (album_id)")


def init_db():
    """Initialize database schema"""
    init_schema(get_db())
    logger.info("Database initialized at %s", DATABASE_PATH)
