"""Test configuration and fixtures for the album tree.

This module provides isolated test environments:
- Temporary database (SQLite) per test
- Repositories and hierarchy components bound to it
- A small sample tree for structural tests
"""
import sys
from pathlib import Path
from typing import Dict, Generator

import pytest
from fastapi.testclient import TestClient

# Ensure albumtree is importable
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture(scope="function")
def isolated_environment(tmp_path: Path) -> Dict:
    """Create completely isolated environment for a single test.

    Returns:
        Dict with paths: db_path, base_dir
    """
    return {
        "db_path": tmp_path / "test.db",
        "base_dir": tmp_path,
    }


@pytest.fixture(scope="function")
def patched_config(isolated_environment: Dict):
    """Monkey-patch configuration to use the isolated database."""
    import albumtree.config as config
    import albumtree.database as db_module

    # Store original values
    originals = {
        "DATABASE_PATH": config.DATABASE_PATH,
        "DB_DATABASE_PATH": db_module.DATABASE_PATH,
        "VERIFY_TREE_AFTER_MUTATION": config.VERIFY_TREE_AFTER_MUTATION,
        "PATH_SEPARATOR": config.PATH_SEPARATOR,
    }

    # Apply patches
    config.DATABASE_PATH = isolated_environment["db_path"]
    db_module.DATABASE_PATH = isolated_environment["db_path"]
    config.VERIFY_TREE_AFTER_MUTATION = True
    config.PATH_SEPARATOR = "/"

    yield isolated_environment

    # Restore original values
    config.DATABASE_PATH = originals["DATABASE_PATH"]
    db_module.DATABASE_PATH = originals["DB_DATABASE_PATH"]
    config.VERIFY_TREE_AFTER_MUTATION = originals["VERIFY_TREE_AFTER_MUTATION"]
    config.PATH_SEPARATOR = originals["PATH_SEPARATOR"]


@pytest.fixture(scope="function")
def fresh_database(patched_config: Dict):
    """Initialize fresh database with schema for each test."""
    from albumtree.database import init_db, close_db

    close_db()
    init_db()

    yield patched_config["db_path"]

    close_db()


@pytest.fixture(scope="function")
def db_connection(fresh_database: Path):
    """Thread-local connection to the fresh database."""
    from albumtree.database import get_db

    return get_db()


@pytest.fixture
def album_repo(db_connection):
    from albumtree.infrastructure.repositories import AlbumRepository

    return AlbumRepository(db_connection)


@pytest.fixture
def photo_repo(db_connection):
    from albumtree.infrastructure.repositories import PhotoRepository

    return PhotoRepository(db_connection)


@pytest.fixture
def mutator(album_repo):
    from albumtree.hierarchy import TreeMutator

    return TreeMutator(album_repo, verify=True)


@pytest.fixture
def index(album_repo):
    from albumtree.hierarchy import IntervalIndex

    return IntervalIndex(album_repo)


@pytest.fixture
def sample_tree(mutator) -> Dict[str, int]:
    """Build a small forest and return album ids by title.

        Trip  [1, 10]
          Paris [2, 7]
            Day1 [3, 4]
            Day2 [5, 6]
          Rome  [8, 9]
        Work  [11, 14]
          Q1    [12, 13]
    """
    ids = {}
    ids["Trip"] = mutator.insert(None, "Trip")
    ids["Paris"] = mutator.insert(ids["Trip"], "Paris")
    ids["Day1"] = mutator.insert(ids["Paris"], "Day1")
    ids["Day2"] = mutator.insert(ids["Paris"], "Day2")
    ids["Rome"] = mutator.insert(ids["Trip"], "Rome")
    ids["Work"] = mutator.insert(None, "Work")
    ids["Q1"] = mutator.insert(ids["Work"], "Q1")
    return ids


@pytest.fixture
def bounds_by_title(album_repo):
    """Callable returning ``{title: (left, right)}`` for the current tree."""

    def snapshot() -> Dict[str, tuple]:
        return {node.title: (node.left, node.right) for node in album_repo.list_all()}

    return snapshot


@pytest.fixture(scope="function")
def client(fresh_database: Path) -> Generator[TestClient, None, None]:
    """Create test client with fresh isolated environment.

    Usage:
        def test_something(client):
            response = client.get("/api/albums")
            assert response.status_code == 200
    """
    from albumtree.main import app

    with TestClient(app) as test_client:
        yield test_client
