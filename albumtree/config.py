"""Application configuration and constants."""
import os
from pathlib import Path

# Directory paths
BASE_DIR = Path(__file__).resolve().parent.parent

# Database configuration
# Set via environment variable ALBUMTREE_DATABASE_PATH, e.g., "/srv/albums.db"
DATABASE_PATH = Path(os.environ.get("ALBUMTREE_DATABASE_PATH", str(BASE_DIR / "albums.db")))
DB_TIMEOUT = float(os.environ.get("ALBUMTREE_DB_TIMEOUT", "5.0"))  # seconds a writer waits for the lock

# Separator used when joining album titles into a full path
PATH_SEPARATOR = os.environ.get("ALBUMTREE_PATH_SEPARATOR", "/")

# Re-check every nested-set invariant inside the mutation transaction
VERIFY_TREE_AFTER_MUTATION = os.environ.get(
    "ALBUMTREE_VERIFY_TREE", "1"
).strip().lower() not in {"0", "false", "no", "off"}

# Logging configuration
LOG_LEVEL = os.environ.get("ALBUMTREE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
