"""Album Tree Application - FastAPI Entry Point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import LOG_LEVEL, LOG_FORMAT
from .database import init_db
from .errors import (
    AlbumTreeError,
    BrokenChainError,
    ConsistencyViolationError,
    CycleError,
    NotFoundError,
    QueryError,
)

# Import routers
from .routes.albums import router as albums_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: runs before the application starts accepting requests
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    init_db()
    yield


app = FastAPI(title="Album Tree", lifespan=lifespan)

# Error taxonomy -> HTTP status
_STATUS_CODES = {
    NotFoundError: 404,
    CycleError: 400,
    BrokenChainError: 500,
    ConsistencyViolationError: 500,
    QueryError: 500,
}


@app.exception_handler(AlbumTreeError)
async def album_tree_error_handler(request: Request, exc: AlbumTreeError):
    """Render album tree errors as JSON."""
    status_code = next(
        (code for error_type, code in _STATUS_CODES.items() if isinstance(exc, error_type)),
        500
    )
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


# Include routers
app.include_router(albums_router)
