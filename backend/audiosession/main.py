"""
Audio Session Store - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api import sessions_router
from .api.error_handlers import register_error_handlers
from .config import settings
from .core.logging_config import setup_logging
from .storage import create_blob_store, init_blob_store

# Logger will be initialized after setup_logging() is called
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)

    store = create_blob_store(
        settings.storage_type,
        base_dir=settings.local_storage_path,
        page_size=settings.storage_page_size,
    )
    init_blob_store(store)
    logger.info("Blob store initialized: %s", settings.storage_type)

    logger.info("Starting %s v%s", settings.app_name, settings.app_version)
    logger.info("Storage path: %s", settings.local_storage_path)
    logger.info("Debug mode: %s", settings.debug)
    yield
    # Shutdown
    logger.info("Shutting down %s", settings.app_name)


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Chunked audio recording sessions on a blob store",
    lifespan=lifespan
)

register_error_handlers(app)
app.include_router(sessions_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "storage": settings.storage_type,
        "version": settings.app_version
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "audiosession.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
