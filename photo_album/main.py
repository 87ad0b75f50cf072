from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import uvicorn
import logging
from botocore.exceptions import BotoCoreError, ClientError

from photo_album.storage.s3 import S3BlobStore
from photo_album.settings import settings
from photo_album.routers.gallery import router as gallery_router
from photo_album.exceptions import add_exception_handlers

logging.basicConfig(level=settings.log_level.upper())
log = logging.getLogger("photo-album")

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
        Async context manager for FastAPI application lifecycle events.
        Opens and closes the blob store for the application and creates its bucket if missing.
    """
    app.state.store = S3BlobStore()
    if not settings.store_configured:
        log.warning("Blob store credential is not configured; listing will fail")
    else:
        try:
            app.state.store.ensure_bucket()
        except (BotoCoreError, ClientError) as e:
            log.error(f"Blob store bucket check failed: {e}")
    yield
    app.state.store.close()

# Initialize App
app = FastAPI(
    title=settings.app_title,
    lifespan=lifespan,
    description="Photo album backed by a blob store",
)

# Add exception handlers
add_exception_handlers(app)

# CORS - Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add the routers
app.include_router(gallery_router)

# Check Health
@app.get("/")
def read_root():
    """
        Default end point

    """
    return "Photo Album Service is running."

if __name__ == "__main__":
    uvicorn.run("photo_album.main:app", host="0.0.0.0", port=8000, reload=True)
