from fastapi import APIRouter, Depends, File, Request, UploadFile
from typing import List, Optional
import logging

from photo_album.storage.s3 import S3BlobStore
from photo_album.dependencies import get_blob_store
from photo_album.gallery.service import fetch_images, save_images, remove_images
from photo_album.gallery.models import (
    DeleteRequest,
    DeleteResponse,
    ErrorResponse,
    ListImagesResponse,
    UploadResponse,
)

log = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["photo-album"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

@router.get("/list", response_model=ListImagesResponse)
def list_images(store: S3BlobStore = Depends(get_blob_store)):
    """Lists all stored images, newest first."""
    images = fetch_images(store)
    return ListImagesResponse(images=images)

@router.post("/upload", response_model=UploadResponse)
async def upload_images(
    files: Optional[List[UploadFile]] = File(None),
    store: S3BlobStore = Depends(get_blob_store),
):
    """Stores every image among the uploaded files. Non-image files are skipped."""
    log.info("Upload request with %d files", len(files or []))
    payload = []
    for file in files or []:
        payload.append((file.filename, file.content_type, await file.read()))

    uploaded = save_images(store, payload)
    return UploadResponse(uploaded=uploaded, count=len(uploaded))

@router.delete(
    "/delete",
    response_model=DeleteResponse,
    openapi_extra={
        "requestBody": {"content": {"application/json": {"schema": DeleteRequest.model_json_schema()}}},
    },
)
async def delete_images(request: Request, store: S3BlobStore = Depends(get_blob_store)):
    """Deletes the images behind the given urls in one batch."""
    # Unparseable bodies count as an empty url list
    try:
        payload = await request.json()
    except ValueError:
        log.warning("Delete request body is not valid JSON")
        payload = None
    urls = payload.get("urls") if isinstance(payload, dict) else None
    deleted = remove_images(store, urls)
    return DeleteResponse(deleted=deleted)
