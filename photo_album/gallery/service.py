from typing import Any, List, Optional, Tuple
import logging
import secrets
import string
import time
from botocore.exceptions import BotoCoreError, ClientError

from photo_album.storage.s3 import S3BlobStore
from photo_album.gallery.models import ImageRecord, UploadedImage
from photo_album.settings import settings
from photo_album.exceptions import (
    StoreNotConfiguredException,
    NoFilesException,
    NoUrlsException,
    ListImagesException,
    UploadFailedException,
    DeleteFailedException,
)

log = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_lowercase + string.digits
TOKEN_LENGTH = 6
DEFAULT_EXTENSION = "jpg"

def is_image_type(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith("image/")

def file_extension(filename: Optional[str]) -> str:
    """Text after the last dot of the filename, or the default extension."""
    if filename and "." in filename:
        ext = filename.rsplit(".", 1)[1]
        # Keys stay flat: no path separators from client filenames
        if ext and "/" not in ext and "\\" not in ext:
            return ext
    return DEFAULT_EXTENSION

def generate_filename(original_name: Optional[str], now_ms: Optional[int] = None) -> str:
    """Generates a unique object name: photo_<epoch-ms>_<6-char token>.<ext>"""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    token = "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
    return f"photo_{timestamp}_{token}.{file_extension(original_name)}"

def fetch_images(store: S3BlobStore) -> List[ImageRecord]:
    """Lists every stored image, newest first."""
    if not settings.store_configured:
        raise StoreNotConfiguredException()
    try:
        blobs = store.list()
    except (BotoCoreError, ClientError) as e:
        log.error(f"Blob store list failed: {e}")
        raise ListImagesException(str(e))

    blobs = sorted(blobs, key=lambda blob: blob.uploaded_at, reverse=True)
    return [
        ImageRecord(
            url=blob.url,
            pathname=blob.pathname,
            size=blob.size,
            uploaded_at=blob.uploaded_at,
        )
        for blob in blobs
    ]

def save_images(
    store: S3BlobStore,
    files: List[Tuple[Optional[str], Optional[str], bytes]],
) -> List[UploadedImage]:
    """
        Writes every image-typed file to the store under a generated name.
        `files` holds (filename, content_type, data) triples. Other types are skipped.
        Writes are independent: a failure leaves earlier writes in place.
    """
    if not files:
        raise NoFilesException()

    uploaded = []
    for filename, content_type, data in files:
        if not is_image_type(content_type):
            log.info("Skipping %s with content type %s", filename, content_type)
            continue

        key = generate_filename(filename)
        try:
            blob = store.put(key, data, content_type)
        except (BotoCoreError, ClientError):
            log.exception("Blob store put failed for %s", key)
            raise UploadFailedException()
        uploaded.append(UploadedImage(url=blob.url, pathname=blob.pathname))

    log.info("Stored %d of %d uploaded files", len(uploaded), len(files))
    return uploaded

def remove_images(store: S3BlobStore, urls: Any) -> int:
    """
        Deletes the given urls in one batch. Returns how many were requested.
        Anything other than a non-empty list of strings is rejected.
    """
    if not isinstance(urls, list) or not urls or not all(isinstance(url, str) for url in urls):
        raise NoUrlsException()
    try:
        store.delete(urls)
    except (BotoCoreError, ClientError):
        log.exception("Blob store delete failed for %d urls", len(urls))
        raise DeleteFailedException()

    log.info("Deleted %d images", len(urls))
    return len(urls)
