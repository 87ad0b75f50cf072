from fastapi import Request
from photo_album.storage.s3 import S3BlobStore

def get_blob_store(request: Request) -> S3BlobStore:
    """Dependency provider for the blob store"""
    return request.app.state.store
