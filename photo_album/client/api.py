"""HTTPX client for the photo album gateway."""
from typing import Iterable, List, Optional
import logging

import httpx
from pydantic import ValidationError

from photo_album.client.compression import LocalFile
from photo_album.gallery.models import (
    DeleteResponse,
    ImageRecord,
    UploadResponse,
    ListImagesResponse,
)

log = logging.getLogger(__name__)

class GalleryApiError(Exception):
    """The gateway answered with a failure envelope."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

class GalleryApi:
    """Talks to the list, upload and delete endpoints."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    @classmethod
    def create(cls, base_url: str) -> "GalleryApi":
        """Create an API client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(base_url=base_url))

    @staticmethod
    def _envelope(response: httpx.Response, fallback: str) -> dict:
        try:
            data = response.json()
        except ValueError:
            raise GalleryApiError(fallback, response.status_code)
        if not isinstance(data, dict) or not data.get("success"):
            message = data.get("error") if isinstance(data, dict) else None
            raise GalleryApiError(message or fallback, response.status_code)
        return data

    @staticmethod
    def _parse(model, data: dict, fallback: str, status_code: int):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            log.error("Malformed gateway response: %s", e)
            raise GalleryApiError(fallback, status_code)

    async def list_images(self) -> List[ImageRecord]:
        response = await self.http_client.get("/api/list")
        data = self._envelope(response, "Failed to list images")
        return self._parse(ListImagesResponse, data, "Failed to list images", response.status_code).images

    async def upload(self, files: Iterable[LocalFile]) -> UploadResponse:
        parts = [("files", (f.name, f.data, f.content_type)) for f in files]
        response = await self.http_client.post("/api/upload", files=parts)
        data = self._envelope(response, "Upload failed")
        return self._parse(UploadResponse, data, "Upload failed", response.status_code)

    async def delete(self, urls: List[str]) -> DeleteResponse:
        response = await self.http_client.request("DELETE", "/api/delete", json={"urls": urls})
        data = self._envelope(response, "Delete failed")
        return self._parse(DeleteResponse, data, "Delete failed", response.status_code)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
