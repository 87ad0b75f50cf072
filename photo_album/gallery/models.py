from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

class ImageRecord(BaseModel):
    """One stored photo. `url` is its identity everywhere."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    pathname: str
    size: int
    uploaded_at: datetime = Field(alias="uploadedAt")

class UploadedImage(BaseModel):
    url: str
    pathname: str

class ListImagesResponse(BaseModel):
    success: bool = True
    images: List[ImageRecord]

class UploadResponse(BaseModel):
    success: bool = True
    uploaded: List[UploadedImage]
    count: int

class DeleteRequest(BaseModel):
    urls: Optional[List[str]] = None

class DeleteResponse(BaseModel):
    success: bool = True
    deleted: int

class ErrorResponse(BaseModel):
    success: bool = False
    error: str
