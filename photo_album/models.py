from datetime import datetime
from pydantic import BaseModel, ConfigDict

class BlobObject(BaseModel):
    """An object as listed by the blob store."""
    model_config = ConfigDict(frozen=True)

    url: str
    pathname: str
    size: int
    uploaded_at: datetime

class PutBlobResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    pathname: str
