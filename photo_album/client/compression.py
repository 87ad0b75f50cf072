"""
    Best-effort image compression run before upload.
    Large images are resized and re-encoded with Pillow so that the longest
    edge is at most 1920px and the payload aims for at most 1 MiB. Any failure
    hands back the original file; compression never fails an upload.
"""
from io import BytesIO
from typing import Optional
import asyncio
import logging

from PIL import Image, ImageOps
from pydantic import BaseModel, ConfigDict

log = logging.getLogger(__name__)

MAX_SIZE_BYTES = 1024 * 1024
MAX_EDGE = 1920
MAX_ITERATIONS = 10
MIN_EDGE = 16

LOSSY_FORMATS = {"JPEG", "WEBP"}
INITIAL_QUALITY = 90
QUALITY_STEP = 10
MIN_QUALITY = 30
SHRINK_FACTOR = 0.85

class LocalFile(BaseModel):
    """A file picked on the client, before upload."""
    model_config = ConfigDict(frozen=True)

    name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

def _encode(img: Image.Image, fmt: str, quality: Optional[int]) -> bytes:
    buf = BytesIO()
    if fmt in LOSSY_FORMATS:
        if fmt == "JPEG" and img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(buf, format=fmt, quality=quality, optimize=True)
    else:
        img.save(buf, format=fmt, optimize=True)
    return buf.getvalue()

def _scaled(img: Image.Image, max_edge: int) -> Image.Image:
    if max(img.size) <= max_edge:
        return img
    resized = img.copy()
    resized.thumbnail((max_edge, max_edge), Image.Resampling.LANCZOS)
    return resized

def compress_bytes(data: bytes, max_size_bytes: int = MAX_SIZE_BYTES, max_edge: int = MAX_EDGE) -> bytes:
    """Re-encodes image bytes under the size and edge limits. Raises on unreadable input."""
    with Image.open(BytesIO(data)) as source:
        fmt = (source.format or "JPEG").upper()
        if fmt == "MPO":
            fmt = "JPEG"
        img = ImageOps.exif_transpose(source)
        img.load()

    edge = min(max(img.size), max_edge)
    quality = INITIAL_QUALITY if fmt in LOSSY_FORMATS else None
    output = _encode(_scaled(img, edge), fmt, quality)

    for _ in range(MAX_ITERATIONS - 1):
        if len(output) <= max_size_bytes:
            break
        if quality is not None and quality - QUALITY_STEP >= MIN_QUALITY:
            quality -= QUALITY_STEP
        else:
            next_edge = int(edge * SHRINK_FACTOR)
            if next_edge < MIN_EDGE:
                break
            edge = next_edge
        output = _encode(_scaled(img, edge), fmt, quality)

    return output

def compress_file(file: LocalFile, max_size_bytes: int = MAX_SIZE_BYTES, max_edge: int = MAX_EDGE) -> LocalFile:
    if file.size <= max_size_bytes:
        return file
    try:
        data = compress_bytes(file.data, max_size_bytes=max_size_bytes, max_edge=max_edge)
    except Exception as e:
        log.warning("Compression failed for %s, sending original: %s", file.name, e)
        return file
    if len(data) >= file.size:
        return file
    log.debug("Compressed %s from %d to %d bytes", file.name, file.size, len(data))
    return file.model_copy(update={"data": data})

async def compress_image(
    file: LocalFile,
    max_size_bytes: int = MAX_SIZE_BYTES,
    max_edge: int = MAX_EDGE,
    use_worker: bool = True,
) -> LocalFile:
    """Compresses one file, off the event loop when `use_worker` is set."""
    if file.size <= max_size_bytes:
        return file
    if use_worker:
        return await asyncio.to_thread(compress_file, file, max_size_bytes, max_edge)
    return compress_file(file, max_size_bytes, max_edge)
