"""
    Centralized exception handling for the FastAPI application.
    Every error leaves the service as a {"success": false, "error": ...} envelope.
"""
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

log = logging.getLogger(__name__)

class APIException(Exception):
    """Base class for API exceptions."""
    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(self.detail)

class StoreNotConfiguredException(APIException):
    """Exception for a missing blob store credential."""
    def __init__(self):
        super().__init__(
            status_code=500,
            detail="AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY environment variables are not configured",
        )

class NoFilesException(APIException):
    """Exception for an upload request without files."""
    def __init__(self):
        super().__init__(status_code=400, detail="No files selected")

class NoUrlsException(APIException):
    """Exception for a delete request without urls."""
    def __init__(self):
        super().__init__(status_code=400, detail="No images specified for deletion")

class ListImagesException(APIException):
    """Exception for list failures. Carries the store's message."""
    def __init__(self, reason: str):
        super().__init__(status_code=500, detail=f"Failed to list images: {reason}")

class UploadFailedException(APIException):
    """Exception for upload failures."""
    def __init__(self):
        super().__init__(status_code=500, detail="Upload failed")

class DeleteFailedException(APIException):
    """Exception for delete failures."""
    def __init__(self):
        super().__init__(status_code=500, detail="Delete failed")

def error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )

async def api_exception_handler(request: Request, exc: APIException):
    """Handles API exceptions."""
    log.error(f"API Exception: {exc.detail}")
    return error_envelope(exc.status_code, exc.detail)

async def http_exception_handler(request: Request, exc: HTTPException):
    """Handles FastAPI HTTP exceptions."""
    log.error(f"HTTP Exception: {exc.detail}")
    return error_envelope(exc.status_code, str(exc.detail))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handles malformed request bodies as client errors."""
    log.warning(f"Request validation failed: {exc.errors()}")
    return error_envelope(400, "Invalid request")

async def generic_exception_handler(request: Request, exc: Exception):
    """Handles all other exceptions."""
    log.error(f"Unhandled Exception: {str(exc)}", exc_info=exc)
    return error_envelope(500, "An unexpected error occurred.")

def add_exception_handlers(app):
    """Adds exception handlers to the FastAPI app."""
    app.add_exception_handler(APIException, api_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
