"""Pydantic request/response schemas for the HTTP API."""

from filestore.schemas.files import (
    FileUrlResponse,
    StoredFileResponse,
    UploadFromUrlRequest,
    UploadResponse,
)
from filestore.schemas.health import HealthResponse

__all__ = [
    "FileUrlResponse",
    "HealthResponse",
    "StoredFileResponse",
    "UploadFromUrlRequest",
    "UploadResponse",
]
