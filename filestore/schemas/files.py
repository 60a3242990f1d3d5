"""File storage API schemas.

Ids are 64-bit and serialized as strings so JavaScript clients keep full precision.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from filestore.application.dtos.storage import FileRecord, UploadResult
from filestore.domain.enums import ReferenceType


class UploadResponse(BaseModel):
    """Response for POST /files and POST /files/from-url."""

    id: str
    url: str
    storage_key: str
    file_hash: str
    file_size: int
    mime_type: str
    deduplicated: bool

    @classmethod
    def from_result(cls, r: UploadResult) -> "UploadResponse":
        return cls(
            id=str(r.id),
            url=r.url,
            storage_key=r.storage_key,
            file_hash=r.file_hash,
            file_size=r.file_size,
            mime_type=r.mime_type,
            deduplicated=r.deduplicated,
        )


class UploadFromUrlRequest(BaseModel):
    """Body for POST /files/from-url."""

    url: str = Field(..., min_length=1, max_length=2048)
    reference_type: ReferenceType = ReferenceType.POST
    sub_path: str | None = Field(default=None, max_length=200)
    original_filename: str | None = Field(default=None, max_length=255)
    provider_id: int | None = None
    is_public: bool = True
    timeout_ms: int | None = Field(default=None, ge=100, le=60_000)


class StoredFileResponse(BaseModel):
    """Response for GET /files/{id}."""

    id: str
    url: str
    storage_key: str
    mime_type: str
    file_size: int
    original_filename: str
    reference_type: ReferenceType
    created_at: datetime | None

    @classmethod
    def from_record(cls, r: FileRecord) -> "StoredFileResponse":
        return cls(
            id=str(r.id),
            url=r.url,
            storage_key=r.storage_key,
            mime_type=r.mime_type,
            file_size=r.file_size,
            original_filename=r.original_filename,
            reference_type=r.reference_type,
            created_at=r.created_at,
        )


class FileUrlResponse(BaseModel):
    """Response for GET /files/{id}/url."""

    url: str
