"""Application DTOs (no ORM dependency)."""

from filestore.application.dtos.storage import (
    FetchedFile,
    FileRecord,
    StorageFileCreate,
    StorageFileResult,
    StorageProviderRecord,
    UploadOptions,
    UploadPayload,
    UploadResult,
    UploadStream,
)

__all__ = [
    "FetchedFile",
    "FileRecord",
    "StorageFileCreate",
    "StorageFileResult",
    "StorageProviderRecord",
    "UploadOptions",
    "UploadPayload",
    "UploadResult",
    "UploadStream",
]
