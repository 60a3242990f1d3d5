"""Infrastructure exceptions for storage backends.

Storage errors extend FileStoreException so presentation can map them
to HTTP responses consistently. Backends wrap vendor SDK errors in these.
"""

from filestore.domain.exceptions import FileStoreException


class StorageException(FileStoreException):
    """Base exception for storage backend operations."""


class StorageUploadError(StorageException):
    """Object write failed."""

    def __init__(self, storage_key: str, reason: str) -> None:
        super().__init__(
            f"Failed to upload file: {storage_key}",
            "STORAGE_UPLOAD_ERROR",
            {"storage_key": storage_key, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """Object deletion failed."""

    def __init__(self, storage_key: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {storage_key}",
            "STORAGE_DELETE_ERROR",
            {"storage_key": storage_key, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Key resolves outside the backend's root, or the backend refused access."""

    def __init__(self, storage_key: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {storage_key}",
            "STORAGE_PERMISSION_ERROR",
            {"storage_key": storage_key, "operation": operation},
        )
