"""Storage use cases."""

from filestore.application.use_cases.storage.storage_service import StorageService

__all__ = ["StorageService"]
