"""SQLAlchemy repositories implementing the application's repository ports."""

from filestore.infrastructure.persistence.repositories.storage_file_repo import (
    StorageFileRepository,
)
from filestore.infrastructure.persistence.repositories.storage_provider_repo import (
    StorageProviderRepository,
)

__all__ = ["StorageFileRepository", "StorageProviderRepository"]
