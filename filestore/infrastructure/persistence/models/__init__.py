"""ORM models. Import here so Base.metadata sees every table."""

from filestore.infrastructure.persistence.models.storage import StorageFile, StorageProvider

__all__ = ["StorageFile", "StorageProvider"]
