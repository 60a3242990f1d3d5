"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from filestore.application.dtos.storage import (
        StorageFileCreate,
        StorageFileResult,
        StorageProviderRecord,
    )


# Storage provider repository interface
class IStorageProviderRepository(Protocol):
    """Protocol for storage provider reads. Deleted providers are never returned."""

    async def get_by_id(
        self, provider_id: int, *, active_only: bool = True
    ) -> StorageProviderRecord | None:
        """Return provider by ID; inactive providers only when active_only is False."""

    async def get_default(self) -> StorageProviderRecord | None:
        """Return the active default provider."""


# Storage file repository interface
class IStorageFileRepository(Protocol):
    """Protocol for storage_files rows. Rows are soft-deleted, never removed."""

    async def get_by_id(self, file_id: int) -> StorageFileResult | None:
        """Return file row by ID, deleted or not."""

    async def find_by_hash_and_provider(
        self, file_hash: str, provider_id: int
    ) -> StorageFileResult | None:
        """Return any row (deleted or not) with this content hash on this provider."""

    async def create_file(self, data: StorageFileCreate) -> StorageFileResult:
        """Insert a new row."""

    async def set_deleted(self, file_id: int, is_deleted: bool) -> None:
        """Set the soft-delete flag."""

    async def count_active_siblings(
        self, file_hash: str, provider_id: int, exclude_id: int
    ) -> int:
        """Count non-deleted rows sharing (file_hash, provider_id), excluding exclude_id."""
