"""Storage file repository. Returns application DTOs; rows are soft-deleted only."""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from filestore.application.dtos.storage import StorageFileCreate, StorageFileResult
from filestore.domain.enums import ReferenceType
from filestore.infrastructure.persistence.models.storage import StorageFile
from filestore.infrastructure.persistence.repositories.base import BaseRepository
from filestore.shared.utils.datetime import ensure_utc


def _create_to_file(d: StorageFileCreate) -> StorageFile:
    """Map StorageFileCreate (write-model) to ORM StorageFile for persistence."""
    return StorageFile(
        id=d.id,
        provider_id=d.provider_id,
        user_id=d.user_id,
        original_filename=d.original_filename,
        mime_type=d.mime_type,
        file_size=d.file_size,
        storage_key=d.storage_key,
        file_hash=d.file_hash,
        is_public=d.is_public,
        reference_type=d.reference_type,
        metadata_=d.metadata,
        is_deleted=False,
    )


def _file_to_result(f: StorageFile) -> StorageFileResult:
    """Map ORM StorageFile to application StorageFileResult."""
    return StorageFileResult(
        id=f.id,
        provider_id=f.provider_id,
        user_id=f.user_id,
        original_filename=f.original_filename,
        mime_type=f.mime_type,
        file_size=f.file_size,
        storage_key=f.storage_key,
        file_hash=f.file_hash,
        reference_type=ReferenceType(f.reference_type),
        is_public=f.is_public,
        is_deleted=f.is_deleted,
        created_at=ensure_utc(f.created_at),
        metadata=f.metadata_,
    )


class StorageFileRepository(BaseRepository[StorageFile]):
    """storage_files access (IStorageFileRepository)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, StorageFile)

    async def get_by_id(self, file_id: int) -> StorageFileResult | None:
        row = await self._get(file_id)
        return _file_to_result(row) if row else None

    async def find_by_hash_and_provider(
        self, file_hash: str, provider_id: int
    ) -> StorageFileResult | None:
        # Oldest first so repeated lookups keep returning the same row when duplicates exist.
        stmt = (
            select(StorageFile)
            .where(
                StorageFile.file_hash == file_hash,
                StorageFile.provider_id == provider_id,
            )
            .order_by(StorageFile.is_deleted.asc(), StorageFile.id.asc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return _file_to_result(row) if row else None

    async def create_file(self, data: StorageFileCreate) -> StorageFileResult:
        row = await self._create(_create_to_file(data))
        return _file_to_result(row)

    async def set_deleted(self, file_id: int, is_deleted: bool) -> None:
        await self.db.execute(
            update(StorageFile)
            .where(StorageFile.id == file_id)
            .values(is_deleted=is_deleted)
        )
        await self.db.flush()

    async def count_active_siblings(
        self, file_hash: str, provider_id: int, exclude_id: int
    ) -> int:
        stmt = select(func.count()).select_from(StorageFile).where(
            StorageFile.file_hash == file_hash,
            StorageFile.provider_id == provider_id,
            StorageFile.is_deleted.is_(False),
            StorageFile.id != exclude_id,
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())
