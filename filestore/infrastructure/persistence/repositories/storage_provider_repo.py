"""Storage provider repository (read-only). Returns application DTOs."""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from filestore.application.dtos.storage import StorageProviderRecord
from filestore.domain.enums import ProviderType
from filestore.infrastructure.persistence.models.storage import StorageProvider
from filestore.infrastructure.persistence.repositories.base import BaseRepository
from filestore.shared.utils.datetime import ensure_utc


def _provider_to_record(p: StorageProvider) -> StorageProviderRecord:
    """Map ORM StorageProvider to application StorageProviderRecord."""
    return StorageProviderRecord(
        id=p.id,
        name=p.name,
        provider_type=ProviderType(p.provider_type),
        config=dict(p.config or {}),
        base_url=p.base_url,
        is_default=p.is_default,
        is_active=p.is_active,
        sort=p.sort,
        max_file_size=p.max_file_size,
        allowed_types=p.allowed_types,
        is_deleted=p.is_deleted,
        created_at=ensure_utc(p.created_at),
    )


class StorageProviderRepository(BaseRepository[StorageProvider]):
    """Provider reads (IStorageProviderRepository). Deleted providers are invisible."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, StorageProvider)

    @staticmethod
    def _live() -> Select[tuple[StorageProvider]]:
        return select(StorageProvider).where(StorageProvider.is_deleted.is_(False))

    async def get_by_id(
        self, provider_id: int, *, active_only: bool = True
    ) -> StorageProviderRecord | None:
        stmt = self._live().where(StorageProvider.id == provider_id)
        if active_only:
            stmt = stmt.where(StorageProvider.is_active.is_(True))
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return _provider_to_record(row) if row else None

    async def get_default(self) -> StorageProviderRecord | None:
        stmt = (
            self._live()
            .where(
                StorageProvider.is_active.is_(True),
                StorageProvider.is_default.is_(True),
            )
            .order_by(StorageProvider.sort.asc(), StorageProvider.created_at.asc())
            .limit(1)
        )
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        return _provider_to_record(row) if row else None
