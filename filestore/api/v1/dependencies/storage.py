"""Storage service dependencies (composition root).

The provider client registry, URL guard and remote fetcher live on
app.state (built once in create_app); repositories are per-request.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from filestore.application.use_cases.storage import StorageService
from filestore.core.config import get_settings
from filestore.infrastructure.persistence.database import get_db, get_db_transactional
from filestore.infrastructure.persistence.repositories import (
    StorageFileRepository,
    StorageProviderRepository,
)


def _build(request: Request, db: AsyncSession) -> StorageService:
    state = request.app.state
    return StorageService(
        provider_repo=StorageProviderRepository(db),
        file_repo=StorageFileRepository(db),
        registry=state.provider_registry,
        url_guard=state.url_guard,
        fetcher=state.remote_fetcher,
        chunk_size=get_settings().upload_chunk_size,
    )


async def get_storage_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> StorageService:
    """StorageService for uploads and deletes (one transaction per request)."""
    return _build(request, db)


async def get_storage_query_service(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StorageService:
    """StorageService for get_file / get_url (read session)."""
    return _build(request, db)
