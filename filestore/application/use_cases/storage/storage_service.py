"""Storage use case: content-addressed upload, remote ingestion, delete and lookup.

Upload order is hash -> dedup lookup -> validate -> derive key -> backend
write -> metadata row. A metadata failure after the backend write deletes
the orphaned object before re-raising.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from filestore.application.dtos.storage import (
    FileRecord,
    StorageFileCreate,
    StorageFileResult,
    StorageProviderRecord,
    UploadOptions,
    UploadPayload,
    UploadResult,
    UploadStream,
)
from filestore.application.interfaces.repositories import (
    IStorageFileRepository,
    IStorageProviderRepository,
)
from filestore.application.interfaces.services import (
    IProviderClientRegistry,
    IRemoteFetcher,
    IUrlGuard,
)
from filestore.application.services.content_hasher import (
    DEFAULT_CHUNK_SIZE,
    hash_bytes,
    hash_stream,
    read_stream,
    stream_position,
)
from filestore.application.services.file_validator import (
    allowed_types_for,
    validate_file_content,
    validate_image_file,
)
from filestore.application.services.storage_key_generator import (
    generate_storage_key,
    get_extension_from_mime_type,
)
from filestore.domain.exceptions import (
    FileValidationException,
    NoProviderConfiguredException,
)
from filestore.shared.utils.generators import generate_id

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_MS = 10_000


def _public_url(provider: StorageProviderRecord, storage_key: str) -> str:
    return f"{provider.base_url.rstrip('/')}/{storage_key}"


class StorageService:
    """Orchestrates uploads, deletes and lookups across storage providers.

    All collaborators are injected; the provider client registry is owned by
    the caller (one per process in the API).
    """

    def __init__(
        self,
        provider_repo: IStorageProviderRepository,
        file_repo: IStorageFileRepository,
        registry: IProviderClientRegistry,
        url_guard: IUrlGuard | None = None,
        fetcher: IRemoteFetcher | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.provider_repo = provider_repo
        self.file_repo = file_repo
        self.registry = registry
        self.url_guard = url_guard
        self.fetcher = fetcher
        self.chunk_size = chunk_size

    async def _resolve_provider(self, provider_id: int | None) -> StorageProviderRecord:
        if provider_id is not None:
            provider = await self.provider_repo.get_by_id(provider_id)
        else:
            provider = await self.provider_repo.get_default()
        if provider is None:
            raise NoProviderConfiguredException(provider_id)
        return provider

    async def upload(
        self, source: UploadStream | UploadPayload, options: UploadOptions
    ) -> UploadResult:
        """Store source under the resolved provider, or reuse identical content.

        Raises:
            NoProviderConfiguredException: No active provider matches.
            FileValidationException: Type, size, content or key inputs rejected.
            StorageException: Backend write failed (no row is created).
        """
        provider = await self._resolve_provider(options.provider_id)

        data: bytes | None = None
        if isinstance(source, UploadStream):
            if await stream_position(source.file) is not None:
                file_hash = await hash_stream(source.file, self.chunk_size)
            else:
                # Cannot be read twice: buffer once and hash the buffer.
                data = await read_stream(source.file, self.chunk_size)
                file_hash = hash_bytes(data)
            mime_type = source.content_type
            source_name = source.filename
        else:
            file_hash = hash_bytes(source.data)
            mime_type = source.mime_type
            source_name = source.name

        existing = await self.file_repo.find_by_hash_and_provider(file_hash, provider.id)
        if existing is not None:
            return await self._reuse(existing, provider)

        if data is None:
            data = (
                await read_stream(source.file, self.chunk_size)
                if isinstance(source, UploadStream)
                else source.data
            )
        file_size = len(data)

        result = validate_image_file(mime_type, file_size, options.reference_type, provider)
        if not result.valid:
            raise FileValidationException(result.error or "Invalid file", field="file")
        result = validate_file_content(
            data, allowed_types_for(provider), declared_mime=mime_type
        )
        if not result.valid:
            raise FileValidationException(result.error or "Invalid file", field="file")

        storage_key = generate_storage_key(
            options.reference_type,
            mime_type,
            user_id=options.user_id,
            sub_path=options.sub_path,
        )

        backend = self.registry.get_provider_client(provider)
        url = await backend.upload(storage_key, data, mime_type)
        logger.info(
            "Stored %s (%d bytes) on provider %s", storage_key, file_size, provider.id
        )

        original_filename = (
            options.original_filename
            or source_name
            or f"file.{get_extension_from_mime_type(mime_type)}"
        )
        create = StorageFileCreate(
            id=generate_id(),
            provider_id=provider.id,
            user_id=options.user_id,
            original_filename=original_filename,
            mime_type=mime_type,
            file_size=file_size,
            storage_key=storage_key,
            file_hash=file_hash,
            reference_type=options.reference_type,
            is_public=options.is_public,
            metadata=options.metadata,
        )
        try:
            row = await self.file_repo.create_file(create)
        except Exception:
            logger.warning(
                "Metadata write failed for %s; deleting stored object", storage_key
            )
            try:
                await backend.delete(storage_key)
            except Exception:
                logger.exception("Failed to delete orphaned object %s", storage_key)
            raise

        return UploadResult(
            id=row.id,
            url=url,
            storage_key=row.storage_key,
            file_hash=row.file_hash,
            file_size=row.file_size,
            mime_type=row.mime_type,
            deduplicated=False,
        )

    async def _reuse(
        self, existing: StorageFileResult, provider: StorageProviderRecord
    ) -> UploadResult:
        if existing.is_deleted:
            await self.file_repo.set_deleted(existing.id, False)
            logger.info("Restored soft-deleted file %s on identical upload", existing.id)
        else:
            logger.info("Deduplicated upload to existing file %s", existing.id)
        return UploadResult(
            id=existing.id,
            url=_public_url(provider, existing.storage_key),
            storage_key=existing.storage_key,
            file_hash=existing.file_hash,
            file_size=existing.file_size,
            mime_type=existing.mime_type,
            deduplicated=True,
        )

    async def upload_from_url(
        self,
        url: str,
        options: UploadOptions,
        timeout_ms: int = DEFAULT_FETCH_TIMEOUT_MS,
    ) -> UploadResult:
        """Fetch url (SSRF-guarded, size-capped) and upload the body.

        Raises:
            SSRFRejectedException: Before any network call.
            FileTooLargeException: Body over the fetch ceiling.
            RemoteFetchException: Non-2xx, timeout or transport error.
        """
        if self.url_guard is None or self.fetcher is None:
            raise RuntimeError("StorageService needs url_guard and fetcher for upload_from_url")
        await self.url_guard.check(url)
        fetched = await self.fetcher.fetch(url, timeout_ms)
        payload = UploadPayload(
            data=fetched.data, mime_type=fetched.content_type, name=fetched.filename
        )
        return await self.upload(
            payload,
            replace(
                options,
                original_filename=options.original_filename or fetched.filename,
            ),
        )

    async def delete(self, file_id: int) -> None:
        """Soft-delete a file; remove the object when no live row shares its content.

        Backend delete failures are logged; the row is still marked deleted.
        """
        row = await self.file_repo.get_by_id(file_id)
        if row is None or row.is_deleted:
            return

        siblings = await self.file_repo.count_active_siblings(
            row.file_hash, row.provider_id, exclude_id=row.id
        )
        if siblings == 0:
            await self._delete_object(row)
        else:
            logger.info(
                "Keeping %s: %d other live file(s) share its content",
                row.storage_key,
                siblings,
            )
        await self.file_repo.set_deleted(row.id, True)

    async def _delete_object(self, row: StorageFileResult) -> None:
        # Inactive providers still own their objects.
        provider = await self.provider_repo.get_by_id(row.provider_id, active_only=False)
        if provider is None:
            logger.warning(
                "Provider %s for file %s is gone; object %s left in place",
                row.provider_id,
                row.id,
                row.storage_key,
            )
            return
        try:
            backend = self.registry.get_provider_client(provider)
            await backend.delete(row.storage_key)
        except Exception:
            logger.exception(
                "Failed to delete object %s from provider %s", row.storage_key, provider.id
            )

    async def _live_row_and_provider(
        self, file_id: int
    ) -> tuple[StorageFileResult, StorageProviderRecord] | None:
        row = await self.file_repo.get_by_id(file_id)
        if row is None or row.is_deleted:
            return None
        provider = await self.provider_repo.get_by_id(row.provider_id, active_only=False)
        if provider is None:
            return None
        return row, provider

    async def get_url(self, file_id: int) -> str | None:
        """Public URL of a live file, or None."""
        found = await self._live_row_and_provider(file_id)
        if found is None:
            return None
        row, provider = found
        return _public_url(provider, row.storage_key)

    async def get_file(self, file_id: int) -> FileRecord | None:
        """Public view of a live file, or None."""
        found = await self._live_row_and_provider(file_id)
        if found is None:
            return None
        row, provider = found
        return FileRecord(
            id=row.id,
            url=_public_url(provider, row.storage_key),
            storage_key=row.storage_key,
            mime_type=row.mime_type,
            file_size=row.file_size,
            original_filename=row.original_filename,
            reference_type=row.reference_type,
            created_at=row.created_at,
        )
