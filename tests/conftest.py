"""Pytest configuration and fixtures for filestore.

Unit tests drive StorageService with in-memory repositories and a recording
backend. Integration and HTTP tests run against SQLite (aiosqlite) in a
per-test temporary directory.
"""

import os

# Tests never resolve DNS or touch a real database unless a fixture opts in.
os.environ["DATABASE_URL"] = ""
os.environ["REMOTE_FETCH_RESOLVE_DNS"] = "false"

from collections.abc import AsyncIterator, Callable, Iterator
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from filestore.application.dtos.storage import (
    StorageFileCreate,
    StorageFileResult,
    StorageProviderRecord,
)
from filestore.core.config import get_settings
from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.registry import ProviderClientRegistry
from filestore.infrastructure.persistence import database
from filestore.infrastructure.persistence.database import Base
from filestore.infrastructure.persistence.models import StorageProvider
from filestore.shared.utils.datetime import utc_now
from filestore.shared.utils.generators import generate_id

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
GIF_HEADER = b"GIF89a\x01\x00\x01\x00\x80\x00\x00"


def make_png(size: int = 1024, seed: bytes = b"") -> bytes:
    """PNG magic bytes padded to size; seed makes distinct contents."""
    body = PNG_HEADER + seed
    return body + b"\x00" * max(0, size - len(body))


def make_gif(size: int = 512) -> bytes:
    return GIF_HEADER + b"\x00" * max(0, size - len(GIF_HEADER))


class InMemoryProviderRepository:
    """IStorageProviderRepository over a dict."""

    def __init__(self, providers: list[StorageProviderRecord] | None = None) -> None:
        self.providers = {p.id: p for p in providers or []}

    def add(self, provider: StorageProviderRecord) -> None:
        self.providers[provider.id] = provider

    async def get_by_id(
        self, provider_id: int, *, active_only: bool = True
    ) -> StorageProviderRecord | None:
        p = self.providers.get(provider_id)
        if p is None or p.is_deleted:
            return None
        if active_only and not p.is_active:
            return None
        return p

    async def get_default(self) -> StorageProviderRecord | None:
        defaults = [
            p
            for p in self.providers.values()
            if p.is_default and p.is_active and not p.is_deleted
        ]
        return min(defaults, key=lambda p: (p.sort, p.id), default=None)


class InMemoryFileRepository:
    """IStorageFileRepository over a dict; fail_create simulates a metadata write error."""

    def __init__(self) -> None:
        self.rows: dict[int, StorageFileResult] = {}
        self.fail_create: Exception | None = None

    async def get_by_id(self, file_id: int) -> StorageFileResult | None:
        return self.rows.get(file_id)

    async def find_by_hash_and_provider(
        self, file_hash: str, provider_id: int
    ) -> StorageFileResult | None:
        matches = [
            r
            for r in self.rows.values()
            if r.file_hash == file_hash and r.provider_id == provider_id
        ]
        matches.sort(key=lambda r: (r.is_deleted, r.id))
        return matches[0] if matches else None

    async def create_file(self, data: StorageFileCreate) -> StorageFileResult:
        if self.fail_create is not None:
            raise self.fail_create
        row = StorageFileResult(
            id=data.id,
            provider_id=data.provider_id,
            user_id=data.user_id,
            original_filename=data.original_filename,
            mime_type=data.mime_type,
            file_size=data.file_size,
            storage_key=data.storage_key,
            file_hash=data.file_hash,
            reference_type=data.reference_type,
            is_public=data.is_public,
            is_deleted=False,
            created_at=utc_now(),
            metadata=data.metadata,
        )
        self.rows[row.id] = row
        return row

    async def set_deleted(self, file_id: int, is_deleted: bool) -> None:
        self.rows[file_id] = replace(self.rows[file_id], is_deleted=is_deleted)

    async def count_active_siblings(
        self, file_hash: str, provider_id: int, exclude_id: int
    ) -> int:
        return sum(
            1
            for r in self.rows.values()
            if r.file_hash == file_hash
            and r.provider_id == provider_id
            and not r.is_deleted
            and r.id != exclude_id
        )


class RecordingBackend:
    """Storage backend that keeps objects in memory and records every call."""

    def __init__(self, base_url: str = "https://cdn.example.com") -> None:
        self.base_url = base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}
        self.uploads: list[str] = []
        self.deletes: list[str] = []
        self.fail_upload = False
        self.fail_delete = False

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        self.uploads.append(key)
        if self.fail_upload:
            raise StorageUploadError(key, "backend unavailable")
        self.objects[key] = data
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        self.deletes.append(key)
        if self.fail_delete:
            raise StorageDeleteError(key, "backend unavailable")
        self.objects.pop(key, None)

    def get_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    async def exists(self, key: str) -> bool:
        return key in self.objects


def make_provider_record(**overrides: Any) -> StorageProviderRecord:
    values: dict[str, Any] = {
        "id": 1,
        "name": "primary",
        "provider_type": ProviderType.LOCAL,
        "config": {"base_path": "/tmp/filestore"},
        "base_url": "https://cdn.example.com",
        "is_default": True,
        "is_active": True,
        "sort": 0,
        "max_file_size": 5 * 1024 * 1024,
        "allowed_types": "image/*",
    }
    values.update(overrides)
    return StorageProviderRecord(**values)


@pytest.fixture
def provider() -> StorageProviderRecord:
    """Active default LOCAL provider allowing image/* up to 5MB."""
    return make_provider_record()


@pytest.fixture
def provider_repo(provider: StorageProviderRecord) -> InMemoryProviderRepository:
    return InMemoryProviderRepository([provider])


@pytest.fixture
def file_repo() -> InMemoryFileRepository:
    return InMemoryFileRepository()


@pytest.fixture
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def registry(backend: RecordingBackend) -> ProviderClientRegistry:
    """Registry whose every provider kind resolves to the recording backend."""
    return ProviderClientRegistry({kind: (lambda config, base_url: backend) for kind in ProviderType})


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    return make_png


@pytest.fixture
def gif_bytes() -> bytes:
    return make_gif()


@pytest.fixture
def settings_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[..., None]]:
    """Set env vars and reload settings for the rest of the test."""

    def _set(**values: Any) -> None:
        for key, value in values.items():
            monkeypatch.setenv(key.upper(), str(value))
        get_settings.cache_clear()

    yield _set
    get_settings.cache_clear()


@pytest.fixture
async def sqlite_db(tmp_path: Path, settings_env: Callable[..., None]) -> AsyncIterator[None]:
    """Point DATABASE_URL at a fresh SQLite file and create the schema."""
    settings_env(database_url=f"sqlite+aiosqlite:///{tmp_path / 'filestore.db'}")
    await database.dispose_engine()
    database._ensure_engine()
    assert database.engine is not None
    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await database.dispose_engine()


@pytest.fixture
async def db_session(sqlite_db: None) -> AsyncIterator[AsyncSession]:
    """Session for repository tests. Rolls back after test."""
    assert database.AsyncSessionLocal is not None
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def local_provider_row(sqlite_db: None, tmp_path: Path) -> StorageProvider:
    """Committed default LOCAL provider writing under tmp_path/blobs."""
    assert database.AsyncSessionLocal is not None
    row = StorageProvider(
        id=generate_id(),
        name="local",
        provider_type=ProviderType.LOCAL,
        config={"base_path": str(tmp_path / "blobs")},
        base_url="http://files.test/blobs",
        is_default=True,
        is_active=True,
        sort=0,
        max_file_size=5 * 1024 * 1024,
        allowed_types="image/*",
    )
    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            session.add(row)
    return row


@pytest.fixture
def app() -> FastAPI:
    """Freshly built FastAPI app; settings are read at build time."""
    from filestore.main import create_app

    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
