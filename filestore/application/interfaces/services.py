"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators the storage use case drives (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from filestore.application.dtos.storage import FetchedFile, StorageProviderRecord


class IStorageBackend(Protocol):
    """One configured blob store (local disk, S3, OSS, ...)."""

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Write data under key; return its public URL."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Missing keys are not an error."""
        ...

    def get_url(self, key: str) -> str:
        """Public URL for key."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if key exists."""
        ...


class IProviderClientRegistry(Protocol):
    """Provider id -> constructed backend cache."""

    def get_provider_client(self, provider: StorageProviderRecord) -> IStorageBackend:
        """Return the cached backend for provider, building it on first use."""
        ...

    def clear_provider_cache(self, provider_id: int) -> None:
        """Drop one cached backend (after a provider's config changes)."""
        ...


class IUrlGuard(Protocol):
    """SSRF policy for remote ingestion."""

    async def check(self, url: str) -> None:
        """Raise SSRFRejectedException when url must not be fetched."""
        ...


class IRemoteFetcher(Protocol):
    """Bounded HTTP download."""

    async def fetch(self, url: str, timeout_ms: int) -> FetchedFile:
        """Download url; raise FileTooLargeException / RemoteFetchException."""
        ...
