"""Storage backend protocol (DIP). One implementation per ProviderType."""

from typing import Protocol


class StorageBackendProtocol(Protocol):
    """Protocol for blob store backends (local disk, S3-compatible, vendor clouds).

    get_url is pure string work; everything else may touch the network.
    """

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Write data under key and return its public URL."""
        ...

    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key succeeds."""
        ...

    def get_url(self, key: str) -> str:
        """Return base_url joined with key."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if key exists."""
        ...
