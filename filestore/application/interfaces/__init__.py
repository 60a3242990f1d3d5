"""Application ports (Protocols) implemented by infrastructure."""

from filestore.application.interfaces.repositories import (
    IStorageFileRepository,
    IStorageProviderRepository,
)
from filestore.application.interfaces.services import (
    IProviderClientRegistry,
    IRemoteFetcher,
    IStorageBackend,
    IUrlGuard,
)

__all__ = [
    "IProviderClientRegistry",
    "IRemoteFetcher",
    "IStorageBackend",
    "IStorageFileRepository",
    "IStorageProviderRepository",
    "IUrlGuard",
]
