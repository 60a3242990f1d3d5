"""Storage backends and the provider client registry.

Backend modules import their vendor SDK at module level; only the
registry's factories import them, and only on first use.
"""

from filestore.infrastructure.external.storage.protocol import StorageBackendProtocol
from filestore.infrastructure.external.storage.registry import (
    DEFAULT_FACTORIES,
    BackendFactory,
    ProviderClientRegistry,
    build_default_registry,
)

__all__ = [
    "BackendFactory",
    "DEFAULT_FACTORIES",
    "ProviderClientRegistry",
    "StorageBackendProtocol",
    "build_default_registry",
]
