"""Provider client registry: provider id -> constructed storage backend.

Each ProviderType maps to a factory that imports its vendor SDK only when
a backend of that kind is first built, so deployments install only the
SDKs they use.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from filestore.application.dtos.storage import StorageProviderRecord
from filestore.domain.enums import ProviderType
from filestore.domain.exceptions import UnsupportedProviderTypeException
from filestore.infrastructure.external.storage.protocol import StorageBackendProtocol

logger = logging.getLogger(__name__)

BackendFactory = Callable[[dict[str, Any], str], StorageBackendProtocol]

_INSTALL_HINT = "Install with: pip install 'filestore[storage]'"


def _sdk_missing(provider_type: ProviderType, sdk: str) -> ValueError:
    return ValueError(f"{provider_type.value} backend requires {sdk}. {_INSTALL_HINT}")


def _local(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    from filestore.infrastructure.external.storage.local_storage import (
        create_local_backend,
    )

    return create_local_backend(config, base_url)


def _aws_s3(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.s3_storage import (
            create_s3_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.AWS_S3, "boto3") from e
    return create_s3_backend(config, base_url)


def _minio(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.s3_storage import (
            create_minio_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.MINIO, "boto3") from e
    return create_minio_backend(config, base_url)


def _aliyun_oss(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.aliyun_oss import (
            create_aliyun_oss_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.ALIYUN_OSS, "oss2") from e
    return create_aliyun_oss_backend(config, base_url)


def _tencent_cos(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.tencent_cos import (
            create_tencent_cos_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.TENCENT_COS, "cos-python-sdk-v5") from e
    return create_tencent_cos_backend(config, base_url)


def _qiniu(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.qiniu_storage import (
            create_qiniu_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.QINIU, "qiniu") from e
    return create_qiniu_backend(config, base_url)


def _upyun(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    try:
        from filestore.infrastructure.external.storage.upyun_storage import (
            create_upyun_backend,
        )
    except ImportError as e:
        raise _sdk_missing(ProviderType.UPYUN, "upyun") from e
    return create_upyun_backend(config, base_url)


def _vercel_blob(config: dict[str, Any], base_url: str) -> StorageBackendProtocol:
    from filestore.infrastructure.external.storage.vercel_blob import (
        create_vercel_blob_backend,
    )

    return create_vercel_blob_backend(config, base_url)


DEFAULT_FACTORIES: dict[ProviderType, BackendFactory] = {
    ProviderType.LOCAL: _local,
    ProviderType.VERCEL_BLOB: _vercel_blob,
    ProviderType.ALIYUN_OSS: _aliyun_oss,
    ProviderType.AWS_S3: _aws_s3,
    ProviderType.TENCENT_COS: _tencent_cos,
    ProviderType.QINIU: _qiniu,
    ProviderType.UPYUN: _upyun,
    ProviderType.MINIO: _minio,
}


class ProviderClientRegistry:
    """Caches one backend per provider id.

    Concurrent first use may build two clients for the same provider; the
    last one stored wins and the other is dropped.
    """

    def __init__(self, factories: dict[ProviderType, BackendFactory] | None = None) -> None:
        self._factories: dict[ProviderType, BackendFactory] = dict(factories or {})
        self._clients: dict[int, StorageBackendProtocol] = {}

    def register_factory(self, provider_type: ProviderType, factory: BackendFactory) -> None:
        """Register (or replace) the factory for a provider kind."""
        self._factories[provider_type] = factory

    def get_provider_client(self, provider: StorageProviderRecord) -> StorageBackendProtocol:
        """Return the cached backend for provider, building it on first use.

        Raises:
            UnsupportedProviderTypeException: No factory for provider.provider_type.
            ProviderConfigException: Required config keys are missing.
        """
        client = self._clients.get(provider.id)
        if client is not None:
            return client

        try:
            factory = self._factories.get(ProviderType(provider.provider_type))
        except ValueError:
            factory = None
        if factory is None:
            raise UnsupportedProviderTypeException(str(provider.provider_type))

        logger.debug(
            "Building %s backend for provider %s", provider.provider_type, provider.id
        )
        client = factory(dict(provider.config or {}), provider.base_url)
        self._clients[provider.id] = client
        return client

    def clear_provider_cache(self, provider_id: int) -> None:
        """Drop one cached backend; call after a provider's config changes."""
        self._clients.pop(provider_id, None)

    def clear_all_provider_cache(self) -> None:
        """Drop every cached backend."""
        self._clients.clear()

    def __len__(self) -> int:
        return len(self._clients)


def build_default_registry() -> ProviderClientRegistry:
    """Registry with factories for all eight provider kinds."""
    return ProviderClientRegistry(DEFAULT_FACTORIES)
