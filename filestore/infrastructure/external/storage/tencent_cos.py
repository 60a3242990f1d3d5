"""Tencent Cloud COS backend (cos-python-sdk-v5, run in worker threads)."""

from __future__ import annotations

import asyncio
from typing import Any

from qcloud_cos import CosConfig, CosS3Client
from qcloud_cos.cos_exception import CosClientError, CosServiceError

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)


class TencentCOSBackend(BaseStorageBackend):
    """Tencent Cloud Object Storage bucket."""

    provider_type = ProviderType.TENCENT_COS

    def __init__(self, config: dict[str, Any], base_url: str) -> None:
        require_config(
            self.provider_type,
            config,
            ("secret_id", "secret_key", "region", "bucket"),
        )
        super().__init__(base_url)
        self.bucket = config["bucket"]
        cos_config = CosConfig(
            Region=config["region"],
            SecretId=config["secret_id"],
            SecretKey=config["secret_key"],
            Scheme="https",
        )
        self._client = CosS3Client(cos_config)

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Body=data,
                Key=key,
                ContentType=content_type,
            )
        except (CosClientError, CosServiceError) as e:
            raise StorageUploadError(key, str(e)) from e
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self.bucket, Key=key
            )
        except (CosClientError, CosServiceError) as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(
            self._client.object_exists, Bucket=self.bucket, Key=key
        )


def create_tencent_cos_backend(
    config: dict[str, Any], base_url: str
) -> TencentCOSBackend:
    """Factory for ProviderType.TENCENT_COS."""
    return TencentCOSBackend(config, base_url)
