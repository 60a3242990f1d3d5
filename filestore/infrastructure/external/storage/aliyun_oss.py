"""Aliyun OSS backend (oss2 SDK, run in worker threads)."""

from __future__ import annotations

import asyncio
from typing import Any

import oss2
from oss2.exceptions import OssError

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)


class AliyunOSSBackend(BaseStorageBackend):
    """Aliyun Object Storage Service bucket."""

    provider_type = ProviderType.ALIYUN_OSS

    def __init__(self, config: dict[str, Any], base_url: str) -> None:
        require_config(
            self.provider_type,
            config,
            ("access_key_id", "access_key_secret", "region", "bucket"),
        )
        super().__init__(base_url)
        endpoint = config.get("endpoint") or f"https://{config['region']}.aliyuncs.com"
        auth = oss2.Auth(config["access_key_id"], config["access_key_secret"])
        self._bucket = oss2.Bucket(auth, endpoint, config["bucket"])

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._bucket.put_object,
                key,
                data,
                headers={"Content-Type": content_type},
            )
        except OssError as e:
            raise StorageUploadError(key, str(e)) from e
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._bucket.delete_object, key)
        except OssError as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._bucket.object_exists, key)


def create_aliyun_oss_backend(config: dict[str, Any], base_url: str) -> AliyunOSSBackend:
    """Factory for ProviderType.ALIYUN_OSS."""
    return AliyunOSSBackend(config, base_url)
