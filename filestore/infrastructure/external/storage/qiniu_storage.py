"""Qiniu Kodo backend (qiniu SDK, run in worker threads).

The SDK reports failures through ResponseInfo.status_code rather than
exceptions; 612 means the key does not exist.
"""

from __future__ import annotations

import asyncio
from typing import Any

import qiniu

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)

QINIU_NOT_FOUND = 612
UPLOAD_TOKEN_TTL_SECONDS = 3600


def _upload_host(zone: str) -> str:
    # z0 (East China) is the bare host; other zones carry a suffix.
    return "https://up.qiniup.com" if zone == "z0" else f"https://up-{zone}.qiniup.com"


class QiniuBackend(BaseStorageBackend):
    """Qiniu bucket."""

    provider_type = ProviderType.QINIU

    def __init__(self, config: dict[str, Any], base_url: str) -> None:
        require_config(self.provider_type, config, ("access_key", "secret_key", "bucket"))
        super().__init__(base_url)
        self.bucket = config["bucket"]
        self.zone: str | None = config.get("zone") or None
        self._auth = qiniu.Auth(config["access_key"], config["secret_key"])
        self._manager = qiniu.BucketManager(self._auth)

    def _upload_sync(self, key: str, data: bytes, content_type: str) -> None:
        token = self._auth.upload_token(self.bucket, key, UPLOAD_TOKEN_TTL_SECONDS)
        extra: dict[str, Any] = {}
        if self.zone:
            extra["regions"] = [qiniu.Zone(up_host=_upload_host(self.zone))]
        _, info = qiniu.put_data(token, key, data, mime_type=content_type, **extra)
        if info.status_code != 200:
            raise StorageUploadError(key, f"Qiniu upload failed with status {info.status_code}")

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        await asyncio.to_thread(self._upload_sync, key, data, content_type)
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        _, info = await asyncio.to_thread(self._manager.delete, self.bucket, key)
        if info.status_code not in (200, QINIU_NOT_FOUND):
            raise StorageDeleteError(key, f"Qiniu delete failed with status {info.status_code}")

    async def exists(self, key: str) -> bool:
        _, info = await asyncio.to_thread(self._manager.stat, self.bucket, key)
        return info.status_code == 200


def create_qiniu_backend(config: dict[str, Any], base_url: str) -> QiniuBackend:
    """Factory for ProviderType.QINIU."""
    return QiniuBackend(config, base_url)
