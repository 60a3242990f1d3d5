"""Upyun USS backend (upyun SDK, run in worker threads)."""

from __future__ import annotations

import asyncio
from typing import Any

import upyun

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)


def _is_not_found(exc: Exception) -> bool:
    return getattr(exc, "status", None) == 404


class UpyunBackend(BaseStorageBackend):
    """Upyun storage service."""

    provider_type = ProviderType.UPYUN

    def __init__(self, config: dict[str, Any], base_url: str) -> None:
        require_config(self.provider_type, config, ("operator", "password", "bucket"))
        super().__init__(base_url)
        self._client = upyun.UpYun(
            config["bucket"],
            username=config["operator"],
            password=config["password"],
        )

    @staticmethod
    def _path(key: str) -> str:
        return "/" + key.lstrip("/")

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            await asyncio.to_thread(
                self._client.put,
                self._path(key),
                data,
                headers={"Content-Type": content_type},
            )
        except (upyun.UpYunServiceException, upyun.UpYunClientException) as e:
            raise StorageUploadError(key, str(e)) from e
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._client.delete, self._path(key))
        except upyun.UpYunServiceException as e:
            if _is_not_found(e):
                return
            raise StorageDeleteError(key, str(e)) from e
        except upyun.UpYunClientException as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        try:
            await asyncio.to_thread(self._client.getinfo, self._path(key))
        except upyun.UpYunServiceException as e:
            if _is_not_found(e):
                return False
            raise
        return True


def create_upyun_backend(config: dict[str, Any], base_url: str) -> UpyunBackend:
    """Factory for ProviderType.UPYUN."""
    return UpyunBackend(config, base_url)
