"""Vercel Blob backend over the Blob REST API (httpx)."""

from __future__ import annotations

from typing import Any

import httpx

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)

BLOB_API_URL = "https://blob.vercel-storage.com"
BLOB_API_VERSION = "7"
DEFAULT_TIMEOUT_SECONDS = 30.0


class VercelBlobBackend(BaseStorageBackend):
    """Vercel Blob store. Objects are public; upload returns the URL the API reports.

    Args:
        config: Provider config; requires token.
        base_url: Public store URL used by get_url.
        transport: Optional httpx transport (tests).
    """

    provider_type = ProviderType.VERCEL_BLOB

    def __init__(
        self,
        config: dict[str, Any],
        base_url: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        require_config(self.provider_type, config, ("token",))
        super().__init__(base_url)
        self._token = config["token"]
        self._api_url = (config.get("api_url") or BLOB_API_URL).rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={
                "authorization": f"Bearer {self._token}",
                "x-api-version": BLOB_API_VERSION,
            },
            timeout=DEFAULT_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        try:
            async with self._client() as client:
                resp = await client.put(
                    f"{self._api_url}/{key}",
                    content=data,
                    headers={
                        "x-content-type": content_type,
                        "x-add-random-suffix": "0",
                    },
                )
                resp.raise_for_status()
                body = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise StorageUploadError(key, str(e)) from e
        return str(body.get("url") or self.get_url(key))

    async def delete(self, key: str) -> None:
        try:
            async with self._client() as client:
                resp = await client.post(
                    f"{self._api_url}/delete", json={"urls": [self.get_url(key)]}
                )
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        async with self._client() as client:
            resp = await client.get(self._api_url, params={"url": self.get_url(key)})
        if resp.status_code == 404:
            return False
        resp.raise_for_status()
        return True


def create_vercel_blob_backend(config: dict[str, Any], base_url: str) -> VercelBlobBackend:
    """Factory for ProviderType.VERCEL_BLOB."""
    return VercelBlobBackend(config, base_url)
