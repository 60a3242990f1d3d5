"""S3-compatible object storage (AWS S3 and MinIO).

Uses boto3 (sync) via asyncio.to_thread for the async API.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)

MINIO_REGION = "us-east-1"
_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


class S3StorageBackend(BaseStorageBackend):
    """S3 bucket backend. Path-style addressing whenever a custom endpoint is set."""

    provider_type = ProviderType.AWS_S3

    def __init__(
        self,
        bucket: str,
        base_url: str,
        region: str,
        access_key: str,
        secret_key: str,
        endpoint_url: str | None = None,
        provider_type: ProviderType = ProviderType.AWS_S3,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            base_url: Public URL prefix for objects.
            region: Region name.
            access_key: Access key id.
            secret_key: Secret access key.
            endpoint_url: Custom endpoint (MinIO, S3-compatible clouds).
            provider_type: Tag reported in errors and logs.
        """
        super().__init__(base_url)
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.provider_type = provider_type
        extra: dict[str, Any] = {}
        if endpoint_url:
            extra["endpoint_url"] = endpoint_url
            extra["config"] = BotoConfig(s3={"addressing_style": "path"})
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Put the object and return its public URL."""
        try:
            await asyncio.to_thread(
                self._client.put_object,
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageUploadError(key, str(e)) from e
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        """Delete the object (S3 treats missing keys as success)."""
        try:
            await asyncio.to_thread(
                self._client.delete_object, Bucket=self.bucket, Key=key
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        """Return True if object exists."""
        def _exists() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=key)
                return True
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                    return False
                raise

        return await asyncio.to_thread(_exists)


def create_s3_backend(config: dict[str, Any], base_url: str) -> S3StorageBackend:
    """Factory for ProviderType.AWS_S3."""
    require_config(
        ProviderType.AWS_S3,
        config,
        ("access_key_id", "secret_access_key", "region", "bucket"),
    )
    return S3StorageBackend(
        bucket=config["bucket"],
        base_url=base_url,
        region=config["region"],
        access_key=config["access_key_id"],
        secret_key=config["secret_access_key"],
        endpoint_url=config.get("endpoint") or None,
    )


def minio_endpoint(config: dict[str, Any]) -> str:
    """Build the MinIO endpoint URL; port defaults to 443 with SSL, 9000 without."""
    use_ssl = config.get("use_ssl", True) is not False
    scheme = "https" if use_ssl else "http"
    port = config.get("port") or (443 if use_ssl else 9000)
    return f"{scheme}://{config['endpoint']}:{port}"


def create_minio_backend(config: dict[str, Any], base_url: str) -> S3StorageBackend:
    """Factory for ProviderType.MINIO."""
    require_config(
        ProviderType.MINIO,
        config,
        ("endpoint", "access_key", "secret_key", "bucket"),
    )
    return S3StorageBackend(
        bucket=config["bucket"],
        base_url=base_url,
        region=MINIO_REGION,
        access_key=config["access_key"],
        secret_key=config["secret_key"],
        endpoint_url=minio_endpoint(config),
        provider_type=ProviderType.MINIO,
    )
