"""Local filesystem storage with path validation and atomic writes."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os

from filestore.domain.enums import ProviderType
from filestore.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePermissionError,
    StorageUploadError,
)
from filestore.infrastructure.external.storage.base import (
    BaseStorageBackend,
    require_config,
)


class LocalStorageBackend(BaseStorageBackend):
    """Local filesystem storage rooted at config['base_path'].

    Keys are validated against the root. Writes use temp file + rename so a
    reader never sees a half-written object.
    """

    provider_type = ProviderType.LOCAL

    def __init__(self, config: dict[str, Any], base_url: str) -> None:
        """Initialize local storage.

        Args:
            config: Provider config; requires base_path.
            base_url: Public URL prefix the files are served from.
        """
        require_config(self.provider_type, config, ("base_path",))
        super().__init__(base_url)
        self.storage_root = Path(config["base_path"]).resolve()

    def _get_full_path(self, key: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / key).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(key, "path_validation") from e
        if full_path == self.storage_root:
            raise StoragePermissionError(key, "path_validation")
        return full_path

    async def upload(self, key: str, data: bytes, content_type: str) -> str:
        """Write data atomically; existing objects at key are replaced."""
        target_path = self._get_full_path(key)
        try:
            await aiofiles.os.makedirs(target_path.parent, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(data)
                await aiofiles.os.replace(temp_path, target_path)
            finally:
                if await aiofiles.os.path.exists(temp_path):
                    await aiofiles.os.remove(temp_path)
        except OSError as e:
            raise StorageUploadError(key, str(e)) from e
        return self.get_url(key)

    async def delete(self, key: str) -> None:
        """Delete the file; a missing file is not an error."""
        file_path = self._get_full_path(key)
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageDeleteError(key, str(e)) from e

    async def exists(self, key: str) -> bool:
        """Return True if the file exists."""
        return await aiofiles.os.path.isfile(self._get_full_path(key))


def create_local_backend(config: dict[str, Any], base_url: str) -> LocalStorageBackend:
    """Factory for ProviderType.LOCAL."""
    return LocalStorageBackend(config, base_url)
