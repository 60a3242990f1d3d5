"""Unit tests for storage backends that run without vendor credentials."""

import json
from pathlib import Path

import httpx
import pytest

from filestore.domain.enums import ProviderType
from filestore.domain.exceptions import ProviderConfigException
from filestore.infrastructure.exceptions import (
    StorageDeleteError,
    StoragePermissionError,
    StorageUploadError,
)
from filestore.infrastructure.external.storage.base import require_config
from filestore.infrastructure.external.storage.local_storage import LocalStorageBackend
from filestore.infrastructure.external.storage.vercel_blob import VercelBlobBackend


class TestRequireConfig:
    def test_lists_missing_and_empty_keys(self) -> None:
        with pytest.raises(ProviderConfigException) as exc_info:
            require_config(
                ProviderType.AWS_S3,
                {"bucket": "b", "region": ""},
                ("bucket", "region", "access_key_id"),
            )
        assert exc_info.value.details["missing"] == ["region", "access_key_id"]
        assert exc_info.value.error_code == "PROVIDER_CONFIG_ERROR"


class TestLocalStorageBackend:
    """Filesystem backend rooted at a temp directory."""

    @pytest.fixture
    def local(self, tmp_path: Path) -> LocalStorageBackend:
        return LocalStorageBackend({"base_path": str(tmp_path)}, "http://files.test/")

    async def test_upload_writes_file_and_returns_url(
        self, local: LocalStorageBackend, tmp_path: Path
    ) -> None:
        url = await local.upload("posts/2025/01/a.png", b"png-bytes", "image/png")

        assert url == "http://files.test/posts/2025/01/a.png"
        assert (tmp_path / "posts/2025/01/a.png").read_bytes() == b"png-bytes"
        assert await local.exists("posts/2025/01/a.png")

    async def test_upload_replaces_existing_object(
        self, local: LocalStorageBackend, tmp_path: Path
    ) -> None:
        await local.upload("avatars/1.png", b"old", "image/png")
        await local.upload("avatars/1.png", b"new", "image/png")

        assert (tmp_path / "avatars/1.png").read_bytes() == b"new"
        assert [p.name for p in (tmp_path / "avatars").iterdir()] == ["1.png"]

    async def test_delete_and_delete_missing(self, local: LocalStorageBackend) -> None:
        await local.upload("other/x.png", b"x", "image/png")

        await local.delete("other/x.png")
        await local.delete("other/x.png")

        assert not await local.exists("other/x.png")

    @pytest.mark.parametrize("key", ["../escape.png", "posts/../../escape.png", "."])
    async def test_traversal_is_rejected(
        self, local: LocalStorageBackend, key: str
    ) -> None:
        with pytest.raises(StoragePermissionError):
            await local.upload(key, b"x", "image/png")

    def test_requires_base_path(self) -> None:
        with pytest.raises(ProviderConfigException):
            LocalStorageBackend({}, "http://files.test")


class TestVercelBlobBackend:
    """Blob REST calls against httpx.MockTransport."""

    def backend(self, handler) -> VercelBlobBackend:
        return VercelBlobBackend(
            {"token": "vercel-token"},
            "https://store.public.blob.vercel-storage.com",
            transport=httpx.MockTransport(handler),
        )

    async def test_upload_puts_object_with_auth(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"url": "https://store.public.blob.vercel-storage.com/a/b.png"}
            )

        url = await self.backend(handler).upload("a/b.png", b"data", "image/png")

        assert url == "https://store.public.blob.vercel-storage.com/a/b.png"
        request = seen[0]
        assert request.method == "PUT"
        assert str(request.url) == "https://blob.vercel-storage.com/a/b.png"
        assert request.headers["authorization"] == "Bearer vercel-token"
        assert request.headers["x-content-type"] == "image/png"
        assert request.content == b"data"

    async def test_upload_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403)

        with pytest.raises(StorageUploadError):
            await self.backend(handler).upload("a/b.png", b"data", "image/png")

    async def test_delete_posts_public_url(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == "https://blob.vercel-storage.com/delete"
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={})

        await self.backend(handler).delete("a/b.png")

        assert bodies == [{"urls": ["https://store.public.blob.vercel-storage.com/a/b.png"]}]

    async def test_delete_error_is_wrapped(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        with pytest.raises(StorageDeleteError):
            await self.backend(handler).delete("a/b.png")

    async def test_exists(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            found = request.url.params["url"].endswith("/here.png")
            return httpx.Response(200 if found else 404, json={})

        backend = self.backend(handler)
        assert await backend.exists("here.png")
        assert not await backend.exists("gone.png")
