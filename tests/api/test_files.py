"""HTTP tests for /api/v1/files against SQLite and a LOCAL provider in tmp_path."""

from collections.abc import Callable
from pathlib import Path

import httpx
from fastapi import FastAPI
from httpx import AsyncClient

from filestore.infrastructure.external.http import RemoteFetcher
from filestore.infrastructure.persistence.models import StorageProvider

USER = {"X-User-ID": "7"}
OTHER_USER = {"X-User-ID": "8"}


async def upload_png(
    client: AsyncClient, data: bytes, headers: dict[str, str] = USER, **form: str
) -> httpx.Response:
    return await client.post(
        "/api/v1/files",
        headers=headers,
        files={"file": ("photo.png", data, "image/png")},
        data={"reference_type": "POST", **form},
    )


class TestAuthAndConfiguration:
    async def test_missing_user_header_is_401(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/files/1")
        assert response.status_code == 401
        assert response.json()["error"] == "AUTHENTICATION_ERROR"

    async def test_non_numeric_user_header_is_401(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/files/1", headers={"X-User-ID": "abc"})
        assert response.status_code == 401

    async def test_without_database_is_503(
        self, client: AsyncClient, png_factory: Callable[..., bytes]
    ) -> None:
        response = await upload_png(client, png_factory())
        assert response.status_code == 503
        assert response.json()["error"] == "SERVICE_UNAVAILABLE"

    async def test_no_provider_is_503(
        self, sqlite_db: None, client: AsyncClient, png_factory: Callable[..., bytes]
    ) -> None:
        response = await upload_png(client, png_factory())
        assert response.status_code == 503
        assert response.json()["error"] == "NO_PROVIDER_CONFIGURED"


class TestUploadLifecycle:
    """Upload, dedup, read, delete over HTTP with real local storage."""

    async def test_upload_dedup_get_delete(
        self,
        local_provider_row: StorageProvider,
        client: AsyncClient,
        tmp_path: Path,
        png_factory: Callable[..., bytes],
    ) -> None:
        data = png_factory(500 * 1024)

        first = await upload_png(client, data)
        assert first.status_code == 201
        body = first.json()
        assert body["deduplicated"] is False
        assert body["storage_key"].startswith("posts/")
        assert body["url"] == f"http://files.test/blobs/{body['storage_key']}"
        assert isinstance(body["id"], str)
        stored = tmp_path / "blobs" / body["storage_key"]
        assert stored.read_bytes() == data

        second = await upload_png(client, data, headers=OTHER_USER)
        assert second.status_code == 201
        assert second.json()["deduplicated"] is True
        assert second.json()["id"] == body["id"]

        meta = await client.get(f"/api/v1/files/{body['id']}", headers=USER)
        assert meta.status_code == 200
        assert meta.json()["original_filename"] == "photo.png"
        assert meta.json()["reference_type"] == "POST"
        assert meta.json()["file_size"] == len(data)

        url = await client.get(f"/api/v1/files/{body['id']}/url", headers=USER)
        assert url.json() == {"url": body["url"]}

        deleted = await client.delete(f"/api/v1/files/{body['id']}", headers=USER)
        assert deleted.status_code == 204
        assert not stored.exists()

        gone = await client.get(f"/api/v1/files/{body['id']}/url", headers=USER)
        assert gone.status_code == 404
        assert gone.json()["error"] == "RESOURCE_NOT_FOUND"

    async def test_avatar_key_is_per_user(
        self,
        local_provider_row: StorageProvider,
        client: AsyncClient,
        png_factory: Callable[..., bytes],
    ) -> None:
        response = await client.post(
            "/api/v1/files",
            headers=USER,
            files={"file": ("me.png", png_factory(seed=b"me"), "image/png")},
            data={"reference_type": "AVATAR"},
        )
        assert response.status_code == 201
        assert response.json()["storage_key"] == "avatars/7.png"

    async def test_mismatched_content_is_400(
        self,
        local_provider_row: StorageProvider,
        client: AsyncClient,
        gif_bytes: bytes,
    ) -> None:
        response = await upload_png(client, gif_bytes)
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_expression_requires_sub_path(
        self,
        local_provider_row: StorageProvider,
        client: AsyncClient,
        png_factory: Callable[..., bytes],
    ) -> None:
        response = await client.post(
            "/api/v1/files",
            headers=USER,
            files={"file": ("e.png", png_factory(), "image/png")},
            data={"reference_type": "EXPRESSION"},
        )
        assert response.status_code == 400
        assert response.json()["details"] == {"field": "sub_path"}

    async def test_expression_sub_path_traversal_is_400(
        self,
        local_provider_row: StorageProvider,
        client: AsyncClient,
        png_factory: Callable[..., bytes],
    ) -> None:
        response = await client.post(
            "/api/v1/files",
            headers=USER,
            files={"file": ("e.png", png_factory(), "image/png")},
            data={"reference_type": "EXPRESSION", "sub_path": "../../x"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"
        assert response.json()["details"] == {"field": "sub_path"}

    async def test_get_unknown_file_is_404(
        self, local_provider_row: StorageProvider, client: AsyncClient
    ) -> None:
        response = await client.get("/api/v1/files/12345", headers=USER)
        assert response.status_code == 404


class TestUploadFromUrl:
    async def test_internal_address_is_403(
        self, local_provider_row: StorageProvider, client: AsyncClient
    ) -> None:
        response = await client.post(
            "/api/v1/files/from-url",
            headers=USER,
            json={"url": "http://169.254.169.254/latest/meta-data/"},
        )
        assert response.status_code == 403
        assert response.json()["error"] == "ACCESS_DENIED"

    async def test_remote_file_is_stored(
        self,
        local_provider_row: StorageProvider,
        app: FastAPI,
        client: AsyncClient,
        png_factory: Callable[..., bytes],
    ) -> None:
        data = png_factory(seed=b"remote")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"Content-Type": "image/png"}, content=data)

        app.state.remote_fetcher = RemoteFetcher(transport=httpx.MockTransport(handler))

        response = await client.post(
            "/api/v1/files/from-url",
            headers=USER,
            json={"url": "https://images.example.com/cat.png"},
        )

        assert response.status_code == 201
        file_id = response.json()["id"]
        meta = await client.get(f"/api/v1/files/{file_id}", headers=USER)
        assert meta.json()["original_filename"] == "cat.png"

    async def test_remote_error_is_502(
        self, local_provider_row: StorageProvider, app: FastAPI, client: AsyncClient
    ) -> None:
        app.state.remote_fetcher = RemoteFetcher(
            transport=httpx.MockTransport(lambda request: httpx.Response(500))
        )

        response = await client.post(
            "/api/v1/files/from-url",
            headers=USER,
            json={"url": "https://images.example.com/cat.png"},
        )

        assert response.status_code == 502
        assert response.json()["error"] == "REMOTE_FETCH_ERROR"

    async def test_timeout_out_of_range_is_422(
        self, local_provider_row: StorageProvider, client: AsyncClient
    ) -> None:
        response = await client.post(
            "/api/v1/files/from-url",
            headers=USER,
            json={"url": "https://images.example.com/cat.png", "timeout_ms": 5},
        )
        assert response.status_code == 422
