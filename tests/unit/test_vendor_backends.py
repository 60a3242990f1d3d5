"""Unit tests for vendor SDK backends with the SDK client swapped for a fake.

Each class is skipped when its SDK (the 'storage' extra) is not installed.
"""

from types import SimpleNamespace
from typing import Any

import pytest

from filestore.domain.exceptions import ProviderConfigException
from filestore.infrastructure.exceptions import StorageDeleteError, StorageUploadError

BASE_URL = "https://cdn.example.com/"


class RecordingClient:
    """Records calls as (method, args, kwargs) and returns canned results."""

    def __init__(self, **results: Any) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []
        self.results = results

    def __getattr__(self, name: str):
        def method(*args: Any, **kwargs: Any) -> Any:
            self.calls.append((name, args, kwargs))
            result = self.results.get(name)
            if isinstance(result, Exception):
                raise result
            return result

        return method


class TestAliyunOSSBackend:
    @pytest.fixture
    def module(self):
        pytest.importorskip("oss2")
        from filestore.infrastructure.external.storage import aliyun_oss

        return aliyun_oss

    def test_missing_config(self, module) -> None:
        with pytest.raises(ProviderConfigException) as exc_info:
            module.create_aliyun_oss_backend({"bucket": "b"}, BASE_URL)
        assert exc_info.value.details["missing"] == [
            "access_key_id",
            "access_key_secret",
            "region",
        ]

    async def test_upload_and_exists(self, module) -> None:
        backend = module.create_aliyun_oss_backend(
            {
                "access_key_id": "id",
                "access_key_secret": "secret",
                "region": "oss-cn-hangzhou",
                "bucket": "media",
            },
            BASE_URL,
        )
        client = RecordingClient(object_exists=True)
        backend._bucket = client

        url = await backend.upload("posts/a.png", b"data", "image/png")

        assert url == "https://cdn.example.com/posts/a.png"
        assert client.calls[0] == (
            "put_object",
            ("posts/a.png", b"data"),
            {"headers": {"Content-Type": "image/png"}},
        )
        assert await backend.exists("posts/a.png")


class TestTencentCOSBackend:
    @pytest.fixture
    def backend(self):
        pytest.importorskip("qcloud_cos")
        from filestore.infrastructure.external.storage.tencent_cos import (
            create_tencent_cos_backend,
        )

        return create_tencent_cos_backend(
            {
                "secret_id": "id",
                "secret_key": "secret",
                "region": "ap-guangzhou",
                "bucket": "media-1250000000",
            },
            BASE_URL,
        )

    async def test_upload_delete_exists(self, backend) -> None:
        client = RecordingClient(object_exists=False)
        backend._client = client

        await backend.upload("a.png", b"data", "image/png")
        await backend.delete("a.png")
        assert not await backend.exists("a.png")

        assert [c[0] for c in client.calls] == ["put_object", "delete_object", "object_exists"]
        assert client.calls[0][2] == {
            "Bucket": "media-1250000000",
            "Body": b"data",
            "Key": "a.png",
            "ContentType": "image/png",
        }


class TestQiniuBackend:
    @pytest.fixture
    def module(self):
        pytest.importorskip("qiniu")
        from filestore.infrastructure.external.storage import qiniu_storage

        return qiniu_storage

    @pytest.fixture
    def backend(self, module):
        return module.create_qiniu_backend(
            {"access_key": "ak", "secret_key": "sk", "bucket": "media", "zone": "z2"},
            BASE_URL,
        )

    def test_upload_host(self, module) -> None:
        assert module._upload_host("z0") == "https://up.qiniup.com"
        assert module._upload_host("z2") == "https://up-z2.qiniup.com"

    async def test_upload_passes_zone(self, module, backend, monkeypatch) -> None:
        seen: dict[str, Any] = {}

        def put_data(token, key, data, **kwargs):
            seen.update(key=key, data=data, **kwargs)
            return {}, SimpleNamespace(status_code=200)

        monkeypatch.setattr(module.qiniu, "put_data", put_data)

        url = await backend.upload("a.png", b"data", "image/png")

        assert url == "https://cdn.example.com/a.png"
        assert seen["key"] == "a.png"
        assert seen["mime_type"] == "image/png"
        assert len(seen["regions"]) == 1

    async def test_upload_failure(self, module, backend, monkeypatch) -> None:
        monkeypatch.setattr(
            module.qiniu,
            "put_data",
            lambda *a, **k: (None, SimpleNamespace(status_code=401)),
        )
        with pytest.raises(StorageUploadError):
            await backend.upload("a.png", b"data", "image/png")

    @pytest.mark.parametrize("status", [200, 612])
    async def test_delete_tolerates_missing(self, backend, status: int) -> None:
        backend._manager = RecordingClient(delete=(None, SimpleNamespace(status_code=status)))
        await backend.delete("a.png")

    async def test_delete_failure(self, backend) -> None:
        backend._manager = RecordingClient(delete=(None, SimpleNamespace(status_code=599)))
        with pytest.raises(StorageDeleteError):
            await backend.delete("a.png")


class TestUpyunBackend:
    @pytest.fixture
    def upyun(self):
        return pytest.importorskip("upyun")

    @pytest.fixture
    def backend(self, upyun):
        from filestore.infrastructure.external.storage.upyun_storage import (
            create_upyun_backend,
        )

        return create_upyun_backend(
            {"operator": "op", "password": "pw", "bucket": "media"}, BASE_URL
        )

    def service_error(self, upyun, status: int) -> Exception:
        class ServiceError(upyun.UpYunServiceException):
            def __init__(self) -> None:
                Exception.__init__(self, f"HTTP {status}")
                self.status = status

        return ServiceError()

    async def test_upload_uses_absolute_path(self, backend) -> None:
        client = RecordingClient()
        backend._client = client

        await backend.upload("posts/a.png", b"data", "image/png")

        assert client.calls[0] == (
            "put",
            ("/posts/a.png", b"data"),
            {"headers": {"Content-Type": "image/png"}},
        )

    async def test_missing_object(self, upyun, backend) -> None:
        backend._client = RecordingClient(
            delete=self.service_error(upyun, 404), getinfo=self.service_error(upyun, 404)
        )
        await backend.delete("a.png")
        assert not await backend.exists("a.png")

    async def test_delete_failure(self, upyun, backend) -> None:
        backend._client = RecordingClient(delete=self.service_error(upyun, 500))
        with pytest.raises(StorageDeleteError):
            await backend.delete("a.png")
