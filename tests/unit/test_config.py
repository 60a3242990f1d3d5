"""Unit tests for Settings range checks."""

import pytest
from pydantic import ValidationError

from filestore.core.config import Settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(database_url="")
        assert not settings.sql_configured
        assert settings.remote_fetch_max_bytes == 10 * 1024 * 1024
        assert settings.remote_fetch_timeout_ms == 10_000
        assert settings.user_id_header == "X-User-ID"

    def test_cors_origins_are_split(self) -> None:
        settings = Settings(allowed_origins=" https://a.example , ,https://b.example")
        assert settings.cors_origins == ["https://a.example", "https://b.example"]

    def test_worker_id_out_of_range(self) -> None:
        with pytest.raises(ValidationError, match="ID_WORKER_ID"):
            Settings(id_worker_id=1024)

    @pytest.mark.parametrize(
        "field", ["max_upload_size", "remote_fetch_max_bytes", "remote_fetch_timeout_ms"]
    )
    def test_limits_must_be_positive(self, field: str) -> None:
        with pytest.raises(ValidationError, match=field.upper()):
            Settings(**{field: 0})
