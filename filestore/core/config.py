"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Range checks run at load time; DATABASE_URL may be
empty, in which case routes that need SQL answer 503.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from filestore.shared.utils.generators import MAX_WORKER_ID


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "filestore"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (async SQLAlchemy URL, e.g. postgresql+asyncpg://...)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool overrides (None = SQLAlchemy defaults)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Uploads
    max_upload_size: int = 20 * 1024 * 1024  # request body ceiling
    upload_chunk_size: int = 64 * 1024

    # Remote ingestion (upload_from_url)
    remote_fetch_max_bytes: int = 10 * 1024 * 1024
    remote_fetch_timeout_ms: int = 10_000
    remote_fetch_resolve_dns: bool = True
    remote_fetch_user_agent: str = "filestore/1.0"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    # Set by the upstream gateway after authentication.
    user_id_header: str = "X-User-ID"

    # Worker id embedded in generated row ids; unique per process.
    id_worker_id: int = 0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_ranges(self) -> "Settings":
        """Reject limits that would make uploads or fetches impossible."""
        if not 0 <= self.id_worker_id <= MAX_WORKER_ID:
            raise ValueError(
                f"ID_WORKER_ID must be between 0 and {MAX_WORKER_ID}, "
                f"got {self.id_worker_id}"
            )
        for name in (
            "max_upload_size",
            "upload_chunk_size",
            "remote_fetch_max_bytes",
            "remote_fetch_timeout_ms",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be positive")
        return self

    @property
    def sql_configured(self) -> bool:
        """True when DATABASE_URL is set."""
        return bool(self.database_url)

    @property
    def cors_origins(self) -> list[str]:
        """allowed_origins split on commas, blanks dropped."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
