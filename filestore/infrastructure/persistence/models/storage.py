"""Storage ORM models: providers (backends + policy) and files (blob metadata)."""

from typing import Any

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import true

from filestore.domain.enums import ProviderType, ReferenceType
from filestore.infrastructure.persistence.database import Base
from filestore.infrastructure.persistence.models.mixins import (
    SnowflakeIdMixin,
    SoftDeleteFlagMixin,
    TimestampMixin,
)


class StorageProvider(SnowflakeIdMixin, TimestampMixin, SoftDeleteFlagMixin, Base):
    """Configured storage destination. Table: storage_providers.

    config holds backend credentials; its shape depends on provider_type.
    """

    __tablename__ = "storage_providers"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    provider_type: Mapped[ProviderType] = mapped_column(
        Enum(ProviderType, name="storage_provider_type"), nullable=False
    )
    config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    base_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    sort: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_file_size: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    allowed_types: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        Index("ix_storage_providers_active_default", "is_active", "is_default"),
    )


class StorageFile(SnowflakeIdMixin, TimestampMixin, SoftDeleteFlagMixin, Base):
    """Stored blob metadata. Table: storage_files.

    (file_hash, provider_id) is indexed but not unique: racing identical
    uploads may both insert.
    """

    __tablename__ = "storage_files"

    provider_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("storage_providers.id"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    storage_key: Mapped[str] = mapped_column(String(500), nullable=False)
    file_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    is_public: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )
    reference_type: Mapped[ReferenceType] = mapped_column(
        Enum(ReferenceType, name="storage_reference_type"), nullable=False
    )
    metadata_: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    __table_args__ = (
        Index("ix_storage_files_hash_provider", "file_hash", "provider_id"),
        Index("ix_storage_files_reference_type", "reference_type"),
    )
