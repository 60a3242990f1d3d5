"""SQLAlchemy mixins shared by the storage models.

Provides: SnowflakeIdMixin, TimestampMixin, SoftDeleteFlagMixin.
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import false, func

from filestore.shared.utils.generators import generate_id


class SnowflakeIdMixin:
    """Mixin for 64-bit time-ordered primary keys generated in the application."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(
            BigInteger, primary_key=True, autoincrement=False, default=generate_id
        )


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SoftDeleteFlagMixin:
    """Mixin for soft delete via is_deleted. Rows are never hard-deleted."""

    @declared_attr
    def is_deleted(cls) -> Mapped[bool]:
        return mapped_column(
            Boolean, nullable=False, default=False, server_default=false()
        )
