"""create_storage_providers_and_storage_files

Revision ID: 4b1e7c2d9a10
Revises:
Create Date: 2026-10-17 09:12:44.518203

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4b1e7c2d9a10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

provider_type = sa.Enum(
    "LOCAL",
    "VERCEL_BLOB",
    "ALIYUN_OSS",
    "AWS_S3",
    "TENCENT_COS",
    "QINIU",
    "UPYUN",
    "MINIO",
    name="storage_provider_type",
)
reference_type = sa.Enum(
    "POST", "AVATAR", "EXPRESSION", "SITE", "OTHER", name="storage_reference_type"
)


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "storage_providers",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("provider_type", provider_type, nullable=False),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column("base_url", sa.String(length=500), nullable=False),
        sa.Column("is_default", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("sort", sa.Integer(), nullable=False),
        sa.Column("max_file_size", sa.BigInteger(), nullable=True),
        sa.Column("allowed_types", sa.String(length=500), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_storage_providers_active_default",
        "storage_providers",
        ["is_active", "is_default"],
    )

    op.create_table(
        "storage_files",
        sa.Column("id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("provider_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("original_filename", sa.String(length=255), nullable=False),
        sa.Column("mime_type", sa.String(length=100), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("storage_key", sa.String(length=500), nullable=False),
        sa.Column("file_hash", sa.String(length=64), nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("reference_type", reference_type, nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["provider_id"], ["storage_providers.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    # Not unique: racing identical uploads may both insert.
    op.create_index(
        "ix_storage_files_hash_provider",
        "storage_files",
        ["file_hash", "provider_id"],
    )
    op.create_index("ix_storage_files_user_id", "storage_files", ["user_id"])
    op.create_index(
        "ix_storage_files_reference_type", "storage_files", ["reference_type"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_storage_files_reference_type", table_name="storage_files")
    op.drop_index("ix_storage_files_user_id", table_name="storage_files")
    op.drop_index("ix_storage_files_hash_provider", table_name="storage_files")
    op.drop_table("storage_files")
    op.drop_index("ix_storage_providers_active_default", table_name="storage_providers")
    op.drop_table("storage_providers")
    reference_type.drop(op.get_bind(), checkfirst=True)
    provider_type.drop(op.get_bind(), checkfirst=True)
