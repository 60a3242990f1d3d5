"""DTOs for storage use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from filestore.domain.enums import ProviderType, ReferenceType


@dataclass(frozen=True)
class StorageProviderRecord:
    """Storage provider read-model (result of get_by_id and get_default)."""

    id: int
    name: str
    provider_type: ProviderType
    config: dict[str, Any]
    base_url: str
    is_default: bool
    is_active: bool
    sort: int
    max_file_size: int | None
    allowed_types: str | None
    is_deleted: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class StorageFileCreate:
    """Input for creating a storage_files row (write-model). Use case builds this; repo persists and returns StorageFileResult."""

    id: int
    provider_id: int
    user_id: int
    original_filename: str
    mime_type: str
    file_size: int
    storage_key: str
    file_hash: str
    reference_type: ReferenceType
    is_public: bool = True
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class StorageFileResult:
    """Storage file read-model (result of get_by_id, find_by_hash_and_provider, create_file)."""

    id: int
    provider_id: int
    user_id: int
    original_filename: str
    mime_type: str
    file_size: int
    storage_key: str
    file_hash: str
    reference_type: ReferenceType
    is_public: bool
    is_deleted: bool
    created_at: datetime | None
    metadata: dict[str, Any] | None = None


@dataclass(frozen=True)
class UploadStream:
    """Streamed upload source.

    file is either an async reader (``await file.read(n)``, e.g. Starlette
    UploadFile) or a blocking binary file object.
    """

    file: Any
    filename: str | None
    content_type: str


@dataclass(frozen=True)
class UploadPayload:
    """In-memory upload source."""

    data: bytes
    mime_type: str
    name: str | None = None


@dataclass(frozen=True)
class UploadOptions:
    """Caller-supplied policy for one upload."""

    reference_type: ReferenceType
    user_id: int
    sub_path: str | None = None
    original_filename: str | None = None
    provider_id: int | None = None
    is_public: bool = True
    metadata: dict[str, Any] | None = field(default=None)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of upload / upload_from_url."""

    id: int
    url: str
    storage_key: str
    file_hash: str
    file_size: int
    mime_type: str
    deduplicated: bool


@dataclass(frozen=True)
class FileRecord:
    """Public view of a live stored file (get_file)."""

    id: int
    url: str
    storage_key: str
    mime_type: str
    file_size: int
    original_filename: str
    reference_type: ReferenceType
    created_at: datetime | None


@dataclass(frozen=True)
class FetchedFile:
    """Body and inferred attributes of a remote download."""

    data: bytes
    content_type: str
    filename: str | None
