"""Application services: hashing, key derivation, validation, URL guard."""

from filestore.application.services.content_hasher import hash_bytes, hash_stream
from filestore.application.services.file_validator import (
    ValidationResult,
    validate_file_content,
    validate_file_size,
    validate_file_type,
    validate_image_file,
)
from filestore.application.services.storage_key_generator import (
    generate_storage_key,
    get_extension_from_mime_type,
)
from filestore.application.services.url_guard import UrlGuard

__all__ = [
    "UrlGuard",
    "ValidationResult",
    "generate_storage_key",
    "get_extension_from_mime_type",
    "hash_bytes",
    "hash_stream",
    "validate_file_content",
    "validate_file_size",
    "validate_file_type",
    "validate_image_file",
]
