"""Upload policy checks: declared type, declared size, and sniffed content.

Validators return ValidationResult instead of raising; the storage use
case turns an invalid result into FileValidationException.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import filetype

from filestore.application.dtos.storage import StorageProviderRecord
from filestore.domain.enums import ReferenceType

ALLOWED_IMAGE_TYPES: tuple[str, ...] = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
)

_MB = 1024 * 1024

DEFAULT_MAX_FILE_SIZES: dict[ReferenceType, int] = {
    ReferenceType.POST: 5 * _MB,
    ReferenceType.AVATAR: 5 * _MB,
    ReferenceType.EXPRESSION: 2 * _MB,
    ReferenceType.SITE: 10 * _MB,
    ReferenceType.OTHER: 5 * _MB,
}

# Declared aliases that name the same format as the sniffed type.
_MIME_ALIASES = {"image/jpg": "image/jpeg", "image/x-icon": "image/vnd.microsoft.icon"}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one check; error is set when valid is False."""

    valid: bool
    error: str | None = None


_OK = ValidationResult(valid=True)


def _normalize(mime_type: str) -> str:
    base = mime_type.split(";", 1)[0].strip().lower()
    return _MIME_ALIASES.get(base, base)


def validate_file_type(mime_type: str, allowed_types: str | None) -> ValidationResult:
    """Check mime_type against a comma-separated allow-list.

    Entries match exactly or as ``type/*`` prefixes. An empty or missing
    list allows everything.
    """
    if not allowed_types:
        return _OK

    for allowed in (t.strip() for t in allowed_types.split(",")):
        if allowed == mime_type:
            return _OK
        if allowed.endswith("/*") and mime_type.startswith(allowed[:-1]):
            return _OK

    return ValidationResult(
        valid=False,
        error=f"Invalid file type: {mime_type}. Allowed types: {allowed_types}",
    )


def validate_file_size(file_size: int, max_size: int | None) -> ValidationResult:
    """Check file_size against max_size in bytes (None means unlimited)."""
    if max_size is None:
        return _OK
    if file_size > max_size:
        return ValidationResult(
            valid=False,
            error=f"File size exceeds {max_size / _MB:.1f}MB limit",
        )
    return _OK


def validate_image_file(
    mime_type: str,
    file_size: int,
    reference_type: ReferenceType,
    provider: StorageProviderRecord | None = None,
) -> ValidationResult:
    """Check declared type and size against provider policy or the defaults."""
    allowed_types = (
        provider.allowed_types
        if provider is not None and provider.allowed_types is not None
        else ",".join(ALLOWED_IMAGE_TYPES)
    )
    type_result = validate_file_type(mime_type, allowed_types)
    if not type_result.valid:
        return type_result

    max_size = (
        provider.max_file_size
        if provider is not None and provider.max_file_size is not None
        else DEFAULT_MAX_FILE_SIZES[reference_type]
    )
    return validate_file_size(file_size, max_size)


def validate_file_content(
    data: bytes,
    allowed_types: Iterable[str] = ALLOWED_IMAGE_TYPES,
    declared_mime: str | None = None,
) -> ValidationResult:
    """Sniff the real type from magic bytes and check it.

    The sniffed type must pass the allow-list (wildcards supported). An
    empty allow-list accepts any recognizable type. When
    declared_mime is given the sniffed type must also name the same format,
    so a GIF sent as image/png is refused even under an image/* policy.
    """
    kind = filetype.guess(data)
    if kind is None:
        return ValidationResult(
            valid=False, error="Could not determine file type from content"
        )

    allowed_str = ",".join(allowed_types)
    if not validate_file_type(kind.mime, allowed_str).valid:
        return ValidationResult(
            valid=False,
            error=f"Invalid file content type: {kind.mime}. Expected: {allowed_str}",
        )

    if declared_mime is not None and _normalize(declared_mime) != _normalize(kind.mime):
        return ValidationResult(
            valid=False,
            error=f"Invalid file content type: {kind.mime}. Declared: {declared_mime}",
        )
    return _OK


def allowed_types_for(provider: StorageProviderRecord | None) -> list[str]:
    """Provider allow-list as a list, or the default image types.

    An empty provider list stays empty, which allows every sniffed type.
    """
    if provider is not None and provider.allowed_types is not None:
        return [t.strip() for t in provider.allowed_types.split(",") if t.strip()]
    return list(ALLOWED_IMAGE_TYPES)
