"""Storage key derivation.

Keys are backend-relative paths chosen by reference type and caller
identity. They never include the content hash, so identical bytes
uploaded for different purposes would land at different keys if they
were not deduplicated first.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from filestore.domain.enums import ReferenceType
from filestore.domain.exceptions import FileValidationException
from filestore.shared.utils.datetime import utc_now

BASE_PATHS: dict[ReferenceType, str] = {
    ReferenceType.POST: "posts",
    ReferenceType.AVATAR: "avatars",
    ReferenceType.EXPRESSION: "expressions",
    ReferenceType.SITE: "site",
    ReferenceType.OTHER: "other",
}

# Checked in order; first substring hit wins.
_EXTENSIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("png",), "png"),
    (("jpeg", "jpg"), "jpg"),
    (("webp",), "webp"),
    (("gif",), "gif"),
    (("svg",), "svg"),
    (("ico",), "ico"),
    (("pdf",), "pdf"),
)
DEFAULT_EXTENSION = "jpg"


def get_extension_from_mime_type(mime_type: str) -> str:
    """Map a MIME type to a file extension (jpg when unknown)."""
    lowered = mime_type.lower()
    for needles, ext in _EXTENSIONS:
        if any(n in lowered for n in needles):
            return ext
    return DEFAULT_EXTENSION


def generate_storage_key(
    reference_type: ReferenceType,
    mime_type: str,
    user_id: int | None = None,
    sub_path: str | None = None,
    now: datetime | None = None,
) -> str:
    """Build the storage key for a new object.

    Args:
        reference_type: Decides the layout.
        mime_type: Decides the extension.
        user_id: Required for AVATAR (one avatar per user).
        sub_path: Required for EXPRESSION (pack directory).
        now: Clock override for POST month buckets; defaults to UTC now.

    Raises:
        FileValidationException: AVATAR without user_id, or EXPRESSION without
            sub_path or with "." or ".." segments in it.
    """
    ext = get_extension_from_mime_type(mime_type)
    base = BASE_PATHS[reference_type]

    if reference_type == ReferenceType.POST:
        ts = now or utc_now()
        return f"{base}/{ts.year:04d}/{ts.month:02d}/{uuid.uuid4()}.{ext}"
    if reference_type == ReferenceType.AVATAR:
        if user_id is None:
            raise FileValidationException(
                "user_id is required for avatar uploads", field="user_id"
            )
        return f"{base}/{user_id}.{ext}"
    if reference_type == ReferenceType.EXPRESSION:
        if not sub_path:
            raise FileValidationException(
                "sub_path is required for expression uploads", field="sub_path"
            )
        sub_dir = sub_path.strip("/")
        if any(part in (".", "..") for part in sub_dir.split("/")):
            raise FileValidationException(
                "sub_path must not contain relative path segments", field="sub_path"
            )
        return f"{base}/{sub_dir}/{uuid.uuid4()}.{ext}"
    return f"{base}/{uuid.uuid4()}.{ext}"
