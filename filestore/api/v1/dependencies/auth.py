"""Caller identity dependency.

The upstream gateway authenticates the caller and forwards the numeric
user id in the header named by settings.user_id_header.
"""

from fastapi import Request

from filestore.core.config import get_settings
from filestore.domain.exceptions import AuthenticationException


async def get_current_user_id(request: Request) -> int:
    """Return the caller's user id; 401 when the header is missing or not a positive integer."""
    header = get_settings().user_id_header
    raw = (request.headers.get(header) or "").strip()
    if not raw.isdigit() or int(raw) <= 0:
        raise AuthenticationException(f"Missing or invalid {header} header")
    return int(raw)
