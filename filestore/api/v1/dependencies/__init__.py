"""FastAPI dependencies for API v1."""

from filestore.api.v1.dependencies.auth import get_current_user_id
from filestore.api.v1.dependencies.storage import (
    get_storage_query_service,
    get_storage_service,
)

__all__ = [
    "get_current_user_id",
    "get_storage_query_service",
    "get_storage_service",
]
