"""Shared pieces for storage backends: config checks and URL joining."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from filestore.domain.enums import ProviderType
from filestore.domain.exceptions import ProviderConfigException


def require_config(
    provider_type: ProviderType, config: Mapping[str, Any], keys: Iterable[str]
) -> None:
    """Raise ProviderConfigException listing every key that is missing or empty."""
    missing = [k for k in keys if config.get(k) in (None, "")]
    if missing:
        raise ProviderConfigException(provider_type.value, missing)


class BaseStorageBackend:
    """Holds base_url and implements get_url for subclasses."""

    provider_type: ProviderType

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def get_url(self, key: str) -> str:
        """Public URL for key."""
        return f"{self.base_url}/{key}"
