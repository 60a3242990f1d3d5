"""Domain layer: enums and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from filestore.domain.enums import ProviderType, ReferenceType
from filestore.domain.exceptions import (
    AuthenticationException,
    FileStoreException,
    FileTooLargeException,
    FileValidationException,
    NoProviderConfiguredException,
    ProviderConfigException,
    RemoteFetchException,
    ResourceNotFoundException,
    SqlNotConfiguredException,
    SSRFRejectedException,
    UnsupportedProviderTypeException,
)

__all__ = [
    # Enums
    "ProviderType",
    "ReferenceType",
    # Exceptions
    "AuthenticationException",
    "FileStoreException",
    "FileTooLargeException",
    "FileValidationException",
    "NoProviderConfiguredException",
    "ProviderConfigException",
    "RemoteFetchException",
    "ResourceNotFoundException",
    "SqlNotConfiguredException",
    "SSRFRejectedException",
    "UnsupportedProviderTypeException",
]
