"""Domain exceptions for the file storage service.

Defines domain-level exceptions that represent policy violations and
missing configuration. These exceptions are independent of infrastructure
concerns. Presentation layer maps them to HTTP responses in exception
handlers via error_code.
"""

from typing import Any


class FileStoreException(Exception):
    """Base exception for all filestore errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, provider_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class FileValidationException(FileStoreException):
    """Raised when a file fails type, size or content validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Human-readable reason for the rejection.
            field: Optional input that failed validation (e.g. 'mime_type').
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class NoProviderConfiguredException(FileStoreException):
    """Raised when no active storage provider matches the request."""

    def __init__(self, provider_id: int | None = None) -> None:
        details: dict[str, Any] = {}
        if provider_id is not None:
            details["provider_id"] = str(provider_id)
        super().__init__(
            "No active storage provider configured",
            "NO_PROVIDER_CONFIGURED",
            details,
        )


class UnsupportedProviderTypeException(FileStoreException):
    """Raised when a provider row names a backend kind with no registered factory."""

    def __init__(self, provider_type: str) -> None:
        super().__init__(
            f"Unsupported storage provider type: {provider_type}",
            "UNSUPPORTED_PROVIDER_TYPE",
            {"provider_type": provider_type},
        )


class ProviderConfigException(FileStoreException):
    """Raised when a provider's config blob is missing required keys."""

    def __init__(self, provider_type: str, missing: list[str]) -> None:
        super().__init__(
            f"Invalid {provider_type} provider config: missing {', '.join(missing)}",
            "PROVIDER_CONFIG_ERROR",
            {"provider_type": provider_type, "missing": missing},
        )


class SSRFRejectedException(FileStoreException):
    """Raised when a remote URL targets a disallowed scheme or internal address."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            f"Access denied: {reason}",
            "ACCESS_DENIED",
            {"url": url, "reason": reason},
        )


class FileTooLargeException(FileStoreException):
    """Raised when a remote download exceeds the size ceiling."""

    def __init__(self, max_bytes: int, received: int | None = None) -> None:
        details: dict[str, Any] = {"max_bytes": max_bytes}
        if received is not None:
            details["received"] = received
        super().__init__("File too large", "FILE_TOO_LARGE", details)


class RemoteFetchException(FileStoreException):
    """Raised when a remote source cannot be fetched (status, timeout, transport)."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        details: dict[str, Any] = {"url": url, "reason": reason}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(
            f"Failed to fetch file from URL: {reason}",
            "REMOTE_FETCH_ERROR",
            details,
        )


class ResourceNotFoundException(FileStoreException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'file', 'provider').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(FileStoreException):
    """Raised when an operation requires the SQL database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class AuthenticationException(FileStoreException):
    """Raised when the caller identity header is missing or malformed."""

    def __init__(self, message: str = "Authentication required") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")
