"""
Custom exceptions for kintone-export.

Provides a hierarchy of exceptions that abort an export run
and carry structured error information.
"""

from typing import Any


class KintoneExportError(Exception):
    """
    Base exception for all kintone-export errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(KintoneExportError):
    """Invalid or incomplete export configuration."""


class UnsupportedEncodingError(ConfigurationError):
    """Requested output character encoding is not supported."""

    def __init__(self, encoding: str) -> None:
        super().__init__(
            message=f"Unsupported character encoding: {encoding}",
            code="UNSUPPORTED_ENCODING",
            details={"encoding": encoding},
        )


class UnsupportedFormatError(ConfigurationError):
    """Requested output format is not supported."""

    def __init__(self, output_format: str) -> None:
        super().__init__(
            message=f"Unsupported export format: {output_format}",
            code="UNSUPPORTED_FORMAT",
            details={"format": output_format},
        )


# =============================================================================
# Remote API Errors
# =============================================================================


class KintoneAPIError(KintoneExportError):
    """The kintone REST API answered with an error status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: str | None = None,
        error_id: str | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(
            message=message,
            code=error_code or "KINTONE_API_ERROR",
            details={"status_code": status_code, "id": error_id},
        )


class AuthenticationError(KintoneAPIError):
    """Credentials were rejected by kintone."""


class TransportError(KintoneExportError):
    """The request never produced an HTTP response."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(
            message=message,
            code="TRANSPORT_ERROR",
            details={"url": url},
        )


# =============================================================================
# Local I/O Errors
# =============================================================================


class AttachmentError(KintoneExportError):
    """Downloading or writing an attachment failed."""

    def __init__(self, message: str, path: str | None = None, file_key: str | None = None) -> None:
        super().__init__(
            message=message,
            code="ATTACHMENT_ERROR",
            details={"path": path, "file_key": file_key},
        )


class StorageError(KintoneExportError):
    """Uploading the finished export to object storage failed."""

    def __init__(self, message: str, object_key: str | None = None) -> None:
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details={"object_key": object_key},
        )
