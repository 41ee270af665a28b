"""Storage error taxonomy.

Every adapter translates vendor failures into exactly one of these kinds, so
no SDK-specific exception type is raised past the storage contract. The
original vendor exception stays reachable through ``__cause__``.
"""

from __future__ import annotations


class StorageError(RuntimeError):
    """Raised when object storage operations fail."""

    default_code = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        vendor_message: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.vendor_message = vendor_message

    @classmethod
    def from_vendor(cls, message: str, exc: BaseException) -> "StorageError":
        """Wrap a vendor exception, keeping its text as ``vendor_message``."""
        vendor_message = str(exc) or exc.__class__.__name__
        return cls(f"{message}: {vendor_message}", vendor_message=vendor_message)


class UploadError(StorageError):
    """Raised when an object cannot be written."""

    default_code = "UPLOAD_ERROR"


class DownloadError(StorageError):
    """Raised when an object cannot be read or does not exist."""

    default_code = "DOWNLOAD_ERROR"


class RemoveError(StorageError):
    """Raised when an object cannot be deleted."""

    default_code = "REMOVE_ERROR"


class PreSignedUrlError(StorageError):
    """Raised when a time-limited access URL cannot be issued."""

    default_code = "PRE_SIGNED_URL_ERROR"


class UnsupportedBackendError(StorageError):
    """Raised when a backend identifier matches no known storage backend."""

    default_code = "UNSUPPORTED_BACKEND"


class StorageConfigurationError(StorageError):
    """Raised when required backend configuration is missing or invalid."""

    default_code = "STORAGE_CONFIGURATION_ERROR"
