"""Storage client protocol and data types.

This module defines the capability contract every storage backend adapter
implements: upload, download, remove, presigned upload/view URLs and a
backend-agnostic upload to a presigned URL.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Mapping, Protocol, Union, runtime_checkable

from .errors import UnsupportedBackendError

DEFAULT_EXPIRES_IN = 60
# Longest URL lifetime accepted by S3 SigV4, GCS V4 signing and Azure SAS alike.
MAX_EXPIRES_IN = 7 * 24 * 60 * 60


class StorageBackend(str, Enum):
    """Identifiers of the supported storage backends."""

    S3 = "S3"
    GOOGLE = "GOOGLE"
    AZURE = "AZURE"

    @classmethod
    def parse(cls, value: object) -> "StorageBackend":
        """Resolve an enum member or a case-insensitive name.

        Raises:
            UnsupportedBackendError: If ``value`` names no known backend.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        supported = ", ".join(member.value for member in cls)
        raise UnsupportedBackendError(
            f"Unsupported storage backend: {value!r}. Supported: {supported}"
        )


@dataclass(frozen=True, slots=True)
class StorageOptions:
    """Per-operation options.

    ``key`` is required by ``upload``; ``content_type`` by ``upload`` and
    ``upload_to_presigned_url``; ``expires_in`` applies to every URL-issuing
    operation.
    """

    key: str | None = None
    content_type: str | None = None
    expires_in: int = DEFAULT_EXPIRES_IN

    @classmethod
    def coerce(cls, options: "OptionsLike") -> "StorageOptions":
        """Build options from ``None``, a mapping or an existing instance.

        Unrecognized mapping keys are ignored.

        Raises:
            TypeError: If ``options`` is neither a mapping nor ``StorageOptions``.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if isinstance(options, Mapping):
            known = {item.name for item in fields(cls)}
            return cls(**{k: v for k, v in options.items() if k in known})
        raise TypeError(
            f"options must be a mapping or StorageOptions, got {type(options).__name__}"
        )


OptionsLike = Union[StorageOptions, Mapping[str, Any], None]


@runtime_checkable
class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Implementations must provide all methods defined here. Every method
    either returns its documented value or raises the single error kind
    listed for it; vendor exceptions never escape.
    """

    @property
    def backend(self) -> StorageBackend:
        """Backend this client talks to."""
        ...

    @property
    def bucket(self) -> str:
        """Resolved bucket or container name."""
        ...

    def upload(self, data: bytes, options: OptionsLike = None) -> str:
        """Store an object.

        Args:
            data: Raw object content.
            options: Must carry ``key`` and ``content_type``.

        Returns:
            A durable (non-expiring) locator for the stored object.

        Raises:
            UploadError: If required options are missing or the write fails.
        """
        ...

    def download(self, key: str, options: OptionsLike = None) -> bytes:
        """Retrieve the full content of an object.

        Args:
            key: Object key in the bucket.
            options: Accepted for uniformity; currently unused.

        Returns:
            The object bytes.

        Raises:
            DownloadError: If the object doesn't exist or the transfer fails.
        """
        ...

    def remove(self, key: str, options: OptionsLike = None) -> None:
        """Delete an object.

        Args:
            key: Object key to delete.
            options: Accepted for uniformity; currently unused.

        Raises:
            RemoveError: If the backend call fails. Whether a missing key
                fails is backend specific and documented per adapter.
        """
        ...

    def get_presigned_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a presigned URL for uploading (PUT) an object.

        Args:
            key: Object key in the bucket.
            options: ``expires_in`` (default 60 seconds) and an optional
                ``content_type`` to bind into the signature.

        Returns:
            Presigned URL for a PUT request.

        Raises:
            PreSignedUrlError: If URL generation fails.
        """
        ...

    def upload_to_presigned_url(
        self, url: str, data: bytes, options: OptionsLike = None
    ) -> None:
        """PUT content to a URL issued by ``get_presigned_url``.

        Args:
            url: Presigned upload URL, from any backend.
            data: Raw object content.
            options: Must carry ``content_type``.

        Raises:
            UploadError: If the request fails or is rejected.
        """
        ...

    def get_file_view_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a presigned URL for reading (GET) an object.

        Args:
            key: Object key in the bucket.
            options: ``expires_in`` (default 60 seconds).

        Returns:
            Presigned URL for a GET request.

        Raises:
            PreSignedUrlError: If URL generation fails.
        """
        ...
