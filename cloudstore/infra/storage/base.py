"""Plumbing shared by every storage backend adapter.

Option validation happens here, at the adapter boundary, before any vendor
call is made. The presigned upload is plain HTTP and therefore implemented
once for all backends.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar
from urllib.parse import parse_qs, urlsplit

import requests

from .client import MAX_EXPIRES_IN, OptionsLike, StorageBackend, StorageOptions
from .errors import PreSignedUrlError, StorageError, UploadError

logger = logging.getLogger("storage")

DEFAULT_HTTP_TIMEOUT = 30.0


def _redact_url(url: str) -> str:
    """Drop the query string, which carries the signature."""
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}{parts.path}"


def _is_azure_sas(url: str) -> bool:
    query = parse_qs(urlsplit(url).query)
    return "sig" in query and "sv" in query


def presigned_upload_headers(url: str, content_type: str) -> dict[str, str]:
    """Headers for a PUT to ``url``, derived from the URL alone.

    Azure Put Blob rejects requests that do not name the blob type, so SAS
    URLs (``sv`` and ``sig`` query parameters) get ``x-ms-blob-type``.
    """
    headers = {"Content-Type": content_type}
    if _is_azure_sas(url):
        headers["x-ms-blob-type"] = "BlockBlob"
    return headers


class BaseStorageClient:
    """Base class for backend adapters.

    Subclasses set ``backend`` and implement the vendor-specific operations.
    Instances keep only immutable state (vendor handle, bucket name, HTTP
    transport, timeout) and are safe to share between threads.
    """

    backend: ClassVar[StorageBackend]

    def __init__(
        self,
        *,
        bucket: str,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self._bucket = bucket
        self._http = http if http is not None else requests
        self._timeout = timeout

    @property
    def bucket(self) -> str:
        return self._bucket

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bucket={self._bucket!r})"

    @staticmethod
    def _resolve_options(
        options: OptionsLike, error_cls: type[StorageError]
    ) -> StorageOptions:
        try:
            return StorageOptions.coerce(options)
        except TypeError as exc:
            raise error_cls(str(exc)) from exc

    @staticmethod
    def _require_key(key: object, error_cls: type[StorageError]) -> str:
        if not isinstance(key, str) or not key.strip():
            raise error_cls("Object key is required")
        return key

    @staticmethod
    def _require_content_type(
        options: StorageOptions, error_cls: type[StorageError]
    ) -> str:
        content_type = options.content_type
        if not isinstance(content_type, str) or not content_type.strip():
            raise error_cls("Content type is required")
        return content_type

    @staticmethod
    def _require_data(data: object, error_cls: type[StorageError]) -> bytes:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise error_cls(
                f"Payload must be bytes-like, got {type(data).__name__}"
            )
        return bytes(data)

    @staticmethod
    def _require_expires_in(options: StorageOptions) -> int:
        expires_in = options.expires_in
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise PreSignedUrlError("expires_in must be an integer number of seconds")
        if not 1 <= expires_in <= MAX_EXPIRES_IN:
            raise PreSignedUrlError(
                f"expires_in must be between 1 and {MAX_EXPIRES_IN} seconds"
            )
        return expires_in

    def _log_fields(self, operation: str, **fields: Any) -> dict[str, Any]:
        return {
            "backend": self.backend.value,
            "bucket": self._bucket,
            "operation": operation,
            **fields,
        }

    def _failure(
        self,
        error_cls: type[StorageError],
        message: str,
        operation: str,
        key: str | None,
        exc: Exception,
    ) -> StorageError:
        """Log a vendor failure and build the contract error for it."""
        logger.warning(
            "storage_operation_failed backend=%s operation=%s bucket=%s key=%s error=%s",
            self.backend.value,
            operation,
            self._bucket,
            key,
            exc,
            extra=self._log_fields(operation, key=key, error=str(exc)),
        )
        return error_cls.from_vendor(message, exc)

    def _uploaded(self, key: str) -> None:
        logger.debug(
            "storage_object_uploaded backend=%s bucket=%s key=%s",
            self.backend.value,
            self._bucket,
            key,
            extra=self._log_fields("upload", key=key),
        )

    def upload_to_presigned_url(
        self, url: str, data: bytes, options: OptionsLike = None
    ) -> None:
        """PUT content to a presigned URL issued by any backend.

        The request depends only on ``url``, never on which adapter sends it.
        """
        opts = self._resolve_options(options, UploadError)
        if not isinstance(url, str) or not url.strip():
            raise UploadError("Presigned URL is required")
        content_type = self._require_content_type(opts, UploadError)
        payload = self._require_data(data, UploadError)

        headers = presigned_upload_headers(url, content_type)
        target = _redact_url(url)
        try:
            response = self._http.put(
                url, data=payload, headers=headers, timeout=self._timeout
            )
            response.raise_for_status()
        except Exception as exc:
            logger.warning(
                "storage_operation_failed backend=%s operation=%s target=%s error=%s",
                self.backend.value,
                "upload_to_presigned_url",
                target,
                exc,
                extra=self._log_fields(
                    "upload_to_presigned_url", target=target, error=str(exc)
                ),
            )
            raise UploadError.from_vendor(
                "Failed to upload to presigned URL", exc
            ) from exc

        logger.debug(
            "storage_operation_succeeded backend=%s operation=%s target=%s",
            self.backend.value,
            "upload_to_presigned_url",
            target,
            extra=self._log_fields("upload_to_presigned_url", target=target),
        )
