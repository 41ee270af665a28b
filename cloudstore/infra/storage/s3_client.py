"""S3-compatible storage client implementation.

This module provides an S3-compatible storage client that works with
AWS S3, MinIO, and other S3-compatible object storage services.

Missing keys: ``remove`` succeeds silently, because S3 DeleteObject is
idempotent and reports success for keys that do not exist.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlsplit

from .base import DEFAULT_HTTP_TIMEOUT, BaseStorageClient
from .client import OptionsLike, StorageBackend
from .errors import DownloadError, PreSignedUrlError, RemoveError, UploadError


class S3StorageClient(BaseStorageClient):
    """S3-compatible object storage client.

    Wraps one boto3 S3 client bound to one bucket. Presigned URLs are signed
    locally by botocore without a network round trip.
    """

    backend = StorageBackend.S3

    def __init__(
        self,
        *,
        client: Any,
        bucket: str,
        addressing_style: str = "path",
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initialize the adapter.

        Args:
            client: A boto3 S3 client.
            bucket: Bucket all operations target.
            addressing_style: ``path`` or ``virtual``; shapes the object URL
                returned by ``upload``.
            http: Transport used for presigned uploads (``requests`` API).
            timeout: Timeout in seconds for presigned uploads.
        """
        super().__init__(bucket=bucket, http=http, timeout=timeout)
        self._client = client
        self._addressing_style = addressing_style

    def _object_url(self, key: str) -> str:
        endpoint = str(self._client.meta.endpoint_url).rstrip("/")
        quoted_key = quote(key, safe="/~")
        if self._addressing_style == "virtual":
            parts = urlsplit(endpoint)
            return f"{parts.scheme}://{self._bucket}.{parts.netloc}/{quoted_key}"
        return f"{endpoint}/{self._bucket}/{quoted_key}"

    def upload(self, data: bytes, options: OptionsLike = None) -> str:
        """Upload an object with PutObject and return its URL."""
        opts = self._resolve_options(options, UploadError)
        key = self._require_key(opts.key, UploadError)
        content_type = self._require_content_type(opts, UploadError)
        payload = self._require_data(data, UploadError)

        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=payload,
                ContentType=content_type,
            )
        except Exception as exc:
            raise self._failure(
                UploadError, "Failed to upload object", "upload", key, exc
            ) from exc

        self._uploaded(key)
        return self._object_url(key)

    def download(self, key: str, options: OptionsLike = None) -> bytes:
        """Download the full object body."""
        self._resolve_options(options, DownloadError)
        key = self._require_key(key, DownloadError)

        try:
            response = self._client.get_object(Bucket=self._bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except Exception as exc:
            raise self._failure(
                DownloadError, "Failed to download object", "download", key, exc
            ) from exc

    def remove(self, key: str, options: OptionsLike = None) -> None:
        """Delete an object from storage."""
        self._resolve_options(options, RemoveError)
        key = self._require_key(key, RemoveError)

        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except Exception as exc:
            raise self._failure(
                RemoveError, "Failed to delete object", "remove", key, exc
            ) from exc

    def _presign(self, method: str, params: dict[str, Any], expires_in: int) -> str:
        url = self._client.generate_presigned_url(
            method,
            Params=params,
            ExpiresIn=int(expires_in),
        )
        if not url:
            raise PreSignedUrlError("Generated presigned URL is empty")
        return str(url)

    def get_presigned_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a presigned PutObject URL."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        params: dict[str, Any] = {"Bucket": self._bucket, "Key": key}
        if opts.content_type:
            params["ContentType"] = opts.content_type

        try:
            return self._presign("put_object", params, expires_in)
        except PreSignedUrlError:
            raise
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate presigned URL",
                "get_presigned_url",
                key,
                exc,
            ) from exc

    def get_file_view_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a presigned GetObject URL."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        try:
            return self._presign(
                "get_object", {"Bucket": self._bucket, "Key": key}, expires_in
            )
        except PreSignedUrlError:
            raise
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate download URL",
                "get_file_view_url",
                key,
                exc,
            ) from exc
