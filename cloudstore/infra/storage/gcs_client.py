"""Google Cloud Storage client implementation.

``upload`` returns the public object URL
(``https://storage.googleapis.com/<bucket>/<key>``). It is a stable locator,
but it only serves content when the bucket or object allows public reads;
callers with private buckets should hand out ``get_file_view_url`` instead.

Missing keys: ``remove`` raises ``RemoveError`` (GCS answers 404 NotFound).

Dependencies:
    - google-cloud-storage
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any
from urllib.parse import quote

from .base import DEFAULT_HTTP_TIMEOUT, BaseStorageClient
from .client import OptionsLike, StorageBackend
from .errors import DownloadError, PreSignedUrlError, RemoveError, UploadError

PUBLIC_URL_BASE = "https://storage.googleapis.com"


class GCSStorageClient(BaseStorageClient):
    """Google Cloud Storage client bound to one bucket.

    Signed URLs use V4 signing and are computed locally from the
    service-account credentials.
    """

    backend = StorageBackend.GOOGLE

    def __init__(
        self,
        *,
        bucket: Any,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        """Initialize the adapter.

        Args:
            bucket: A ``google.cloud.storage.Bucket`` handle.
            http: Transport used for presigned uploads (``requests`` API).
            timeout: Timeout in seconds for presigned uploads.
        """
        super().__init__(bucket=bucket.name, http=http, timeout=timeout)
        self._gcs_bucket = bucket

    def public_url(self, key: str) -> str:
        return f"{PUBLIC_URL_BASE}/{self._bucket}/{quote(key, safe='/~')}"

    def upload(self, data: bytes, options: OptionsLike = None) -> str:
        opts = self._resolve_options(options, UploadError)
        key = self._require_key(opts.key, UploadError)
        content_type = self._require_content_type(opts, UploadError)
        payload = self._require_data(data, UploadError)

        try:
            blob = self._gcs_bucket.blob(key)
            blob.upload_from_string(payload, content_type=content_type)
        except Exception as exc:
            raise self._failure(
                UploadError, "Failed to upload object to GCS", "upload", key, exc
            ) from exc

        self._uploaded(key)
        return self.public_url(key)

    def download(self, key: str, options: OptionsLike = None) -> bytes:
        self._resolve_options(options, DownloadError)
        key = self._require_key(key, DownloadError)

        try:
            return self._gcs_bucket.blob(key).download_as_bytes()
        except Exception as exc:
            raise self._failure(
                DownloadError, "Failed to download object from GCS", "download", key, exc
            ) from exc

    def remove(self, key: str, options: OptionsLike = None) -> None:
        self._resolve_options(options, RemoveError)
        key = self._require_key(key, RemoveError)

        try:
            self._gcs_bucket.blob(key).delete()
        except Exception as exc:
            raise self._failure(
                RemoveError, "Failed to delete object from GCS", "remove", key, exc
            ) from exc

    def get_presigned_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a V4 signed URL for a PUT of the object."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        try:
            return self._gcs_bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in),
                method="PUT",
                content_type=opts.content_type,
            )
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate signed URL",
                "get_presigned_url",
                key,
                exc,
            ) from exc

    def get_file_view_url(self, key: str, options: OptionsLike = None) -> str:
        """Generate a V4 signed URL for a GET of the object."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        try:
            return self._gcs_bucket.blob(key).generate_signed_url(
                version="v4",
                expiration=timedelta(seconds=expires_in),
                method="GET",
            )
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate signed URL",
                "get_file_view_url",
                key,
                exc,
            ) from exc
