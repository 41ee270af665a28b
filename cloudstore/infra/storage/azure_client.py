"""Azure Blob Storage client implementation.

Presigned URLs are blob URLs carrying a service SAS token signed with the
storage account key, computed locally. User-delegation SAS, which needs a
round trip to Azure AD, is not used.

Missing keys: ``remove`` raises ``RemoveError`` (Azure answers BlobNotFound).

Dependencies:
    - azure-storage-blob
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from azure.storage.blob import BlobSasPermissions, ContentSettings, generate_blob_sas

from .base import DEFAULT_HTTP_TIMEOUT, BaseStorageClient
from .client import OptionsLike, StorageBackend
from .errors import DownloadError, PreSignedUrlError, RemoveError, UploadError

UPLOAD_PERMISSION = BlobSasPermissions(create=True, write=True)
VIEW_PERMISSION = BlobSasPermissions(read=True)


class AzureBlobStorageClient(BaseStorageClient):
    """Azure Blob Storage client bound to one container."""

    backend = StorageBackend.AZURE

    def __init__(
        self,
        *,
        container_client: Any,
        account_name: str,
        account_key: str,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        super().__init__(
            bucket=container_client.container_name, http=http, timeout=timeout
        )
        self._container = container_client
        self._account_name = account_name
        self._account_key = account_key

    def upload(self, data: bytes, options: OptionsLike = None) -> str:
        opts = self._resolve_options(options, UploadError)
        key = self._require_key(opts.key, UploadError)
        content_type = self._require_content_type(opts, UploadError)
        payload = self._require_data(data, UploadError)

        try:
            blob_client = self._container.get_blob_client(key)
            blob_client.upload_blob(
                payload,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
        except Exception as exc:
            raise self._failure(
                UploadError, "Failed to upload blob", "upload", key, exc
            ) from exc

        self._uploaded(key)
        return blob_client.url

    def download(self, key: str, options: OptionsLike = None) -> bytes:
        self._resolve_options(options, DownloadError)
        key = self._require_key(key, DownloadError)

        try:
            downloader = self._container.get_blob_client(key).download_blob()
            return downloader.readall()
        except Exception as exc:
            raise self._failure(
                DownloadError, "Failed to download blob", "download", key, exc
            ) from exc

    def remove(self, key: str, options: OptionsLike = None) -> None:
        self._resolve_options(options, RemoveError)
        key = self._require_key(key, RemoveError)

        try:
            self._container.get_blob_client(key).delete_blob()
        except Exception as exc:
            raise self._failure(
                RemoveError, "Failed to delete blob", "remove", key, exc
            ) from exc

    def _sas_url(self, key: str, permission: BlobSasPermissions, expires_in: int) -> str:
        blob_client = self._container.get_blob_client(key)
        sas_token = generate_blob_sas(
            account_name=self._account_name,
            container_name=self._bucket,
            blob_name=key,
            account_key=self._account_key,
            permission=permission,
            expiry=datetime.now(timezone.utc) + timedelta(seconds=expires_in),
        )
        return f"{blob_client.url}?{sas_token}"

    def get_presigned_url(self, key: str, options: OptionsLike = None) -> str:
        """Issue a create+write SAS URL for a PUT of the blob."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        try:
            return self._sas_url(key, UPLOAD_PERMISSION, expires_in)
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate SAS URL",
                "get_presigned_url",
                key,
                exc,
            ) from exc

    def get_file_view_url(self, key: str, options: OptionsLike = None) -> str:
        """Issue a read-only SAS URL for the blob."""
        opts = self._resolve_options(options, PreSignedUrlError)
        key = self._require_key(key, PreSignedUrlError)
        expires_in = self._require_expires_in(opts)

        try:
            return self._sas_url(key, VIEW_PERMISSION, expires_in)
        except Exception as exc:
            raise self._failure(
                PreSignedUrlError,
                "Failed to generate SAS URL",
                "get_file_view_url",
                key,
                exc,
            ) from exc
