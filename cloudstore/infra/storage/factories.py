"""Backend configuration blocks and the factories that turn them into clients.

Each factory validates its configuration up front and builds the vendor SDK
client once; the resulting adapter owns that client for its lifetime.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

import boto3
from azure.storage.blob import BlobServiceClient
from botocore.config import Config
from google.cloud import storage
from google.oauth2 import service_account

from .azure_client import AzureBlobStorageClient
from .base import DEFAULT_HTTP_TIMEOUT, BaseStorageClient
from .client import StorageBackend
from .errors import StorageConfigurationError
from .gcs_client import GCSStorageClient
from .s3_client import S3StorageClient

if TYPE_CHECKING:
    from cloudstore.common.config import Settings


def _require_settings(
    settings: "Settings", backend: StorageBackend, names: tuple[str, ...]
) -> dict[str, Any]:
    values = {name: getattr(settings, name, None) for name in names}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise StorageConfigurationError(
            f"{backend.value} storage backend requires {', '.join(missing)}"
        )
    return values


@dataclass(frozen=True, slots=True)
class S3Config:
    """Connection settings for an S3-compatible bucket."""

    bucket: str
    region: str
    access_key_id: str
    secret_access_key: str = field(repr=False)
    endpoint_url: str | None = None
    addressing_style: str = "path"
    use_ssl: bool = True

    @classmethod
    def from_settings(cls, settings: "Settings") -> "S3Config":
        values = _require_settings(
            settings,
            StorageBackend.S3,
            ("S3_BUCKET", "S3_REGION", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY"),
        )
        return cls(
            bucket=values["S3_BUCKET"],
            region=values["S3_REGION"],
            access_key_id=values["S3_ACCESS_KEY_ID"],
            secret_access_key=values["S3_SECRET_ACCESS_KEY"],
            endpoint_url=settings.S3_ENDPOINT_URL,
            addressing_style=settings.S3_ADDRESSING_STYLE,
            use_ssl=bool(settings.S3_USE_SSL),
        )


@dataclass(frozen=True, slots=True)
class AzureConfig:
    """Connection settings for an Azure Blob Storage container."""

    account_name: str
    account_key: str = field(repr=False)
    container_name: str = ""
    account_url: str | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "AzureConfig":
        values = _require_settings(
            settings,
            StorageBackend.AZURE,
            ("AZURE_ACCOUNT_NAME", "AZURE_ACCOUNT_KEY", "AZURE_CONTAINER_NAME"),
        )
        return cls(
            account_name=values["AZURE_ACCOUNT_NAME"],
            account_key=values["AZURE_ACCOUNT_KEY"],
            container_name=values["AZURE_CONTAINER_NAME"],
            account_url=settings.AZURE_ACCOUNT_URL,
        )

    @property
    def resolved_account_url(self) -> str:
        return self.account_url or f"https://{self.account_name}.blob.core.windows.net"


@dataclass(frozen=True, slots=True)
class GCSConfig:
    """Connection settings for a Google Cloud Storage bucket.

    Without ``key_filename`` the application default credentials are used.
    """

    bucket: str
    project_id: str
    key_filename: str | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GCSConfig":
        values = _require_settings(
            settings, StorageBackend.GOOGLE, ("GCS_BUCKET", "GCS_PROJECT_ID")
        )
        return cls(
            bucket=values["GCS_BUCKET"],
            project_id=values["GCS_PROJECT_ID"],
            key_filename=settings.GCS_KEY_FILENAME,
        )


class StorageFactory(Protocol):
    """Builds one ready-to-use adapter from its backend's configuration."""

    backend: ClassVar[StorageBackend]
    config_type: ClassVar[type]

    def create(
        self, config: Any, *, http: Any = None, timeout: float = DEFAULT_HTTP_TIMEOUT
    ) -> BaseStorageClient:
        ...


class S3StorageFactory:
    backend = StorageBackend.S3
    config_type = S3Config

    def create(
        self,
        config: S3Config,
        *,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> S3StorageClient:
        return S3StorageClient(
            client=self._build_client(config),
            bucket=config.bucket,
            addressing_style=config.addressing_style,
            http=http,
            timeout=timeout,
        )

    @staticmethod
    def _build_client(config: S3Config) -> Any:
        """Create a boto3 S3 client from the configuration."""
        boto_config = Config(
            signature_version="s3v4",
            s3={"addressing_style": config.addressing_style},
        )
        try:
            return boto3.client(
                "s3",
                endpoint_url=config.endpoint_url,
                region_name=config.region,
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                use_ssl=config.use_ssl,
                config=boto_config,
            )
        except Exception as exc:
            raise StorageConfigurationError.from_vendor(
                "Failed to create S3 client", exc
            ) from exc


class AzureStorageFactory:
    backend = StorageBackend.AZURE
    config_type = AzureConfig

    def create(
        self,
        config: AzureConfig,
        *,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> AzureBlobStorageClient:
        return AzureBlobStorageClient(
            container_client=self._build_container_client(config),
            account_name=config.account_name,
            account_key=config.account_key,
            http=http,
            timeout=timeout,
        )

    @staticmethod
    def _build_container_client(config: AzureConfig) -> Any:
        """Create a container client authenticated with the account key."""
        try:
            service = BlobServiceClient(
                account_url=config.resolved_account_url,
                credential={
                    "account_name": config.account_name,
                    "account_key": config.account_key,
                },
            )
            return service.get_container_client(config.container_name)
        except Exception as exc:
            raise StorageConfigurationError.from_vendor(
                "Failed to create Azure Blob client", exc
            ) from exc


class GoogleCloudStorageFactory:
    backend = StorageBackend.GOOGLE
    config_type = GCSConfig

    def create(
        self,
        config: GCSConfig,
        *,
        http: Any = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> GCSStorageClient:
        return GCSStorageClient(
            bucket=self._build_bucket(config),
            http=http,
            timeout=timeout,
        )

    @staticmethod
    def _build_bucket(config: GCSConfig) -> Any:
        """Create a GCS client and a bucket handle (no request is sent)."""
        try:
            credentials = None
            if config.key_filename:
                credentials = service_account.Credentials.from_service_account_file(
                    config.key_filename
                )
            client = storage.Client(project=config.project_id, credentials=credentials)
            return client.bucket(config.bucket)
        except Exception as exc:
            raise StorageConfigurationError.from_vendor(
                "Failed to create GCS client", exc
            ) from exc


FACTORIES: dict[StorageBackend, StorageFactory] = {
    StorageBackend.S3: S3StorageFactory(),
    StorageBackend.GOOGLE: GoogleCloudStorageFactory(),
    StorageBackend.AZURE: AzureStorageFactory(),
}
