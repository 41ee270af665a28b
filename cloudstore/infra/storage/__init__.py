"""Object storage abstraction layer.

This module provides a protocol-based abstraction for object storage backends,
with interchangeable adapters for S3-compatible services, Azure Blob Storage
and Google Cloud Storage, selected at runtime by ``StorageStrategy``.
"""

from .azure_client import AzureBlobStorageClient
from .base import BaseStorageClient
from .client import (
    DEFAULT_EXPIRES_IN,
    MAX_EXPIRES_IN,
    StorageBackend,
    StorageClient,
    StorageOptions,
)
from .errors import (
    DownloadError,
    PreSignedUrlError,
    RemoveError,
    StorageConfigurationError,
    StorageError,
    UnsupportedBackendError,
    UploadError,
)
from .factories import (
    AzureConfig,
    AzureStorageFactory,
    GCSConfig,
    GoogleCloudStorageFactory,
    S3Config,
    S3StorageFactory,
)
from .gcs_client import GCSStorageClient
from .s3_client import S3StorageClient
from .strategy import StorageStrategy

__all__ = [
    "AzureBlobStorageClient",
    "AzureConfig",
    "AzureStorageFactory",
    "BaseStorageClient",
    "DEFAULT_EXPIRES_IN",
    "DownloadError",
    "GCSConfig",
    "GCSStorageClient",
    "GoogleCloudStorageFactory",
    "MAX_EXPIRES_IN",
    "PreSignedUrlError",
    "RemoveError",
    "S3Config",
    "S3StorageClient",
    "S3StorageFactory",
    "StorageBackend",
    "StorageClient",
    "StorageConfigurationError",
    "StorageError",
    "StorageOptions",
    "StorageStrategy",
    "UnsupportedBackendError",
    "UploadError",
]
