"""Multi-backend object storage: S3-compatible, Azure Blob and Google Cloud Storage."""

from cloudstore.infra.storage import (
    StorageBackend,
    StorageClient,
    StorageError,
    StorageOptions,
    StorageStrategy,
)

__version__ = "1.0.0"

__all__ = [
    "StorageBackend",
    "StorageClient",
    "StorageError",
    "StorageOptions",
    "StorageStrategy",
]
