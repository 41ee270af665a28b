"""Storage strategy: binds one backend at construction time.

Calling code asks the strategy for its service once and then works purely
against the ``StorageClient`` contract, never branching on backend type.
"""

from __future__ import annotations

import logging
from typing import Any

from cloudstore.common.config import Settings, get_settings

from .base import BaseStorageClient
from .client import StorageBackend
from .factories import FACTORIES

logger = logging.getLogger("storage")


class StorageStrategy:
    """Selects and owns the storage adapter for one backend.

    The adapter is built inside ``__init__``; if the backend is unknown
    (``UnsupportedBackendError``) or its configuration is incomplete
    (``StorageConfigurationError``) construction raises and no strategy
    exists. Once built, the binding never changes.
    """

    __slots__ = ("_backend", "_service")

    def __init__(
        self,
        backend: StorageBackend | str,
        *,
        settings: Settings | None = None,
        http: Any = None,
    ) -> None:
        resolved = StorageBackend.parse(backend)
        settings = settings or get_settings()
        factory = FACTORIES[resolved]
        config = factory.config_type.from_settings(settings)
        service = factory.create(
            config, http=http, timeout=settings.STORAGE_HTTP_TIMEOUT
        )

        self._backend = resolved
        self._service = service
        logger.info(
            "storage_backend_bound backend=%s bucket=%s",
            resolved.value,
            service.bucket,
            extra={"backend": resolved.value, "bucket": service.bucket},
        )
        logger.debug("storage_settings %s", settings.describe())

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, http: Any = None
    ) -> "StorageStrategy":
        """Bind the backend named by ``STORAGE_BACKEND``."""
        settings = settings or get_settings()
        return cls(settings.STORAGE_BACKEND, settings=settings, http=http)

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def get_service(self) -> BaseStorageClient:
        return self._service

    def __repr__(self) -> str:
        return f"StorageStrategy(backend={self._backend.value}, service={self._service!r})"
