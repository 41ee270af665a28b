from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from functools import lru_cache
from pathlib import Path

ENV_FILE = Path(".env")

SECRET_SETTINGS: frozenset[str] = frozenset(
    {"S3_SECRET_ACCESS_KEY", "AZURE_ACCOUNT_KEY"}
)


def _load_env_file() -> None:
    if not ENV_FILE.exists():
        return
    for raw_line in ENV_FILE.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_optional(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Settings:
    STORAGE_BACKEND: str = "S3"
    STORAGE_HTTP_TIMEOUT: float = 30.0
    S3_BUCKET: str | None = None
    S3_REGION: str | None = None
    S3_ACCESS_KEY_ID: str | None = None
    S3_SECRET_ACCESS_KEY: str | None = field(default=None, repr=False)
    S3_ENDPOINT_URL: str | None = None
    S3_ADDRESSING_STYLE: str = "path"
    S3_USE_SSL: bool = True
    AZURE_ACCOUNT_NAME: str | None = None
    AZURE_ACCOUNT_KEY: str | None = field(default=None, repr=False)
    AZURE_CONTAINER_NAME: str | None = None
    AZURE_ACCOUNT_URL: str | None = None
    GCS_BUCKET: str | None = None
    GCS_PROJECT_ID: str | None = None
    GCS_KEY_FILENAME: str | None = None

    def __post_init__(self) -> None:
        if self.STORAGE_HTTP_TIMEOUT <= 0:
            raise ValueError("STORAGE_HTTP_TIMEOUT must be a positive number of seconds.")
        style = (self.S3_ADDRESSING_STYLE or "path").strip().lower()
        if style not in {"path", "virtual"}:
            raise ValueError("S3_ADDRESSING_STYLE must be either 'path' or 'virtual'.")
        self.S3_ADDRESSING_STYLE = style

    def describe(self) -> dict[str, object]:
        """Settings as a dict safe for logging: secrets are masked."""
        described: dict[str, object] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name in SECRET_SETTINGS and value:
                value = "***"
            described[item.name] = value
        return described

    @classmethod
    def from_environment(cls) -> "Settings":
        _load_env_file()
        return cls(
            STORAGE_BACKEND=os.environ.get("STORAGE_BACKEND", cls.STORAGE_BACKEND),
            STORAGE_HTTP_TIMEOUT=float(
                os.environ.get("STORAGE_HTTP_TIMEOUT", cls.STORAGE_HTTP_TIMEOUT)
            ),
            S3_BUCKET=_as_optional(os.environ.get("S3_BUCKET")),
            S3_REGION=_as_optional(os.environ.get("S3_REGION")),
            S3_ACCESS_KEY_ID=_as_optional(os.environ.get("S3_ACCESS_KEY_ID")),
            S3_SECRET_ACCESS_KEY=_as_optional(os.environ.get("S3_SECRET_ACCESS_KEY")),
            S3_ENDPOINT_URL=_as_optional(os.environ.get("S3_ENDPOINT_URL")),
            S3_ADDRESSING_STYLE=os.environ.get(
                "S3_ADDRESSING_STYLE", cls.S3_ADDRESSING_STYLE
            ),
            S3_USE_SSL=_as_bool(os.environ.get("S3_USE_SSL"), cls.S3_USE_SSL),
            AZURE_ACCOUNT_NAME=_as_optional(os.environ.get("AZURE_ACCOUNT_NAME")),
            AZURE_ACCOUNT_KEY=_as_optional(os.environ.get("AZURE_ACCOUNT_KEY")),
            AZURE_CONTAINER_NAME=_as_optional(os.environ.get("AZURE_CONTAINER_NAME")),
            AZURE_ACCOUNT_URL=_as_optional(os.environ.get("AZURE_ACCOUNT_URL")),
            GCS_BUCKET=_as_optional(os.environ.get("GCS_BUCKET")),
            GCS_PROJECT_ID=_as_optional(os.environ.get("GCS_PROJECT_ID")),
            GCS_KEY_FILENAME=_as_optional(os.environ.get("GCS_KEY_FILENAME")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_environment()
