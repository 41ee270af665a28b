from __future__ import annotations

from dataclasses import fields

import pytest

from cloudstore.common.config import Settings, get_settings
from tests.infra.fake_backends import FAKE_AZURE_ACCOUNT, FAKE_AZURE_KEY

SETTING_NAMES = tuple(item.name for item in fields(Settings))


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Each test sees no storage env vars and no stray ``.env`` file."""
    monkeypatch.chdir(tmp_path)
    for name in SETTING_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()  # type: ignore[attr-defined]
    yield
    get_settings.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def full_settings() -> Settings:
    """Settings with every backend fully configured."""
    return Settings(
        STORAGE_BACKEND="S3",
        STORAGE_HTTP_TIMEOUT=5.0,
        S3_BUCKET="test-bucket",
        S3_REGION="us-east-1",
        S3_ACCESS_KEY_ID="AKIDEXAMPLE",
        S3_SECRET_ACCESS_KEY="s3-secret-value",
        AZURE_ACCOUNT_NAME=FAKE_AZURE_ACCOUNT,
        AZURE_ACCOUNT_KEY=FAKE_AZURE_KEY,
        AZURE_CONTAINER_NAME="media",
        GCS_BUCKET="gcs-bucket",
        GCS_PROJECT_ID="demo-project",
    )
