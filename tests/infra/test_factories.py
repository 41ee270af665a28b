"""Tests for backend configuration blocks and factories."""

from __future__ import annotations

from unittest.mock import MagicMock, patch
from urllib.parse import parse_qs, urlsplit

import pytest

from cloudstore.common.config import Settings
from cloudstore.infra.storage.azure_client import AzureBlobStorageClient
from cloudstore.infra.storage.errors import StorageConfigurationError
from cloudstore.infra.storage.factories import (
    FACTORIES,
    AzureConfig,
    AzureStorageFactory,
    GCSConfig,
    GoogleCloudStorageFactory,
    S3Config,
    S3StorageFactory,
)
from cloudstore.infra.storage.client import StorageBackend
from cloudstore.infra.storage.gcs_client import GCSStorageClient
from cloudstore.infra.storage.s3_client import S3StorageClient
from tests.infra.fake_backends import FAKE_AZURE_ACCOUNT, FAKE_AZURE_KEY


def test_every_backend_has_a_factory():
    assert set(FACTORIES) == set(StorageBackend)
    for backend, factory in FACTORIES.items():
        assert factory.backend is backend


class TestConfigFromSettings:
    def test_s3_config(self, full_settings):
        config = S3Config.from_settings(full_settings)

        assert config.bucket == "test-bucket"
        assert config.region == "us-east-1"
        assert config.addressing_style == "path"
        assert config.use_ssl is True

    def test_s3_config_lists_every_missing_setting(self):
        with pytest.raises(StorageConfigurationError) as exc_info:
            S3Config.from_settings(Settings(S3_BUCKET="test-bucket"))

        message = str(exc_info.value)
        assert "S3_REGION" in message
        assert "S3_ACCESS_KEY_ID" in message
        assert "S3_SECRET_ACCESS_KEY" in message
        assert "S3_BUCKET" not in message
        assert exc_info.value.code == "STORAGE_CONFIGURATION_ERROR"

    def test_azure_config_requires_container(self, full_settings):
        full_settings.AZURE_CONTAINER_NAME = None

        with pytest.raises(StorageConfigurationError, match="AZURE_CONTAINER_NAME"):
            AzureConfig.from_settings(full_settings)

    def test_azure_default_account_url(self, full_settings):
        config = AzureConfig.from_settings(full_settings)

        assert config.resolved_account_url == "https://devaccount.blob.core.windows.net"

    def test_gcs_key_file_is_optional(self, full_settings):
        config = GCSConfig.from_settings(full_settings)

        assert config.key_filename is None
        assert config.project_id == "demo-project"

    def test_gcs_config_requires_project(self):
        with pytest.raises(StorageConfigurationError, match="GCS_PROJECT_ID"):
            GCSConfig.from_settings(Settings(GCS_BUCKET="gcs-bucket"))

    def test_secrets_are_not_in_repr(self, full_settings):
        assert "s3-secret-value" not in repr(S3Config.from_settings(full_settings))
        assert FAKE_AZURE_KEY not in repr(AzureConfig.from_settings(full_settings))


class TestS3StorageFactory:
    @pytest.fixture
    def config(self, full_settings):
        return S3Config.from_settings(full_settings)

    def test_builds_boto3_client(self, config):
        with patch("cloudstore.infra.storage.factories.boto3.client") as mock_client:
            mock_client.return_value = MagicMock()
            client = S3StorageFactory().create(config, timeout=3.0)

        assert isinstance(client, S3StorageClient)
        assert client.bucket == "test-bucket"
        args, kwargs = mock_client.call_args
        assert args == ("s3",)
        assert kwargs["region_name"] == "us-east-1"
        assert kwargs["aws_access_key_id"] == "AKIDEXAMPLE"
        assert kwargs["aws_secret_access_key"] == "s3-secret-value"
        assert kwargs["endpoint_url"] is None
        assert kwargs["use_ssl"] is True

    def test_client_construction_failure(self, config):
        with patch(
            "cloudstore.infra.storage.factories.boto3.client",
            side_effect=ValueError("Invalid endpoint: ::bad"),
        ):
            with pytest.raises(StorageConfigurationError, match="Invalid endpoint"):
                S3StorageFactory().create(config)

    def test_presigned_url_is_signed_locally(self, config):
        """A real boto3 client signs without any network access."""
        client = S3StorageFactory().create(config)

        url = client.get_presigned_url("a.txt")

        parts = urlsplit(url)
        query = parse_qs(parts.query)
        assert "test-bucket" in url
        assert parts.path.endswith("/a.txt")
        assert query["X-Amz-Expires"] == ["60"]
        assert query["X-Amz-Algorithm"] == ["AWS4-HMAC-SHA256"]

    def test_upload_url_uses_custom_endpoint(self, full_settings):
        full_settings.S3_ENDPOINT_URL = "http://localhost:9000"
        client = S3StorageFactory().create(S3Config.from_settings(full_settings))

        view_url = client.get_file_view_url("a.txt", {"expires_in": 900})

        assert view_url.startswith("http://localhost:9000/test-bucket/a.txt?")
        assert parse_qs(urlsplit(view_url).query)["X-Amz-Expires"] == ["900"]


class TestAzureStorageFactory:
    def test_builds_container_client(self, full_settings):
        client = AzureStorageFactory().create(AzureConfig.from_settings(full_settings))

        assert isinstance(client, AzureBlobStorageClient)
        assert client.bucket == "media"
        url = client.get_file_view_url("a.txt")
        assert url.startswith(f"https://{FAKE_AZURE_ACCOUNT}.blob.core.windows.net/media/a.txt?")

    def test_client_construction_failure(self, full_settings):
        with patch(
            "cloudstore.infra.storage.factories.BlobServiceClient",
            side_effect=ValueError("Account URL must be a string."),
        ):
            with pytest.raises(StorageConfigurationError, match="Account URL"):
                AzureStorageFactory().create(AzureConfig.from_settings(full_settings))


class TestGoogleCloudStorageFactory:
    def test_uses_default_credentials_without_key_file(self, full_settings):
        with patch("cloudstore.infra.storage.factories.storage.Client") as mock_client:
            mock_client.return_value.bucket.return_value.name = "gcs-bucket"
            client = GoogleCloudStorageFactory().create(GCSConfig.from_settings(full_settings))

        assert isinstance(client, GCSStorageClient)
        assert client.bucket == "gcs-bucket"
        mock_client.assert_called_once_with(project="demo-project", credentials=None)
        mock_client.return_value.bucket.assert_called_once_with("gcs-bucket")

    def test_loads_service_account_key_file(self, full_settings):
        full_settings.GCS_KEY_FILENAME = "/secrets/gcs.json"
        credentials = MagicMock()

        with patch(
            "cloudstore.infra.storage.factories.service_account.Credentials.from_service_account_file",
            return_value=credentials,
        ) as mock_from_file, patch(
            "cloudstore.infra.storage.factories.storage.Client"
        ) as mock_client:
            mock_client.return_value.bucket.return_value.name = "gcs-bucket"
            GoogleCloudStorageFactory().create(GCSConfig.from_settings(full_settings))

        mock_from_file.assert_called_once_with("/secrets/gcs.json")
        mock_client.assert_called_once_with(project="demo-project", credentials=credentials)

    def test_missing_key_file_fails_fast(self, full_settings, tmp_path):
        full_settings.GCS_KEY_FILENAME = str(tmp_path / "missing.json")

        with pytest.raises(StorageConfigurationError, match="Failed to create GCS client"):
            GoogleCloudStorageFactory().create(GCSConfig.from_settings(full_settings))
