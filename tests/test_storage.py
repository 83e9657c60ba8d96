"""
Tests for storage client initialization and uploads.
"""

import logging
import pytest
from unittest.mock import Mock
from fastapi import FastAPI

from portal.config import Settings, settings
from portal.main import lifespan
from portal.services.storage import StorageClient, initialize_storage, UPLOAD_CONFIG
from portal.utils.exceptions import StorageConfigurationError
from tests.conftest import FakeS3Client


def make_settings(**overrides) -> Settings:
    values = {
        "aws_access_key_id": "AKIATEST",
        "aws_secret_access_key": "secret",
        "aws_region": "eu-central-1",
        "aws_bucket_name": "test-bucket",
    }
    values.update(overrides)
    return Settings(**values)


class TestInitializeStorage:

    def test_missing_credentials_return_error(self):
        factory = Mock()

        result = initialize_storage(make_settings(aws_access_key_id=None), client_factory=factory)

        assert not result.ok
        assert result.client is None
        assert isinstance(result.error, StorageConfigurationError)
        assert result.error.missing == ["AWS_ACCESS_KEY_ID"]
        factory.assert_not_called()

    def test_missing_both_credentials_lists_both(self):
        result = initialize_storage(
            make_settings(aws_access_key_id=None, aws_secret_access_key=""),
            client_factory=Mock(),
        )

        assert result.error.missing == ["AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY"]
        assert "AWS credentials are not properly configured" in str(result.error)

    def test_unwrap_raises_configuration_error(self):
        result = initialize_storage(make_settings(aws_secret_access_key=None), client_factory=Mock())

        with pytest.raises(StorageConfigurationError):
            result.unwrap()

    def test_valid_credentials_build_client(self):
        factory = Mock(return_value=FakeS3Client())

        result = initialize_storage(make_settings(), client_factory=factory)

        assert result.ok
        assert result.error is None
        factory.assert_called_once_with(
            "s3",
            region_name="eu-central-1",
            aws_access_key_id="AKIATEST",
            aws_secret_access_key="secret",
        )
        client = result.unwrap()
        assert client.bucket_name == "test-bucket"
        assert client.region == "eu-central-1"

    def test_missing_bucket_only_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="portal.services.storage"):
            result = initialize_storage(make_settings(aws_bucket_name=None), client_factory=Mock())

        assert result.ok
        assert "AWS_BUCKET_NAME or AWS_REGION is not set" in caplog.text


class TestStorageClient:

    def test_upload_config_is_public_read(self, storage: StorageClient):
        assert storage.upload_config == {"ACL": "public-read"}
        assert UPLOAD_CONFIG == {"ACL": "public-read"}

    def test_upload_config_cannot_be_mutated(self, storage: StorageClient):
        config = storage.upload_config
        config["ACL"] = "private"

        assert storage.upload_config["ACL"] == "public-read"

    def test_bucket_name_is_stable(self, storage: StorageClient):
        assert storage.bucket_name == storage.bucket_name == "test-bucket"

    def test_upload_puts_public_object(self, storage: StorageClient, s3_client: FakeS3Client):
        url = storage.upload("properties/abc.png", b"data", "image/png")

        assert url == "https://test-bucket.s3.eu-central-1.amazonaws.com/properties/abc.png"
        assert s3_client.calls == [{
            "Bucket": "test-bucket",
            "Key": "properties/abc.png",
            "Body": b"data",
            "ContentType": "image/png",
            "ACL": "public-read",
        }]

    def test_client_errors_propagate(self):
        client = Mock()
        client.put_object.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            StorageClient(client, "bucket", "us-east-1").upload("key", b"x", "image/png")


class TestApplicationStartup:

    @pytest.mark.asyncio
    async def test_missing_credentials_stop_startup(self, monkeypatch):
        monkeypatch.setattr(settings, "aws_access_key_id", None)
        application = FastAPI()

        with pytest.raises(StorageConfigurationError):
            async with lifespan(application):
                pass

        assert not hasattr(application.state, "storage")
