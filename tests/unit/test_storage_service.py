"""
Unit tests for StorageService.

Tests S3 upload, retry logic, and error handling.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from kintone_export.core.config import Settings
from kintone_export.core.exceptions import StorageError
from kintone_export.services.storage_service import (
    StorageConfig,
    StorageService,
    _retry_with_backoff,
)


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "PutObject")


@pytest.fixture
def s3_config():
    """Create S3 config for testing."""
    return StorageConfig(
        bucket_name="exports",
        region="ap-northeast-1",
        access_key="test-key",
        secret_key="test-secret",
    )


@pytest.fixture
def s3_service(s3_config):
    """Create StorageService with a mocked S3 client."""
    service = StorageService(s3_config)
    service._s3_client = MagicMock()
    return service


class TestStorageConfig:
    """Test configuration loading."""

    def test_from_settings(self):
        """Test config is read from the KINTONE_TO_S3 settings."""
        settings = Settings(
            _env_file=None,
            s3_bucket_name="exports",
            s3_region="us-east-1",
            s3_access_key="ak",
            s3_secret_key="sk",
        )
        config = StorageConfig.from_settings(settings)
        assert config.bucket_name == "exports"
        assert config.region == "us-east-1"
        assert config.access_key == "ak"
        assert config.secret_key == "sk"
        assert config.endpoint_url is None


class TestS3Client:
    """Test lazy S3 client creation."""

    def test_static_credentials(self, s3_config):
        """Test configured keys are passed to boto3."""
        with patch("kintone_export.services.storage_service.boto3.client") as mock_client:
            StorageService(s3_config).s3_client

        mock_client.assert_called_once_with(
            "s3",
            region_name="ap-northeast-1",
            aws_access_key_id="test-key",
            aws_secret_access_key="test-secret",
        )

    def test_default_credential_chain(self):
        """Test boto3 resolves credentials itself when none are configured."""
        with patch("kintone_export.services.storage_service.boto3.client") as mock_client:
            StorageService(StorageConfig(bucket_name="b", endpoint_url="http://minio:9000")).s3_client

        mock_client.assert_called_once_with("s3", endpoint_url="http://minio:9000")

    def test_client_cached(self, s3_config):
        """Test the client is created once."""
        with patch("kintone_export.services.storage_service.boto3.client") as mock_client:
            service = StorageService(s3_config)
            assert service.s3_client is service.s3_client
        assert mock_client.call_count == 1


class TestUploadBytes:
    """Test uploading export buffers."""

    def test_upload_public_read(self, s3_service):
        """Test the buffer is uploaded with a public-read ACL."""
        key = s3_service.upload_bytes(b"a,b\r\n", "golang-kintone-to-s3.csv")

        assert key == "golang-kintone-to-s3.csv"
        s3_service._s3_client.put_object.assert_called_once_with(
            Bucket="exports",
            Key="golang-kintone-to-s3.csv",
            Body=b"a,b\r\n",
            ACL="public-read",
        )

    def test_upload_without_acl(self, s3_service):
        """Test the bucket default ACL is used when none is given."""
        s3_service.upload_bytes(b"{}", "out.json", acl=None)
        s3_service._s3_client.put_object.assert_called_once_with(
            Bucket="exports", Key="out.json", Body=b"{}"
        )

    def test_missing_bucket(self):
        """Test uploads need a bucket."""
        with pytest.raises(StorageError):
            StorageService(StorageConfig(bucket_name="")).upload_bytes(b"x", "k")

    def test_non_retryable_error(self, s3_service):
        """Test access errors fail without retry."""
        s3_service._s3_client.put_object.side_effect = client_error("AccessDenied")

        with pytest.raises(StorageError) as exc_info:
            s3_service.upload_bytes(b"x", "k")

        assert s3_service._s3_client.put_object.call_count == 1
        assert exc_info.value.details["object_key"] == "k"


class TestRetry:
    """Test exponential backoff."""

    @patch("kintone_export.services.storage_service.time.sleep")
    def test_retry_then_success(self, mock_sleep):
        """Test transient errors are retried with growing delays."""
        func = MagicMock(side_effect=[client_error("SlowDown"), client_error("SlowDown"), "ok"])

        assert _retry_with_backoff(func, base_delay=1.0) == "ok"
        assert func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("kintone_export.services.storage_service.time.sleep")
    def test_retry_exhausted(self, mock_sleep):
        """Test the last error is raised after all retries."""
        func = MagicMock(side_effect=client_error("InternalError"))

        with pytest.raises(ClientError):
            _retry_with_backoff(func, max_retries=2)

        assert func.call_count == 3
        assert mock_sleep.call_count == 2
