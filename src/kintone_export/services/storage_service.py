"""
Storage service for uploading finished exports to S3.

Works with AWS S3 and S3-compatible storage (MinIO, etc.).
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from kintone_export.core.config import Settings
from kintone_export.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# Retry configuration
MAX_RETRIES = 3
BASE_DELAY = 1.0  # seconds

NON_RETRYABLE_ERRORS = ("NoSuchBucket", "AccessDenied", "Unauthorized")


def _retry_with_backoff(
    func: Any,
    *args: Any,
    max_retries: int = MAX_RETRIES,
    base_delay: float = BASE_DELAY,
    **kwargs: Any,
) -> Any:
    """
    Execute function with exponential backoff retry.

    Args:
        func: Function to execute
        *args: Function arguments
        max_retries: Maximum number of retry attempts
        base_delay: Base delay for exponential backoff
        **kwargs: Function keyword arguments

    Returns:
        Function result

    Raises:
        ClientError: Immediately for non-retryable codes, else after the last attempt
    """
    for attempt in range(max_retries + 1):
        try:
            return func(*args, **kwargs)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "")

            if error_code in NON_RETRYABLE_ERRORS:
                logger.error(f"Non-retryable S3 error: {error_code} - {e}")
                raise

            if attempt == max_retries:
                logger.error(f"Retry failed after {max_retries} attempts: {e}")
                raise

            delay = base_delay * (2 ** attempt)
            logger.warning(f"Retry {attempt + 1}/{max_retries} after {delay:.1f}s: {e}")
            time.sleep(delay)


@dataclass
class StorageConfig:
    """S3 storage configuration."""

    bucket_name: str
    region: Optional[str] = None
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    endpoint_url: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "StorageConfig":
        """Create config from loaded settings."""
        return cls(
            bucket_name=settings.s3_bucket_name or "",
            region=settings.s3_region,
            access_key=settings.s3_access_key,
            secret_key=settings.s3_secret_key,
            endpoint_url=settings.s3_endpoint_url,
        )


class StorageService:
    """Service uploading export buffers to an S3 bucket."""

    def __init__(self, config: StorageConfig) -> None:
        """Initialize storage service.

        Args:
            config: S3 storage configuration
        """
        self.config = config
        self._s3_client: Optional[BaseClient] = None

    @property
    def s3_client(self) -> BaseClient:
        """Get or create S3 client.

        Static credentials are used when both keys are configured; otherwise
        boto3 falls back to its default credential chain.
        """
        if self._s3_client is None:
            client_kwargs: dict[str, Any] = {}
            if self.config.region:
                client_kwargs["region_name"] = self.config.region
            if self.config.access_key and self.config.secret_key:
                client_kwargs["aws_access_key_id"] = self.config.access_key
                client_kwargs["aws_secret_access_key"] = self.config.secret_key

            # Add endpoint_url for S3-compatible storage (MinIO, etc.)
            if self.config.endpoint_url:
                client_kwargs["endpoint_url"] = self.config.endpoint_url

            self._s3_client = boto3.client("s3", **client_kwargs)

        return self._s3_client

    def upload_bytes(
        self,
        data: bytes,
        object_key: str,
        acl: Optional[str] = "public-read",
    ) -> str:
        """Upload bytes to S3 storage.

        Args:
            data: Bytes data to upload
            object_key: S3 object key (path in bucket)
            acl: Canned ACL for the object, None to use the bucket default

        Returns:
            The object key

        Raises:
            StorageError: If no bucket is configured or the upload fails
        """
        if not self.config.bucket_name:
            raise StorageError("S3 bucket name is required", object_key=object_key)

        extra_args: dict[str, Any] = {}
        if acl:
            extra_args["ACL"] = acl

        try:
            _retry_with_backoff(
                self.s3_client.put_object,
                Bucket=self.config.bucket_name,
                Key=object_key,
                Body=data,
                **extra_args,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload bytes: {e}")
            raise StorageError(f"S3 upload failed: {e}", object_key=object_key) from e

        logger.info(f"Uploaded {len(data)} bytes to s3://{self.config.bucket_name}/{object_key}")
        return object_key
