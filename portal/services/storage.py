"""
Object storage client for uploaded listing images.

The client is built once by ``initialize_storage`` during application startup and
handed to consumers through the ``get_storage`` dependency.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
import logging

import boto3

from portal.config import Settings
from portal.utils.exceptions import StorageConfigurationError

logger = logging.getLogger(__name__)

# Uploaded objects are publicly readable
UPLOAD_CONFIG: Dict[str, str] = {"ACL": "public-read"}


class StorageClient:
    """S3 bucket wrapper exposing upload and public URL helpers."""

    def __init__(self, client: Any, bucket_name: Optional[str], region: Optional[str]):
        self._client = client
        self._bucket_name = bucket_name
        self._region = region
        self._upload_config = dict(UPLOAD_CONFIG)

    @property
    def bucket_name(self) -> Optional[str]:
        return self._bucket_name

    @property
    def region(self) -> Optional[str]:
        return self._region

    @property
    def upload_config(self) -> Dict[str, str]:
        return dict(self._upload_config)

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket_name}.s3.{self._region}.amazonaws.com/{key}"

    def upload(self, key: str, body: bytes, content_type: str) -> str:
        """
        Store an object and return its public URL.

        Errors raised by the S3 client propagate unchanged.
        """
        logger.info(f"Uploading {len(body)} bytes to s3://{self._bucket_name}/{key}")
        self._client.put_object(
            Bucket=self._bucket_name,
            Key=key,
            Body=body,
            ContentType=content_type,
            **self._upload_config,
        )
        return self.public_url(key)


@dataclass(frozen=True)
class StorageInitResult:
    """Outcome of storage initialization: either a client or the configuration error."""

    client: Optional[StorageClient] = None
    error: Optional[StorageConfigurationError] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.client is not None

    def unwrap(self) -> StorageClient:
        if self.error is not None:
            raise self.error
        return self.client


def initialize_storage(
    settings: Settings,
    client_factory: Callable[..., Any] = boto3.client,
) -> StorageInitResult:
    """
    Build the storage client from configured credentials.

    Args:
        settings: Application settings holding the AWS values
        client_factory: Callable creating the low-level S3 client

    Returns:
        StorageInitResult with the client, or with a StorageConfigurationError
        when the access key or secret key is missing
    """
    missing = [
        name for name, value in (
            ("AWS_ACCESS_KEY_ID", settings.aws_access_key_id),
            ("AWS_SECRET_ACCESS_KEY", settings.aws_secret_access_key),
        )
        if not value
    ]
    if missing:
        error = StorageConfigurationError(missing)
        logger.error(str(error))
        return StorageInitResult(error=error)

    if not settings.aws_bucket_name or not settings.aws_region:
        logger.warning("AWS_BUCKET_NAME or AWS_REGION is not set; public URLs will be incomplete")

    client = client_factory(
        "s3",
        region_name=settings.aws_region,
        aws_access_key_id=settings.aws_access_key_id,
        aws_secret_access_key=settings.aws_secret_access_key,
    )
    logger.info(f"Storage client initialized for bucket {settings.aws_bucket_name}")
    return StorageInitResult(client=StorageClient(client, settings.aws_bucket_name, settings.aws_region))
