"""S3-compatible storage provider.

Stores each key as an object in a single bucket. Works with AWS S3, MinIO,
and other S3-compatible object storage services.

Dependencies:
    - boto3
    - botocore
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.infra.storage.provider import InitializationError, StorageWriteError

if TYPE_CHECKING:
    from app.common.config import Settings

logger = logging.getLogger("storage")

CONTENT_TYPE = "application/octet-stream"
# us-east-1 rejects an explicit LocationConstraint
DEFAULT_REGION = "us-east-1"
_MISSING_BUCKET_CODES = {"404", "NoSuchBucket", "NotFound"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3StorageProvider:
    """Object-store backend writing one object per key into a bucket.

    The bucket is created on ``initialize()`` when it does not exist yet.
    """

    def __init__(self, *, settings: "Settings") -> None:
        """Build the S3 client from settings.

        Args:
            settings: Application settings containing S3 configuration.

        Raises:
            InitializationError: If the client cannot be constructed, e.g.
                because the endpoint URL is malformed.
        """
        self.bucket = settings.S3_BUCKET
        self.endpoint_url = settings.S3_ENDPOINT_URL
        self.region = settings.S3_REGION
        try:
            self._client = self._build_client(settings)
        except (BotoCoreError, ValueError) as exc:
            raise InitializationError(
                f"Failed to create S3 client for '{settings.S3_ENDPOINT_URL}': {exc}"
            ) from exc

    @staticmethod
    def _build_client(settings: "Settings") -> Any:
        """Create a boto3 S3 client from settings."""
        addressing_style = (settings.S3_ADDRESSING_STYLE or "path").strip().lower()
        config = Config(s3={"addressing_style": addressing_style})

        return boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            region_name=settings.S3_REGION,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            use_ssl=bool(settings.S3_USE_SSL),
            config=config,
        )

    def initialize(self) -> None:
        """Verify the bucket exists, creating it when missing."""
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except ClientError as exc:
            if _error_code(exc) not in _MISSING_BUCKET_CODES:
                raise InitializationError(
                    f"Failed to access bucket '{self.bucket}': {exc}"
                ) from exc
            self._create_bucket()
        except BotoCoreError as exc:
            raise InitializationError(
                f"Failed to reach object store at '{self.endpoint_url}': {exc}"
            ) from exc
        else:
            logger.info("Bucket already exists: %s", self.bucket)
        logger.info("S3 storage initialized - Bucket: %s", self.bucket)

    def _create_bucket(self) -> None:
        params: dict[str, Any] = {"Bucket": self.bucket}
        if self.region and self.region != DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}

        logger.info("Creating bucket: %s", self.bucket)
        try:
            self._client.create_bucket(**params)
        except ClientError as exc:
            # Another initializer created it between our check and create
            if _error_code(exc) == "BucketAlreadyOwnedByYou":
                logger.info("Bucket created concurrently: %s", self.bucket)
                return
            raise InitializationError(
                f"Failed to create bucket '{self.bucket}': {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise InitializationError(
                f"Failed to create bucket '{self.bucket}': {exc}"
            ) from exc
        logger.info("Successfully created bucket: %s", self.bucket)

    def store(self, key: str, data: bytes) -> None:
        logger.info("Storing file to bucket '%s': %s", self.bucket, key)
        try:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=CONTENT_TYPE,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteError(
                f"Failed to store '{key}' to bucket '{self.bucket}': {exc}", key=key
            ) from exc
        logger.info("Successfully stored object: %s (%d bytes)", key, len(data))

    def describe(self) -> str:
        return f"S3 [bucket: {self.bucket}]"


__all__ = ["S3StorageProvider"]
